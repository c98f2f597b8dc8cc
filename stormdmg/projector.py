"""
Projector (raw row -> StormEvent)
=================================

The storm data export has 37 columns; the analysis needs eight of them.
This module keeps those eight and converts each row into a `StormEvent`.

Key ideas:
- Event type and exponent codes are plain text from here on (no categories).
- Missing cells become "" (text) or 0 (numbers); everything else must parse.
- Unused columns are dropped silently.
"""

from __future__ import annotations
from typing import Any, List, Mapping
import math

import pandas as pd

from .errors import InvalidValueError, MissingFieldError
from .models import RefNum, StormEvent

REQUIRED_FIELDS = (
    "REFNUM",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
)


def _is_missing(x: Any) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x)) or x is pd.NA


def _to_str(x: Any) -> str:
    if _is_missing(x): return ""
    return str(x)


def _to_number(x: Any, name: str) -> float:
    """Parse a cell as a finite, non-negative float."""
    try:
        v = float(x)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidValueError(f"{name} must be a number, got {x!r}") from e
    if not math.isfinite(v) or v < 0:
        raise InvalidValueError(f"{name} must be a finite non-negative number, got {x!r}")
    return v


def _to_count(x: Any, name: str) -> int:
    """Convert a cell to a non-negative int ("3", 3.0 and 3 are all 3)."""
    if _is_missing(x) or (isinstance(x, str) and not x.strip()): return 0
    v = _to_number(x, name)
    if not v.is_integer():
        raise InvalidValueError(f"{name} must be a whole number, got {x!r}")
    return int(v)


def _to_magnitude(x: Any, name: str) -> float:
    if _is_missing(x) or (isinstance(x, str) and not x.strip()): return 0.0
    return _to_number(x, name)


def _to_ref(x: Any) -> RefNum:
    if isinstance(x, str):
        s = x.strip()
        return int(s) if s.isdigit() else s
    if isinstance(x, float) and x.is_integer():
        return int(x)
    return x


def check_fields(columns) -> None:
    """Raise MissingFieldError naming every required column not in `columns`."""
    present = set(columns)
    missing = [f for f in REQUIRED_FIELDS if f not in present]
    if missing:
        raise MissingFieldError(missing)


def project_record(raw: Mapping[str, Any]) -> StormEvent:
    """Project one raw record (column name -> cell) into a StormEvent."""
    check_fields(raw.keys())
    return StormEvent(
        ref_num=_to_ref(raw["REFNUM"]),
        event_type=_to_str(raw["EVTYPE"]),
        fatalities=_to_count(raw["FATALITIES"], "FATALITIES"),
        injuries=_to_count(raw["INJURIES"], "INJURIES"),
        prop_dmg=_to_magnitude(raw["PROPDMG"], "PROPDMG"),
        prop_dmg_exp=_to_str(raw["PROPDMGEXP"]),
        crop_dmg=_to_magnitude(raw["CROPDMG"], "CROPDMG"),
        crop_dmg_exp=_to_str(raw["CROPDMGEXP"]),
    )


def project_table(df: pd.DataFrame) -> List[StormEvent]:
    """Project every row of a parsed table, in file order."""
    check_fields(df.columns)
    rows = df[list(REQUIRED_FIELDS)].to_dict("records")
    return [project_record(r) for r in rows]
