"""
Damage normalization (exponent code -> US$)
===========================================

The storm database stores each damage figure as a magnitude plus a one-letter
exponent code, e.g. PROPDMG=2.5 with PROPDMGEXP="K" means US$ 2,500.

This module provides:
- `EXPONENT_MULTIPLIERS`: the read-only code -> multiplier table
- `multiplier` / `damage_usd`: lookups for a single value
- `normalize_event(s)`: attach property/crop damage in US$ to each event

The table is deliberately partial: the digit "9" and any other character have
no multiplier and raise `UnknownExponentCodeError`.
"""

from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Union

from .errors import UnknownExponentCodeError
from .models import NormalizedEvent, StormEvent

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _build_table() -> Mapping[str, int]:
    table = {"-": 0, "?": 0, "": 0, "+": 1}
    for digit in "012345678":
        table[digit] = 10
    for letters, value in (("Hh", 100), ("Kk", 1_000), ("Mm", 1_000_000), ("Bb", 1_000_000_000)):
        for c in letters:
            table[c] = value
    return MappingProxyType(table)


EXPONENT_MULTIPLIERS: Mapping[str, int] = _build_table()

UNKNOWN_POLICIES = ("raise", "skip")


def multiplier(code: str, table: Mapping[str, int] = EXPONENT_MULTIPLIERS) -> int:
    """Return the multiplier for an exponent code.

    Blank input ("" or whitespace only) maps to the blank entry. No other
    trimming or case folding is applied.

    Raises:
        UnknownExponentCodeError: if the code is not in `table`.
    """
    key = "" if not code.strip() else code
    try:
        return table[key]
    except KeyError:
        raise UnknownExponentCodeError(code) from None


def damage_usd(magnitude: Number, code: str, table: Mapping[str, int] = EXPONENT_MULTIPLIERS) -> Number:
    """magnitude x multiplier(code), unrounded."""
    return magnitude * multiplier(code, table)


def normalize_event(event: StormEvent, table: Mapping[str, int] = EXPONENT_MULTIPLIERS) -> NormalizedEvent:
    return NormalizedEvent(
        event=event,
        property_damage_usd=damage_usd(event.prop_dmg, event.prop_dmg_exp, table),
        crop_damage_usd=damage_usd(event.crop_dmg, event.crop_dmg_exp, table),
    )


def normalize_events(
    events: Iterable[StormEvent],
    table: Mapping[str, int] = EXPONENT_MULTIPLIERS,
    on_unknown: str = "raise",
) -> List[NormalizedEvent]:
    """Normalize every event.

    `on_unknown` decides what happens to a record with an unmapped code:
    - "raise": propagate UnknownExponentCodeError (whole run aborts)
    - "skip":  drop the record and log a warning

    A substitute multiplier is never used.
    """
    if on_unknown not in UNKNOWN_POLICIES:
        raise ValueError(f"on_unknown must be one of {UNKNOWN_POLICIES}, got {on_unknown!r}")

    out: List[NormalizedEvent] = []
    skipped = 0
    for e in events:
        try:
            out.append(normalize_event(e, table))
        except UnknownExponentCodeError as ex:
            if on_unknown == "raise":
                raise
            skipped += 1
            logger.warning("Skipping record %s (%s): %s", e.ref_num, e.event_type, ex)
    if skipped:
        logger.warning("Skipped %d record(s) with unknown exponent codes", skipped)
    return out
