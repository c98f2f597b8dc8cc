"""
Aggregation by event type
=========================

Every result table in the analysis is the same operation with a different
measure:

    group by event_type -> sum measure -> drop totals <= 0 -> sort descending

Grouping is exact string equality on `event_type` (no trimming, no case
folding). Ties in the final order keep the order in which each event type
was first encountered, so results are reproducible.

Sums can also be built in shards (`partial_sums`) and combined afterwards
(`merge_partials`); filtering and sorting always happen once, on the merged
totals.
"""

from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, Union
import math

from .dsa import merge_sort
from .models import AggregateRow, NormalizedEvent

Number = Union[int, float]


@dataclass(frozen=True)
class Measure:
    name: str
    getter: Callable[[NormalizedEvent], Number]
    integer: bool


MEASURES: Dict[str, Measure] = OrderedDict(
    (m.name, m)
    for m in (
        Measure("fatalities", lambda e: e.fatalities, True),
        Measure("injuries", lambda e: e.injuries, True),
        Measure("total_affected", lambda e: e.total_affected, True),
        Measure("property_damage_usd", lambda e: e.property_damage_usd, False),
        Measure("crop_damage_usd", lambda e: e.crop_damage_usd, False),
        Measure("total_damage_usd", lambda e: e.total_damage_usd, False),
    )
)

_ALIASES = {
    "deaths": "fatalities",
    "affected": "total_affected",
    "property": "property_damage_usd",
    "propdmg": "property_damage_usd",
    "crop": "crop_damage_usd",
    "cropdmg": "crop_damage_usd",
    "damage": "total_damage_usd",
    "total_damage": "total_damage_usd",
}

# The six tables of the report, in presentation order
AGGREGATIONS: Tuple[Tuple[str, str], ...] = (
    ("fatalities", "Total fatalities by event type"),
    ("injuries", "Total injuries by event type"),
    ("total_affected", "Total fatalities and injuries by event type"),
    ("property_damage_usd", "Total property damage (US$) by event type"),
    ("crop_damage_usd", "Total crop damage (US$) by event type"),
    ("total_damage_usd", "Total property and crop damage (US$) by event type"),
)


def measure_key(field: Union[str, Measure]) -> Measure:
    """Resolve a measure name (or alias) to its Measure."""
    if isinstance(field, Measure):
        return field
    f = field.lower().strip()
    f = _ALIASES.get(f, f)
    if f not in MEASURES:
        raise ValueError(f"measure must be one of: {', '.join(MEASURES)}")
    return MEASURES[f]


def partial_sums(records: Iterable[NormalizedEvent], measure: Union[str, Measure]) -> "OrderedDict[str, Number]":
    """Sum one measure per event type, keyed in first-encounter order."""
    m = measure_key(measure)
    if m.integer:
        totals: "OrderedDict[str, Number]" = OrderedDict()
        for e in records:
            totals[e.event_type] = totals.get(e.event_type, 0) + m.getter(e)
        return totals

    values: "OrderedDict[str, List[float]]" = OrderedDict()
    for e in records:
        values.setdefault(e.event_type, []).append(m.getter(e))
    return OrderedDict((k, math.fsum(v)) for k, v in values.items())


def merge_partials(partials: Sequence[Dict[str, Number]], measure: Union[str, Measure]) -> List[AggregateRow]:
    """Combine shard sums, drop totals <= 0 and sort descending (stable)."""
    m = measure_key(measure)
    merged: "OrderedDict[str, List[Number]]" = OrderedDict()
    for part in partials:
        for k, v in part.items():
            merged.setdefault(k, []).append(v)

    rows: List[AggregateRow] = []
    for k, vs in merged.items():
        total = sum(vs) if m.integer else math.fsum(vs)
        if total > 0:
            rows.append(AggregateRow(event_type=k, measure_total=total))
    return merge_sort(rows, key=lambda r: r.measure_total, reverse=True)


def aggregate(records: Iterable[NormalizedEvent], measure: Union[str, Measure]) -> List[AggregateRow]:
    """Total `measure` per event type, positive totals only, largest first."""
    return merge_partials([partial_sums(records, measure)], measure)


def top_n(rows: Sequence[AggregateRow], n: int) -> List[AggregateRow]:
    if n < 0:
        raise ValueError("n must be >= 0")
    return list(rows[:n])


def aggregate_all(records: Sequence[NormalizedEvent]) -> "OrderedDict[str, List[AggregateRow]]":
    """Run the six standard aggregations."""
    return OrderedDict((name, aggregate(records, name)) for name, _ in AGGREGATIONS)


def aggregation_title(measure: str) -> str:
    name = measure_key(measure).name
    for n, title in AGGREGATIONS:
        if n == name:
            return title
    return name
