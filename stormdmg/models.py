"""
Data model (StormEvent, NormalizedEvent, AggregateRow)
======================================================

Each row of the NOAA storm data export is projected into a `StormEvent`.
Records are immutable (`frozen=True`):
- events are never modified after loading, and
- derived damage values live in a separate `NormalizedEvent` that carries
  the original event by value.

`AggregateRow` is one (event type, summed measure) pair in a sorted result.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

RefNum = Union[int, str]


@dataclass(frozen=True)
class StormEvent:
    """One storm event, restricted to the eight columns used by the analysis."""
    ref_num: RefNum
    # free text, kept exactly as recorded ("TSTM WIND" and "THUNDERSTORM WIND" stay apart)
    event_type: str
    fatalities: int
    injuries: int
    prop_dmg: float
    prop_dmg_exp: str
    crop_dmg: float
    crop_dmg_exp: str

    @property
    def total_affected(self) -> int:
        return self.fatalities + self.injuries


@dataclass(frozen=True)
class NormalizedEvent:
    """A StormEvent plus its damage figures converted to US$."""
    event: StormEvent
    property_damage_usd: float
    crop_damage_usd: float

    @property
    def event_type(self) -> str:
        return self.event.event_type

    @property
    def fatalities(self) -> int:
        return self.event.fatalities

    @property
    def injuries(self) -> int:
        return self.event.injuries

    @property
    def total_affected(self) -> int:
        return self.event.total_affected

    @property
    def total_damage_usd(self) -> float:
        return self.property_damage_usd + self.crop_damage_usd


@dataclass(frozen=True)
class AggregateRow:
    """Summed measure for one event type."""
    event_type: str
    measure_total: Union[int, float]
