"""
Analysis pipeline
=================

This is the heart of the project. One run goes strictly forward:

1) Load dataset   -> pandas DataFrame (loader.py)
2) Project rows   -> list of StormEvent records (projector.py)
3) Normalize      -> list of NormalizedEvent with damage in US$ (normalize.py)
4) Aggregate      -> six sorted AggregateRow tables (aggregate.py)

Any error aborts the run before an aggregate is produced, so callers never
see partial results.
"""

from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Mapping, Optional
import logging

import pandas as pd

from .aggregate import aggregate_all, top_n
from .config import AnalysisConfig
from .loader import load_storm_data
from .models import AggregateRow, NormalizedEvent
from .normalize import EXPONENT_MULTIPLIERS, normalize_events
from .projector import project_table

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Normalized events plus the six aggregated tables."""
    events: List[NormalizedEvent]
    aggregations: "OrderedDict[str, List[AggregateRow]]"
    # records dropped by on_unknown="skip"
    skipped: int = 0
    source: Optional[str] = None
    raw_rows: int = field(default=0)

    def top(self, measure: str, n: int = 5) -> List[AggregateRow]:
        return top_n(self.aggregations[measure], n)


def analyze_table(
    df: pd.DataFrame,
    *,
    table: Mapping[str, int] = EXPONENT_MULTIPLIERS,
    on_unknown: str = "raise",
) -> AnalysisResult:
    """Project, normalize and aggregate an already parsed table."""
    events = project_table(df)
    logger.info("Projected %d events", len(events))

    normalized = normalize_events(events, table=table, on_unknown=on_unknown)
    skipped = len(events) - len(normalized)

    aggregations = aggregate_all(normalized)
    for name, rows in aggregations.items():
        logger.debug("%s: %d event types with a positive total", name, len(rows))

    return AnalysisResult(
        events=normalized,
        aggregations=aggregations,
        skipped=skipped,
        raw_rows=len(df),
    )


def run_analysis(config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    """Load the configured dataset and analyze it."""
    config = config or AnalysisConfig()
    df = load_storm_data(config)
    result = analyze_table(df, on_unknown=config.on_unknown)
    result.source = config.data_path or config.data_url
    return result
