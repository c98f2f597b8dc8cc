"""
Run configuration
=================

All knobs of one analysis run live in `AnalysisConfig`. The CLI builds it
from its arguments; library users can construct it directly.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATA_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
DEFAULT_FILE_NAME = "StormData.csv.bz2"
DEFAULT_CACHE_DIR = "data"


@dataclass
class AnalysisConfig:
    """Where the data comes from and what the run produces."""
    data_url: str = DEFAULT_DATA_URL
    cache_dir: str = DEFAULT_CACHE_DIR
    file_name: str = DEFAULT_FILE_NAME
    # local CSV to use instead of downloading
    data_path: Optional[str] = None
    force_download: bool = False
    timeout: float = 60.0

    # "raise" aborts on an unknown exponent code, "skip" drops the record
    on_unknown: str = "raise"

    top_n: int = 5
    chart_dir: Optional[str] = None
    report_path: Optional[str] = None

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir) / self.file_name

    @classmethod
    def from_args(cls, args) -> "AnalysisConfig":
        return cls(
            data_url=args.url,
            cache_dir=args.cache_dir,
            data_path=args.data,
            force_download=args.force_download,
            on_unknown=args.on_unknown,
            top_n=args.top,
            chart_dir=args.charts,
            report_path=args.report,
        )
