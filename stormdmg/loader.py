"""
Dataset loader (download -> cached file -> DataFrame)
=====================================================

The storm data is a single bz2-compressed CSV (~47 MB). We download it once
into a local cache directory and read it from there on later runs.

Only the eight columns used by the analysis are read; a missing column is
reported later by the projector as `MissingFieldError`.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import requests

from .config import AnalysisConfig, DEFAULT_CACHE_DIR, DEFAULT_DATA_URL, DEFAULT_FILE_NAME
from .errors import LoadError
from .projector import REQUIRED_FIELDS

logger = logging.getLogger(__name__)

# read as text so codes like "0" and "+" are not turned into numbers
_TEXT_COLUMNS = {"EVTYPE": str, "PROPDMGEXP": str, "CROPDMGEXP": str}


def fetch_dataset(
    url: str = DEFAULT_DATA_URL,
    cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
    file_name: str = DEFAULT_FILE_NAME,
    *,
    force: bool = False,
    timeout: float = 60.0,
) -> Path:
    """Download `url` into `cache_dir/file_name` unless it is already there.

    Returns:
        Path to the cached file.
    """
    target = Path(cache_dir) / file_name
    if target.exists() and not force:
        logger.info("Using cached dataset %s", target)
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    part = target.with_name(target.name + ".part")
    logger.info("Downloading %s -> %s", url, target)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(part, "wb") as f:
                for chunk in response.iter_content(chunk_size=1 << 16):
                    f.write(chunk)
    except (requests.RequestException, OSError) as e:
        part.unlink(missing_ok=True)
        raise LoadError(f"Could not download dataset from {url}: {e}") from e

    part.replace(target)
    logger.info("Downloaded %.1f MB", target.stat().st_size / 1024 / 1024)
    return target


def read_storm_csv(path: Union[str, Path]) -> pd.DataFrame:
    """Read the storm CSV (compression inferred from the suffix)."""
    path = Path(path)
    if not path.exists():
        raise LoadError(f"Dataset file not found: {path}")
    try:
        df = pd.read_csv(
            path,
            usecols=lambda c: c in REQUIRED_FIELDS,
            dtype=_TEXT_COLUMNS,
            keep_default_na=False,
            na_values={c: [""] for c in REQUIRED_FIELDS if c not in _TEXT_COLUMNS},
            compression="infer",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError, EOFError) as e:
        raise LoadError(f"Could not parse {path} as CSV: {e}") from e
    logger.info("Read %d rows x %d columns from %s", len(df), len(df.columns), path)
    return df


def load_storm_data(config: Optional[AnalysisConfig] = None) -> pd.DataFrame:
    """Fetch (or reuse) the dataset named by `config` and parse it."""
    config = config or AnalysisConfig()
    if config.data_path:
        path = Path(config.data_path)
    else:
        path = fetch_dataset(
            config.data_url,
            config.cache_dir,
            config.file_name,
            force=config.force_download,
            timeout=config.timeout,
        )
    return read_storm_csv(path)
