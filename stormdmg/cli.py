"""
Command Line Interface (CLI)
============================

Run the whole analysis in one go:

    python -m stormdmg.cli
    python -m stormdmg.cli --data StormData.csv.bz2 --top 10 --report report.docx

The dataset is downloaded once into --cache-dir and reused on later runs.
Exit status is 0 on success and 1 when the run fails (download, missing
column, unknown exponent code, ...).
"""

from __future__ import annotations
import argparse, logging, os, sys
from typing import List, Optional

from .config import AnalysisConfig, DEFAULT_CACHE_DIR, DEFAULT_DATA_URL
from .errors import StormError
from .pipeline import run_analysis
from .report import DatasetCitation, ReportConfig, format_summary, generate_docx_report, write_charts

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="stormdmg",
        description="Rank storm event types by health and economic impact.",
    )
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--data", help="Local storm data CSV (plain or compressed); skips the download")
    src.add_argument("--url", default=DEFAULT_DATA_URL, help="Dataset URL")
    ap.add_argument("--cache-dir", default=DEFAULT_CACHE_DIR, help="Where the downloaded file is kept")
    ap.add_argument("--force-download", action="store_true", help="Download even if a cached copy exists")
    ap.add_argument("--top", type=int, default=5, help="Event types per table (default: 5)")
    ap.add_argument("--on-unknown", choices=("raise", "skip"), default="raise",
                    help="Unknown damage exponent code: abort the run or skip the record")
    ap.add_argument("--charts", metavar="DIR", help="Write PNG bar charts into DIR")
    ap.add_argument("--report", metavar="OUT.docx", help="Write a DOCX report")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point.

    1) Load + analyze the dataset
    2) Print the six top-N tables
    3) Optionally write charts and a DOCX report
    """
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.top < 0:
        ap.error("--top must be >= 0")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = AnalysisConfig.from_args(args)

    print("Loading dataset...")
    try:
        result = run_analysis(config)
    except StormError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1

    print(f"Analysed {len(result.events)} events.")
    if result.skipped:
        print(f"Skipped {result.skipped} record(s) with unknown exponent codes.")
    print()
    print(format_summary(result, top=config.top_n))

    if config.chart_dir:
        for path in write_charts(result, config.chart_dir, top=config.top_n):
            logger.info("Wrote chart %s", path)
        print(f"\nCharts written to {config.chart_dir}")

    if config.report_path:
        cfg = ReportConfig(
            top_n=config.top_n,
            citation=DatasetCitation(file_name=os.path.basename(config.data_path or config.file_name)),
            command_line=" ".join(["stormdmg"] + (argv if argv is not None else sys.argv[1:])),
        )
        generate_docx_report(result, config.report_path, config=cfg)
        print(f"Report written to {config.report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
