from __future__ import annotations

"""
Report generator
----------------
Turns an `AnalysisResult` into:
- plain-text top-N tables (printed by the CLI),
- PNG bar charts (matplotlib),
- a DOCX report with tables, charts and a reproducibility footer (python-docx).

Rounding happens here only: US$ totals are shown in billions, counts as
whole numbers. The aggregated values themselves are never rounded.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import os
import tempfile

from .aggregate import AGGREGATIONS, aggregation_title, measure_key
from .models import AggregateRow
from .normalize import EXPONENT_MULTIPLIERS


HEALTH_MEASURES = ("fatalities", "injuries", "total_affected")
ECONOMIC_MEASURES = ("property_damage_usd", "crop_damage_usd", "total_damage_usd")


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "NOAA Storm Events Database"
    institutional_author: str = "U.S. National Oceanic and Atmospheric Administration (NOAA)"
    website: str = "https://www.ncdc.noaa.gov/stormevents/"
    file_name: Optional[str] = None
    file_note: Optional[str] = "Storm data export, 1950 to November 2011."


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Health and Economic Impact of Severe Weather Events in the U.S."
    subtitle: str = "Analysis of the NOAA Storm Database"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # How many event types to show in each table / chart
    top_n: int = 5

    # Optional: the command line that produced the run
    command_line: Optional[str] = None


# -----------------------------
# Text tables
# -----------------------------

def unit_for(measure: str) -> str:
    """'billions' for US$ measures, 'count' for people."""
    return "count" if measure_key(measure).integer else "billions"


def format_value(value: float, unit: str) -> str:
    if unit == "billions":
        return f"{value / 1e9:,.2f}"
    if unit == "count":
        return f"{int(value):,}"
    raise ValueError("unit must be: count | billions")


def _column_label(unit: str) -> str:
    return "US$ billions" if unit == "billions" else "Total"


def format_table(rows: Sequence[AggregateRow], title: str, *, top: int = 5, unit: str = "count") -> str:
    """Render the first `top` rows as a fixed-width text table."""
    shown = list(rows[:top])
    label = _column_label(unit)
    values = [format_value(r.measure_total, unit) for r in shown]
    w_type = max([len("Event type")] + [len(r.event_type) for r in shown])
    w_val = max([len(label)] + [len(v) for v in values])

    lines = [title, "-" * len(title)]
    lines.append(f"{'Event type':<{w_type}}  {label:>{w_val}}")
    for r, v in zip(shown, values):
        lines.append(f"{r.event_type:<{w_type}}  {v:>{w_val}}")
    if not shown:
        lines.append("(no event types with a positive total)")
    return "\n".join(lines)


def format_summary(result, top: int = 5) -> str:
    """All six tables, separated by blank lines."""
    blocks = []
    for measure, title in AGGREGATIONS:
        rows = result.aggregations[measure]
        blocks.append(format_table(rows, f"Top {top}: {title}", top=top, unit=unit_for(measure)))
    return "\n\n".join(blocks)


# -----------------------------
# Charts
# -----------------------------

def _pyplot():
    """Lazy import so text output works without a plotting backend installed."""
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install it with: python -m pip install matplotlib"
        ) from e
    return plt


def _bar_axes(ax, rows: Sequence[AggregateRow], title: str, unit: str) -> None:
    import numpy as np

    labels = [r.event_type for r in rows]
    values = np.array([float(r.measure_total) for r in rows])
    if unit == "billions":
        values = values / 1e9
    x = np.arange(len(labels))
    ax.bar(x, values, color="C0")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_title(title, fontsize=10)
    ax.set_ylabel("US$ billions" if unit == "billions" else "People")


def plot_top_bars(
    rows: Sequence[AggregateRow],
    title: str,
    path: str,
    *,
    top: int = 5,
    unit: str = "count",
) -> str:
    """Bar chart of the first `top` rows, saved as PNG at `path`."""
    plt = _pyplot()
    fig, ax = plt.subplots(figsize=(7, 4.5))
    _bar_axes(ax, list(rows[:top]), title, unit)
    fig.tight_layout()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def _panel_figure(result, measures: Sequence[str], path: str, suptitle: str, top: int) -> str:
    plt = _pyplot()
    fig, axes = plt.subplots(1, len(measures), figsize=(5 * len(measures), 5))
    for ax, measure in zip(axes, measures):
        _bar_axes(ax, result.aggregations[measure][:top], aggregation_title(measure), unit_for(measure))
    fig.suptitle(suptitle)
    fig.tight_layout()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def health_figure(result, path: str, top: int = 5) -> str:
    """Fatalities, injuries and their sum for the top event types."""
    return _panel_figure(result, HEALTH_MEASURES, path, f"Top {top} event types harmful to population health", top)


def economic_figure(result, path: str, top: int = 5) -> str:
    """Property, crop and combined damage for the top event types."""
    return _panel_figure(result, ECONOMIC_MEASURES, path, f"Top {top} event types by economic damage", top)


def write_charts(result, out_dir: str, top: int = 5) -> List[str]:
    """Write the two summary figures plus one chart per aggregation."""
    paths = [
        health_figure(result, os.path.join(out_dir, "health.png"), top),
        economic_figure(result, os.path.join(out_dir, "economic.png"), top),
    ]
    for measure, title in AGGREGATIONS:
        paths.append(plot_top_bars(
            result.aggregations[measure],
            f"Top {top}: {title}",
            os.path.join(out_dir, f"top_{measure}.png"),
            top=top,
            unit=unit_for(measure),
        ))
    return paths


# -----------------------------
# DOCX report
# -----------------------------

def _exponent_rows() -> List[Tuple[str, str]]:
    """Group the multiplier table by value for display ('K, k' -> 1,000)."""
    by_value = {}
    for code, value in EXPONENT_MULTIPLIERS.items():
        by_value.setdefault(value, []).append(repr(code) if code == "" else code)
    return [(", ".join(codes), f"{value:,}") for value, codes in sorted(by_value.items())]


def generate_docx_report(result, out_path: str, *, config: Optional[ReportConfig] = None) -> str:
    """
    Generate a DOCX report (tables + charts) for an analysis result.

    Charts are rendered into a temporary directory and embedded.
    """
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    if not result.events:
        raise ValueError("No events to report on (result set is empty).")

    top = config.top_n
    with tempfile.TemporaryDirectory(prefix="stormdmg_report_") as tmpdir:
        health_png = health_figure(result, os.path.join(tmpdir, "health.png"), top)
        economic_png = economic_figure(result, os.path.join(tmpdir, "economic.png"), top)

        doc = Document()
        style = doc.styles["Normal"]
        style.font.name = "Calibri"
        style.font.size = Pt(11)

        def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
            p = doc.add_paragraph()
            r = p.add_run(text)
            r.bold = bold
            r.italic = italic
            r.font.size = Pt(size)
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER

        def _table(rows: Sequence[AggregateRow], unit: str) -> None:
            t = doc.add_table(rows=1, cols=3)
            h = t.rows[0].cells
            h[0].text = "Rank"
            h[1].text = "Event type"
            h[2].text = _column_label(unit)
            for i, r in enumerate(rows[:top], start=1):
                cells = t.add_row().cells
                cells[0].text = str(i)
                cells[1].text = r.event_type
                cells[2].text = format_value(r.measure_total, unit)

        _center_title(config.title, 20, bold=True)
        _center_title(config.subtitle, 12, italic=True)

        # Synopsis
        doc.add_heading("Synopsis", level=1)
        lead_health = result.aggregations["total_affected"][:1]
        lead_damage = result.aggregations["total_damage_usd"][:1]
        synopsis = f"{len(result.events):,} storm events were analysed."
        if lead_health:
            synopsis += f" {lead_health[0].event_type} is the most harmful event type to population health."
        if lead_damage:
            synopsis += f" {lead_damage[0].event_type} has the greatest economic consequences."
        doc.add_paragraph(synopsis)

        # Data processing
        doc.add_heading("Data processing", level=1)
        doc.add_paragraph(
            "Eight columns are kept: REFNUM, EVTYPE, FATALITIES, INJURIES, PROPDMG, "
            "PROPDMGEXP, CROPDMG and CROPDMGEXP. Damage values are converted to US$ "
            "by multiplying each magnitude by the multiplier of its exponent code:"
        )
        t = doc.add_table(rows=1, cols=2)
        t.rows[0].cells[0].text = "Exponent code(s)"
        t.rows[0].cells[1].text = "Multiplier"
        for codes, value in _exponent_rows():
            cells = t.add_row().cells
            cells[0].text = codes
            cells[1].text = value
        if result.skipped:
            doc.add_paragraph(f"{result.skipped:,} record(s) with an unknown exponent code were excluded.")
        doc.add_paragraph(
            "Event type labels are used exactly as recorded; near-duplicate labels "
            "(for example HEAT and EXCESSIVE HEAT) are counted separately."
        )

        # Results
        doc.add_heading("Results", level=1)
        doc.add_heading("Population health", level=2)
        for measure in HEALTH_MEASURES:
            doc.add_paragraph(f"Top {top}: {aggregation_title(measure)}")
            _table(result.aggregations[measure], unit_for(measure))
            doc.add_paragraph("")
        doc.add_picture(health_png, width=Inches(6.5))

        doc.add_heading("Economic consequences", level=2)
        for measure in ECONOMIC_MEASURES:
            doc.add_paragraph(f"Top {top}: {aggregation_title(measure)}")
            _table(result.aggregations[measure], unit_for(measure))
            doc.add_paragraph("")
        doc.add_picture(economic_png, width=Inches(6.5))

        # Dataset citation
        doc.add_heading("Dataset citation", level=1)
        cit = config.citation
        if cit.file_name:
            doc.add_paragraph(f"Data file used: {cit.file_name}")
        if cit.file_note:
            doc.add_paragraph(f"File note: {cit.file_note}")
        doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.website}.")

        # -----------------------------
        # Reproducibility footer
        # -----------------------------
        doc.add_heading("Reproducibility footer", level=1)
        from . import __version__
        from datetime import datetime as _dt
        doc.add_paragraph(f"stormdmg version: {__version__}")
        doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")
        doc.add_paragraph(f"Rows read: {result.raw_rows:,}")
        if result.source:
            doc.add_paragraph(f"Source: {result.source}")
        if config.command_line:
            doc.add_paragraph(f"Command: {config.command_line}")

        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        doc.save(out_path)
    return out_path
