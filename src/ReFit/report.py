"""Verdict and report row assembly."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from ReFit.models import (
    AggregationResult,
    AnalysisConfig,
    AnalysisReport,
    RepoMetadata,
    TraversalState,
)

logger = logging.getLogger(__name__)

REPORT_COLUMNS: tuple[str, ...] = (
    "URL",
    "Name",
    "Stars",
    "Forks",
    "Description",
    "Language",
    "Total Characters",
    "Total Lines",
    "Meets Requirement",
    "Comment",
)


def meets_requirement(result: AggregationResult, char_limit: int = 100_000) -> bool:
    """A partial traversal never meets the requirement."""
    return not result.stopped_early and result.total_characters <= char_limit


def build_comment(
    result: AggregationResult,
    state: TraversalState,
    config: AnalysisConfig,
) -> str:
    notes: list[str] = []
    if result.stopped_early:
        notes.append(
            f"Analysis stopped after {config.max_files:,} files; totals are incomplete."
        )
    if state.errors:
        noun = "path" if len(state.errors) == 1 else "paths"
        notes.append(f"{len(state.errors)} {noun} could not be read.")
    return " ".join(notes)


def build_report(
    metadata: RepoMetadata,
    result: AggregationResult,
    state: TraversalState,
    config: AnalysisConfig,
) -> AnalysisReport:
    return AnalysisReport(
        url=metadata.url,
        name=metadata.name,
        stars=metadata.stars,
        forks=metadata.forks,
        description=metadata.description,
        language=metadata.language,
        total_characters=result.total_characters,
        total_lines=result.total_lines,
        meets_requirement=meets_requirement(result, config.char_limit),
        comment=build_comment(result, state, config),
    )


def append_report_csv(path: str | Path, report: AnalysisReport) -> None:
    """Append *report* as one row, writing the header if the file is new."""
    path = Path(path)
    is_new = not path.exists() or path.stat().st_size == 0
    with path.open("a", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        if is_new:
            writer.writerow(REPORT_COLUMNS)
        writer.writerow(report.to_row())
    logger.debug("Appended report for %s to %s", report.name, path)


def render_csv(reports: list[AnalysisReport]) -> str:
    """Render reports as CSV text including the header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(REPORT_COLUMNS)
    for report in reports:
        writer.writerow(report.to_row())
    return buffer.getvalue()
