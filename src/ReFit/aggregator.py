"""Depth-first aggregation of character and line totals over a repository tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from ReFit.file_filter import (
    MAX_FILE_SIZE,
    count_non_blank_lines,
    is_code_file,
    is_too_large,
    should_skip,
)
from ReFit.models import (
    AggregationResult,
    AnalysisConfig,
    AnalysisReport,
    RepoInfo,
    RepositoryEntry,
    TraversalState,
)
from ReFit.providers.base import RepoProvider
from ReFit.report import build_report

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TraversalState], None]

DEFAULT_MAX_FILES = AnalysisConfig.max_files
DEFAULT_MAX_DEPTH = AnalysisConfig.max_depth


@dataclass
class _Frame:
    """One directory listing being walked."""

    entries: Iterator[RepositoryEntry]
    depth: int
    total_characters: int = 0
    total_lines: int = 0
    stopped_early: bool = False

    def merge(self, child: AggregationResult) -> None:
        self.total_characters += child.total_characters
        self.total_lines += child.total_lines
        if child.stopped_early:
            self.stopped_early = True

    def result(self) -> AggregationResult:
        return AggregationResult(
            total_characters=self.total_characters,
            total_lines=self.total_lines,
            stopped_early=self.stopped_early,
        )


def aggregate(
    provider: RepoProvider,
    repo_info: RepoInfo,
    entries: Iterable[RepositoryEntry],
    state: TraversalState,
    max_files: int = DEFAULT_MAX_FILES,
    *,
    max_file_size: int = MAX_FILE_SIZE,
    max_depth: int = DEFAULT_MAX_DEPTH,
    on_progress: ProgressCallback | None = None,
) -> AggregationResult:
    """Walk *entries* and every directory below them, totalling code files.

    Directories are visited depth-first in listing order using an explicit
    stack of frames. Each frame keeps its own partial totals and is merged
    into its parent once exhausted. ``state.files_processed`` is shared by
    all frames, so *max_files* caps the whole tree rather than each
    directory. Once a frame stops early every ancestor stops as well.

    Listing and content failures never raise: they contribute nothing, are
    logged, and are appended to ``state.errors``.
    """
    stack: list[_Frame] = [_Frame(entries=iter(entries), depth=0)]

    while True:
        frame = stack[-1]
        entry = None if frame.stopped_early else next(frame.entries, None)

        if entry is None:
            stack.pop()
            result = frame.result()
            if not stack:
                return result
            stack[-1].merge(result)
            continue

        if should_skip(entry):
            logger.debug("Skipping %s", entry.path)
            continue

        if entry.is_file:
            state.files_processed += 1
            state.current_path = entry.path
            if state.files_processed > max_files:
                logger.info(
                    "File ceiling of %d reached at %s; stopping", max_files, entry.path
                )
                frame.stopped_early = True
                continue

            if not is_too_large(entry.size, max_file_size) and is_code_file(entry.name):
                characters, lines = _measure_file(provider, entry, state)
                frame.total_characters += characters
                frame.total_lines += lines

            if on_progress is not None:
                on_progress(state)

        elif entry.is_directory:
            if frame.depth >= max_depth:
                logger.warning("Not descending into %s: depth limit %d", entry.path, max_depth)
                state.errors.append(f"{entry.path}: depth limit {max_depth} reached")
                continue

            listing = provider.list_contents(repo_info, entry.path)
            if not listing.ok:
                logger.warning(
                    "Could not list %s (%s): %s",
                    entry.path,
                    listing.status.value,
                    listing.detail,
                )
                state.errors.append(f"{entry.path}/: {listing.detail or listing.status.value}")
            stack.append(_Frame(entries=iter(listing.entries), depth=frame.depth + 1))


def _measure_file(
    provider: RepoProvider, entry: RepositoryEntry, state: TraversalState
) -> tuple[int, int]:
    fetched = provider.fetch_file_content(entry.content_ref or "")
    if not fetched.ok:
        logger.warning(
            "Could not fetch %s (%s): %s", entry.path, fetched.status.value, fetched.detail
        )
        state.errors.append(f"{entry.path}: {fetched.detail or fetched.status.value}")
        return 0, 0

    state.files_fetched += 1
    return len(fetched.content), count_non_blank_lines(fetched.content)


def analyze_repository(
    provider: RepoProvider,
    repo_info: RepoInfo,
    config: AnalysisConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> AnalysisReport:
    """Run a complete analysis and return its report.

    Raises whatever ``provider.get_metadata`` raises; nothing below the
    metadata lookup is allowed to abort the run.
    """
    config = config or AnalysisConfig()
    metadata = provider.get_metadata(repo_info)

    state = TraversalState()
    root = provider.list_contents(repo_info, "")
    if not root.ok:
        logger.warning(
            "Could not list root of %s (%s): %s",
            repo_info.full_name,
            root.status.value,
            root.detail,
        )
        state.errors.append(f"/: {root.detail or root.status.value}")

    result = aggregate(
        provider,
        repo_info,
        root.entries,
        state,
        config.max_files,
        max_file_size=config.max_file_size,
        max_depth=config.max_depth,
        on_progress=on_progress,
    )
    logger.info(
        "%s: %d characters, %d lines, %d files examined%s",
        repo_info.full_name,
        result.total_characters,
        result.total_lines,
        state.files_processed,
        " (stopped early)" if result.stopped_early else "",
    )
    return build_report(metadata, result, state, config)
