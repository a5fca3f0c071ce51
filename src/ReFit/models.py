"""Data classes for ReFit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EntryType(Enum):
    FILE = "file"
    DIRECTORY = "dir"


class FetchStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class RepoInfo:
    owner: str
    repo: str
    branch: str | None = None
    raw_url: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class RepositoryEntry:
    path: str
    name: str
    type: EntryType
    size: int = 0
    content_ref: str | None = None  # download URL, files only

    @property
    def is_file(self) -> bool:
        return self.type is EntryType.FILE

    @property
    def is_directory(self) -> bool:
        return self.type is EntryType.DIRECTORY


@dataclass(frozen=True)
class ListingResult:
    status: FetchStatus
    entries: tuple[RepositoryEntry, ...] = ()
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


@dataclass(frozen=True)
class ContentResult:
    status: FetchStatus
    content: str = ""
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


@dataclass
class TraversalState:
    """Bookkeeping shared by every frame of a single analysis run."""

    files_processed: int = 0
    files_fetched: int = 0
    current_path: str = ""
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AggregationResult:
    total_characters: int = 0
    total_lines: int = 0
    stopped_early: bool = False


@dataclass
class RepoMetadata:
    url: str
    name: str
    stars: int = 0
    forks: int = 0
    description: str | None = None
    language: str | None = None


@dataclass
class AnalysisConfig:
    max_files: int = 1000
    char_limit: int = 100_000
    max_file_size: int = 500_000
    max_depth: int = 64


@dataclass
class AnalysisReport:
    url: str
    name: str
    stars: int
    forks: int
    description: str | None
    language: str | None
    total_characters: int
    total_lines: int
    meets_requirement: bool
    comment: str = ""

    def to_row(self) -> list:
        """Return the report as one spreadsheet row (see ``REPORT_COLUMNS``)."""
        return [
            self.url,
            self.name,
            self.stars,
            self.forks,
            self.description or "",
            self.language or "",
            self.total_characters,
            self.total_lines,
            "Yes" if self.meets_requirement else "No",
            self.comment,
        ]
