"""Abstract base class for repository providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ReFit.models import ContentResult, ListingResult, RepoInfo, RepoMetadata


class RepoProvider(ABC):
    """Base class for Git hosting service providers.

    Only ``get_metadata`` may raise. Listing and content calls report
    failures through their result's ``status`` so a single unreadable
    node never aborts a traversal.
    """

    @abstractmethod
    def get_metadata(self, repo_info: RepoInfo) -> RepoMetadata:
        """Return display metadata for the repository."""

    @abstractmethod
    def list_contents(self, repo_info: RepoInfo, path: str = "") -> ListingResult:
        """List one directory. An empty path lists the repository root."""

    @abstractmethod
    def fetch_file_content(self, content_ref: str) -> ContentResult:
        """Fetch the raw text of a single file."""
