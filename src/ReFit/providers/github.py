"""GitHub REST API provider."""

from __future__ import annotations

import logging
import time
from urllib.parse import quote

import requests

from ReFit.models import (
    ContentResult,
    EntryType,
    FetchStatus,
    ListingResult,
    RepoInfo,
    RepoMetadata,
    RepositoryEntry,
)
from ReFit.providers.base import RepoProvider

logger = logging.getLogger(__name__)

_ENTRY_TYPES = {"file": EntryType.FILE, "dir": EntryType.DIRECTORY}


class GitHubError(Exception):
    """Raised for GitHub API errors."""


class RateLimitError(GitHubError):
    """Raised when GitHub rate limit is exceeded."""

    def __init__(self, reset_at: int):
        self.reset_at = reset_at
        wait = max(0, reset_at - int(time.time()))
        super().__init__(
            f"GitHub API rate limit exceeded. Resets in {wait} seconds."
        )


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class GitHubProvider(RepoProvider):
    """Provider for GitHub repositories using the REST contents API."""

    API_BASE = "https://api.github.com"

    def __init__(self, token: str | None = None, timeout: float = 30):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/vnd.github+json"
        self.session.headers["User-Agent"] = "ReFit/1.0"
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _check_rate_limit(self, response: requests.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and int(remaining) == 0:
            reset_at = int(response.headers.get("X-RateLimit-Reset", 0))
            raise RateLimitError(reset_at)

    def get_metadata(self, repo_info: RepoInfo) -> RepoMetadata:
        url = f"{self.API_BASE}/repos/{repo_info.owner}/{repo_info.repo}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GitHubError(f"Could not reach GitHub: {exc}") from exc

        if resp.status_code == 404:
            raise GitHubError(
                "Repository not found. Check the URL, or provide a token for private repos."
            )
        if resp.status_code == 401:
            raise GitHubError("Authentication failed. Check your GitHub token.")
        if resp.status_code == 403:
            self._check_rate_limit(resp)
            raise GitHubError(
                "Access denied. The token may lack permissions, or rate limit exceeded."
            )
        if resp.status_code == 429:
            # Secondary rate limit: reset time, or a Retry-After delay
            self._check_rate_limit(resp)
            retry_after = resp.headers.get("Retry-After", "")
            wait = int(retry_after) if retry_after.isdigit() else 60
            raise RateLimitError(int(time.time()) + wait)
        if not _is_success(resp):
            raise GitHubError(
                f"GitHub API returned HTTP {resp.status_code} for {repo_info.full_name}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise GitHubError(
                f"GitHub returned an unreadable response for {repo_info.full_name}"
            ) from exc
        if not isinstance(data, dict):
            raise GitHubError(
                f"GitHub returned unexpected metadata for {repo_info.full_name}"
            )
        return RepoMetadata(
            url=data.get("html_url") or f"https://github.com/{repo_info.full_name}",
            name=data.get("name") or repo_info.repo,
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            description=data.get("description"),
            language=data.get("language"),
        )

    def list_contents(self, repo_info: RepoInfo, path: str = "") -> ListingResult:
        url = (
            f"{self.API_BASE}/repos/{repo_info.owner}/{repo_info.repo}"
            f"/contents/{quote(path)}"
        )
        params = {"ref": repo_info.branch} if repo_info.branch else None
        logger.debug("Listing %s:/%s", repo_info.full_name, path)

        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            return ListingResult(FetchStatus.ERROR, detail=str(exc))

        if resp.status_code == 404:
            return ListingResult(FetchStatus.NOT_FOUND, detail="HTTP 404")
        if not _is_success(resp):
            return ListingResult(
                FetchStatus.ERROR, detail=f"HTTP {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError:
            return ListingResult(FetchStatus.ERROR, detail="invalid JSON body")
        if not isinstance(data, list):
            # The contents API returns an object when the path is a file
            return ListingResult(FetchStatus.ERROR, detail="path is not a directory")

        try:
            entries = _parse_listing(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.debug("Malformed listing for %s:/%s: %r", repo_info.full_name, path, exc)
            return ListingResult(FetchStatus.ERROR, detail="malformed listing")
        return ListingResult(FetchStatus.OK, entries=tuple(entries))

    def fetch_file_content(self, content_ref: str) -> ContentResult:
        if not content_ref:
            return ContentResult(FetchStatus.ERROR, detail="no download URL")

        logger.debug("Fetching %s", content_ref)
        try:
            resp = self.session.get(content_ref, timeout=self.timeout)
        except requests.RequestException as exc:
            return ContentResult(FetchStatus.ERROR, detail=str(exc))

        if resp.status_code == 404:
            return ContentResult(FetchStatus.NOT_FOUND, detail="HTTP 404")
        if not _is_success(resp):
            return ContentResult(FetchStatus.ERROR, detail=f"HTTP {resp.status_code}")
        return ContentResult(FetchStatus.OK, content=resp.text)


def _parse_listing(data: list) -> list[RepositoryEntry]:
    entries: list[RepositoryEntry] = []
    for item in data:
        entry_type = _ENTRY_TYPES.get(item.get("type"))
        if entry_type is None:
            # symlinks and submodules
            logger.debug("Ignoring %s entry %s", item.get("type"), item.get("path"))
            continue
        entries.append(
            RepositoryEntry(
                path=item["path"],
                name=item["name"],
                type=entry_type,
                size=int(item.get("size") or 0),
                content_ref=item.get("download_url"),
            )
        )
    return entries
