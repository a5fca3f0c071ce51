"""Repository identifier parsing."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from ReFit.models import RepoInfo

_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class URLParseError(Exception):
    """Raised when a repository identifier cannot be parsed."""


def parse_repo_url(url: str) -> RepoInfo:
    """Parse a repository identifier and return RepoInfo.

    Supported formats:
      - owner/repo
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - https://github.com/owner/repo/tree/branch
      - https://github.com/owner/repo/tree/branch/with/slashes
    """
    url = url.strip()
    if not url:
        raise URLParseError("URL is empty.")

    if "://" not in url and not url.startswith("github.com/"):
        return _parse_github(url.strip("/"), url)

    if url.startswith("github.com/"):
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise URLParseError(f"Unsupported scheme: {parsed.scheme}")

    host = parsed.hostname or ""
    if host not in ("github.com", "www.github.com"):
        raise URLParseError(f"Unsupported host: {host}")

    return _parse_github(parsed.path.strip("/"), url)


def _parse_github(path: str, raw_url: str) -> RepoInfo:
    # path: owner/repo[/tree/branch[/...]]
    parts = path.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise URLParseError(f"Repository must be given as owner/repo: {raw_url}")

    owner, repo = parts[0], parts[1].removesuffix(".git")
    if not _NAME_RE.match(owner) or not _NAME_RE.match(repo):
        raise URLParseError(f"Invalid owner or repository name: {raw_url}")

    branch = None
    if len(parts) >= 4 and parts[2] == "tree":
        # Everything after /tree/ is the branch name (may contain slashes)
        branch = "/".join(parts[3:])
    elif len(parts) > 2:
        raise URLParseError(f"Unsupported GitHub URL: {raw_url}")

    return RepoInfo(owner=owner, repo=repo, branch=branch, raw_url=raw_url)
