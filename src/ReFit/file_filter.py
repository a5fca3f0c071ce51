"""Path skipping, code-file detection and line counting."""

from __future__ import annotations

from ReFit.models import RepositoryEntry

# Any path containing one of these fragments is ignored. This is a plain
# substring match, so "testing/" and "distro/" are skipped too.
SKIP_PATH_FRAGMENTS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "vendor",
    ".github",
    "examples",
    "docs",
    "test",
    "tests",
)

CODE_EXTENSIONS: tuple[str, ...] = (
    # Languages
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".c", ".cpp", ".h", ".cs",
    ".php", ".rb", ".go", ".swift", ".kt", ".rs", ".dart",
    # Web
    ".html", ".css", ".scss", ".less",
    # Data / config / docs
    ".json", ".yml", ".yaml", ".xml", ".sh", ".md",
)

MAX_FILE_SIZE = 500_000


def should_skip(entry: RepositoryEntry) -> bool:
    """Return True if the entry's path contains an excluded fragment."""
    return any(fragment in entry.path for fragment in SKIP_PATH_FRAGMENTS)


def is_code_file(name: str) -> bool:
    """Check if a file counts as code based on its extension."""
    return name.lower().endswith(CODE_EXTENSIONS)


def is_too_large(size: int, limit: int = MAX_FILE_SIZE) -> bool:
    return size > limit


def count_non_blank_lines(content: str) -> int:
    """Count lines that contain something other than whitespace."""
    if not content:
        return 0
    return sum(1 for line in content.split("\n") if line.strip())
