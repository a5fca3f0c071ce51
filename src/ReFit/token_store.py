"""GitHub token storage using the OS keychain (macOS Keychain / Windows Credential Manager)."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

_SERVICE_NAME = "ReFit"
_AVAILABLE = False

GITHUB_TOKEN_KEY = "github_token"

try:
    import keyring
    import keyring.errors

    _AVAILABLE = True
except Exception:
    logger.warning("keyring not available; token persistence disabled")


def is_available() -> bool:
    """Return True if the OS keychain is usable."""
    return _AVAILABLE


def load(key: str) -> str | None:
    """Load a token from the OS keychain. Returns None on failure."""
    if not _AVAILABLE:
        return None
    try:
        return keyring.get_password(_SERVICE_NAME, key)
    except keyring.errors.KeyringError:
        logger.warning("Failed to read %s from keyring", key)
        return None


def save(key: str, value: str) -> bool:
    """Save a token to the OS keychain. Returns True on success."""
    if not _AVAILABLE or not value:
        return False
    try:
        keyring.set_password(_SERVICE_NAME, key, value)
        return True
    except keyring.errors.KeyringError:
        logger.warning("Failed to save %s to keyring", key)
        return False


def delete(key: str) -> bool:
    """Delete a token from the OS keychain. Returns True on success."""
    if not _AVAILABLE:
        return False
    try:
        keyring.delete_password(_SERVICE_NAME, key)
        return True
    except keyring.errors.KeyringError:
        return False


def resolve_github_token(explicit: str | None = None) -> str | None:
    """Pick the token to use: explicit value, then keychain, then ``GITHUB_TOKEN``."""
    for candidate in (explicit, load(GITHUB_TOKEN_KEY), os.environ.get("GITHUB_TOKEN")):
        if candidate and candidate.strip():
            return candidate.strip()
    return None
