"""Generic helper functions."""

import copy
import hmac
import secrets
import tomllib
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

_pyproject_data: dict | None = None


def _get_pyproject() -> dict:
    """Load and cache pyproject.toml data."""
    global _pyproject_data
    if _pyproject_data is None:
        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            _pyproject_data = tomllib.load(f)
    return _pyproject_data


def _get_pyproject_attr(key: str, default: str = "unknown") -> str:
    """
    Get an attribute from pyproject.toml [project] section.

    Args:
        key: The attribute name to retrieve.
        default: Default value if attribute not found.

    Returns:
        The attribute value or default.
    """
    try:
        return _get_pyproject()["project"].get(key, default)
    except Exception:
        return default


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(UTC).replace(tzinfo=None)


def deep_merge(base: dict[str, Any], updates: dict[str, Any] | None) -> dict[str, Any]:
    """
    Recursively merge ``updates`` into a copy of ``base``.

    Nested dicts are merged key by key; lists and scalars in ``updates``
    replace the value in ``base``. Neither input is mutated.

    Args:
        base: The original document.
        updates: Partial document to apply on top of ``base``.

    Returns:
        The merged document.
    """
    merged = copy.deepcopy(base)
    if not updates:
        return merged

    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_path(data: Any, *keys: str, default: Any = None) -> Any:
    """
    Walk nested dicts, returning ``default`` as soon as a level is missing.

    Example:
        get_path(config, "integrations", "sonarr", "webhookConfig")
    """
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current if current is not None else default


def generate_token(nbytes: int = 24) -> str:
    """Generate a URL-safe random token suitable for path-carried secrets."""
    return secrets.token_urlsafe(nbytes)


def tokens_match(provided: str | None, expected: str | None) -> bool:
    """
    Compare two secrets in constant time.

    Empty, missing or non-string values never match.
    """
    if not isinstance(provided, str) or not isinstance(expected, str):
        return False
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def token_hint(token: str | None) -> str:
    """Short, log-safe representation of a secret (first 4 characters)."""
    if not token:
        return "<empty>"
    return f"{token[:4]}..."
