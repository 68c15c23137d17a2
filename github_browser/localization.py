"""
Message table and resolver for user-facing strings.

View-models never import this module; they receive a ``Localizer`` and the
composition root passes ``localized``.
"""

from __future__ import annotations

from typing import Callable

Localizer = Callable[[str], str]

DEFAULT_STRINGS: dict[str, str] = {
    "error.failed.fetch.users": "Failed to load users. Please try again.",
    "error.failed.search": "Search failed. Please try again.",
    "error.failed.user.info": "Failed to load user information.",
}


def localized(key: str) -> str:
    """Resolve ``key`` from the default table, falling back to the key."""
    return DEFAULT_STRINGS.get(key, key)
