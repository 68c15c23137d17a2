"""
GitHub REST endpoints used by the browser.

  GET /users/{username}
  GET /users?per_page={n}&since={id}
  GET /users/{username}/repos?type=owner&per_page={n}
  GET /search/users?q={text}&per_page={n}

Each endpoint is a small value object; ``url(base)`` returns an absolute
``httpx.URL`` or raises ``InvalidURLError`` when one cannot be built.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

import httpx

from github_browser.network import InvalidURLError
from github_browser.settings import settings


def _encode(value: str, what: str) -> str:
    """Percent-encode ``value`` as UTF-8, leaving nothing unescaped."""
    try:
        return quote(value, safe="")
    except UnicodeEncodeError as exc:
        raise InvalidURLError(f"Cannot percent-encode {what}: {value!r}") from exc


def _path_segment(username: str) -> str:
    if not username or not username.strip():
        raise InvalidURLError("Username must not be empty.")
    return _encode(username, "username")


def _build(base: str | None, path_and_query: str) -> httpx.URL:
    base = (base or settings.github_api_base).rstrip("/")
    try:
        url = httpx.URL(base + path_and_query)
    except httpx.InvalidURL as exc:
        raise InvalidURLError(str(exc)) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(f"Not an absolute HTTP URL: {base + path_and_query}")
    return url


@dataclass(frozen=True)
class UserDetailEndpoint:
    username: str

    def url(self, base: str | None = None) -> httpx.URL:
        return _build(base, f"/users/{_path_segment(self.username)}")


@dataclass(frozen=True)
class UsersListEndpoint:
    """Cursor page of all users; ``since`` is the last id already seen."""

    per_page: int
    since: int = 0

    def url(self, base: str | None = None) -> httpx.URL:
        return _build(base, f"/users?per_page={self.per_page}&since={self.since}")


@dataclass(frozen=True)
class UserRepositoriesEndpoint:
    username: str
    per_page: int

    def url(self, base: str | None = None) -> httpx.URL:
        segment = _path_segment(self.username)
        return _build(base, f"/users/{segment}/repos?type=owner&per_page={self.per_page}")


@dataclass(frozen=True)
class SearchUsersEndpoint:
    query: str
    per_page: int

    def url(self, base: str | None = None) -> httpx.URL:
        q = _encode(self.query, "search query")
        return _build(base, f"/search/users?q={q}&per_page={self.per_page}")


Endpoint = (
    UserDetailEndpoint
    | UsersListEndpoint
    | UserRepositoriesEndpoint
    | SearchUsersEndpoint
)
