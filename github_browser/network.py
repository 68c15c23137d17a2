"""
Async fetch-and-decode primitive over httpx.

``NetworkService.fetch(url, shape)`` issues one GET and decodes the JSON
body into ``shape`` (a pydantic model or e.g. ``list[User]``):
- no ``httpx.Response`` at all      → NoDataError
- status outside [200, 300)          → ServerError(status_code)
- body does not validate as ``shape`` → DecodingError
- transport failures (httpx.TransportError) propagate unchanged.

No retries and no caching; the service is stateless apart from its client,
so one instance is shared by every caller.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from github_browser.settings import settings

logger = logging.getLogger("github_browser.network")

T = TypeVar("T")


# ── Custom exceptions ──────────────────────────────────────────
class NetworkError(Exception):
    """Base for errors raised by the network layer."""


class InvalidURLError(NetworkError):
    """The endpoint URL could not be built."""


class NoDataError(NetworkError):
    """The transport returned no HTTP response object."""


class ServerError(NetworkError):
    """Non-2xx HTTP status."""

    def __init__(self, status_code: int):
        super().__init__(f"Server responded with HTTP {status_code}")
        self.status_code = status_code


class DecodingError(NetworkError):
    """2xx response whose body does not match the requested shape."""


# ── Helpers ─────────────────────────────────────────────────────
@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _default_client() -> httpx.AsyncClient:
    headers: dict[str, str] = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": settings.user_agent,
    }
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"

    return httpx.AsyncClient(
        headers=headers,
        timeout=httpx.Timeout(
            connect=settings.http_connect_timeout,
            read=settings.http_read_timeout,
            write=settings.http_read_timeout,
            pool=settings.http_read_timeout,
        ),
    )


# ── Service ─────────────────────────────────────────────────────
class NetworkService:
    """Performs GET requests and decodes typed JSON responses."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        # Anything with an async ``get(url)`` works; tests pass fakes here.
        self._client = client or _default_client()

    async def fetch(self, url: httpx.URL | str, shape: type[T]) -> T:
        response = await self._client.get(url)

        if not isinstance(response, httpx.Response):
            logger.warning("GET %s returned no HTTP response", url)
            raise NoDataError(f"No HTTP response for {url}")

        logger.debug("GET %s -> %s", url, response.status_code)

        if not 200 <= response.status_code < 300:
            logger.warning("GET %s failed with HTTP %s", url, response.status_code)
            raise ServerError(response.status_code)

        try:
            return _adapter(shape).validate_json(response.content)
        except ValidationError as exc:
            logger.warning("GET %s: body does not decode as %s", url, shape)
            raise DecodingError(f"Cannot decode response from {url}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
