"""
GitHub repository abstraction.

Turns the four browser operations into endpoint URLs and hands them to the
``NetworkService``. Errors from URL building and fetching propagate
unchanged; callers see ``NetworkError`` subclasses or httpx transport errors.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from github_browser.endpoints import (
    Endpoint,
    SearchUsersEndpoint,
    UserDetailEndpoint,
    UserRepositoriesEndpoint,
    UsersListEndpoint,
)
from github_browser.models import Repository, User, UserDetail, UserSearchResponse
from github_browser.network import NetworkService

logger = logging.getLogger("github_browser.repository")

T = TypeVar("T")


class GitHubRepositoryProtocol(Protocol):
    """What the view-models need from a GitHub data source."""

    async def fetch_user_detail(self, username: str) -> UserDetail: ...

    async def fetch_users(self, per_page: int, since: int = 0) -> list[User]: ...

    async def fetch_repositories(self, username: str, per_page: int) -> list[Repository]: ...

    async def search_users(self, query: str, per_page: int) -> list[User]: ...


class GitHubRepository:
    """``GitHubRepositoryProtocol`` backed by the GitHub REST API."""

    def __init__(
        self,
        network: NetworkService | None = None,
        base_url: str | None = None,
    ) -> None:
        self._network = network or NetworkService()
        self._base_url = base_url

    async def _get(self, endpoint: Endpoint, shape: type[T]) -> T:
        """Single path every operation goes through.

        Retry, caching or rate-limit policies belong here so the public
        signatures stay unchanged.
        """
        url = endpoint.url(self._base_url)
        logger.debug("Fetching %s", url)
        return await self._network.fetch(url, shape)

    async def fetch_user_detail(self, username: str) -> UserDetail:
        return await self._get(UserDetailEndpoint(username), UserDetail)

    async def fetch_users(self, per_page: int, since: int = 0) -> list[User]:
        """One cursor page of users with ids greater than ``since``."""
        return await self._get(UsersListEndpoint(per_page, since), list[User])

    async def fetch_repositories(self, username: str, per_page: int) -> list[Repository]:
        return await self._get(
            UserRepositoriesEndpoint(username, per_page), list[Repository]
        )

    async def search_users(self, query: str, per_page: int) -> list[User]:
        response = await self._get(
            SearchUsersEndpoint(query, per_page), UserSearchResponse
        )
        return response.items
