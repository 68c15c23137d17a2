"""
Composition root.

One ``NetworkService`` and one ``GitHubRepository`` are shared by every
view-model handed out; the localized message resolver is injected here.
"""

from __future__ import annotations

import logging

import httpx

from github_browser.localization import localized
from github_browser.logging_config import setup_logging
from github_browser.network import NetworkService
from github_browser.repository import GitHubRepository
from github_browser.settings import settings
from github_browser.user_detail import UserDetailViewModel
from github_browser.users_list import UsersListViewModel

logger = logging.getLogger("github_browser.app")


class AppContext:
    """Owns the HTTP client and builds view-models."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self.network = NetworkService(client)
        self.repository = GitHubRepository(self.network, settings.github_api_base)

    def users_list(self) -> UsersListViewModel:
        return UsersListViewModel(
            self.repository,
            per_page=settings.users_per_page,
            localize=localized,
        )

    def user_detail(self, username: str) -> UserDetailViewModel:
        return UserDetailViewModel(
            username,
            self.repository,
            per_page=settings.repos_per_page,
            localize=localized,
        )

    async def aclose(self) -> None:
        await self.network.aclose()
        logger.info("HTTP client closed")

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_app_context(client: httpx.AsyncClient | None = None) -> AppContext:
    """Configure logging from settings and build the shared context."""
    setup_logging(settings.log_level)
    logger.info(
        "Starting (github_api_base=%s, github_token=%s)",
        settings.github_api_base,
        bool(settings.github_token),
    )
    if not settings.github_token:
        logger.warning(
            "GITHUB_TOKEN is not set; unauthenticated requests are heavily rate-limited."
        )
    return AppContext(client)
