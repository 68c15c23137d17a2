"""User detail view-model: profile stats plus the user's own repositories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import httpx

from github_browser.logging_config import begin_command
from github_browser.models import Repository, UserDetail
from github_browser.network import NetworkError
from github_browser.repository import GitHubRepositoryProtocol
from github_browser.settings import settings

logger = logging.getLogger("github_browser.user_detail")

FAILED_USER_INFO = "error.failed.user.info"


@dataclass(frozen=True)
class DetailLoading:
    pass


@dataclass(frozen=True)
class DetailLoaded:
    user_detail: UserDetail
    repositories: tuple[Repository, ...]


@dataclass(frozen=True)
class DetailError:
    message: str


UserDetailState = DetailLoading | DetailLoaded | DetailError


class UserDetailViewModel:
    """Loads one user's profile, then their repositories.

    A failed repository fetch still shows the profile, with no repositories;
    only a failed profile fetch is an error.
    """

    def __init__(
        self,
        username: str,
        repository: GitHubRepositoryProtocol,
        *,
        per_page: int | None = None,
        localize: Callable[[str], str] | None = None,
    ) -> None:
        self.username = username
        self._repository = repository
        self._per_page = settings.repos_per_page if per_page is None else per_page
        self._localize = localize or (lambda key: key)
        self._state: UserDetailState = DetailLoading()
        self._generation = 0
        self.on_state_changed: Callable[[UserDetailState], None] | None = None

    @property
    def state(self) -> UserDetailState:
        return self._state

    async def view_did_load(self) -> None:
        begin_command("view_did_load", logger)
        await self._fetch_user_data()

    async def refresh_data(self) -> None:
        begin_command("refresh_data", logger)
        await self._fetch_user_data()

    async def _fetch_user_data(self) -> None:
        self._generation += 1
        generation = self._generation
        self._update_state(DetailLoading())

        try:
            detail = await self._repository.fetch_user_detail(self.username)
        except (NetworkError, httpx.HTTPError) as exc:
            if generation != self._generation:
                return
            logger.warning("Fetching user %s failed: %s", self.username, exc)
            self._update_state(DetailError(self._localize(FAILED_USER_INFO)))
            return

        try:
            repositories = await self._repository.fetch_repositories(
                self.username, self._per_page
            )
        except (NetworkError, httpx.HTTPError) as exc:
            logger.warning(
                "Fetching repositories of %s failed, showing none: %s",
                self.username, exc,
            )
            repositories = []

        if generation != self._generation:
            logger.info("Dropping stale detail result for %s", self.username)
            return
        self._update_state(DetailLoaded(detail, tuple(repositories)))

    def _update_state(self, new_state: UserDetailState) -> None:
        self._state = new_state
        if self.on_state_changed is not None:
            self.on_state_changed(new_state)
