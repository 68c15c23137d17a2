"""
Users list view-model: cursor pagination plus search.

States::

    Loading → Loaded(users) | Error(message)
    Loaded / LoadedMore → LoadingMore → LoadedMore(previous + page) | Error(message)

Search snapshots the list shown before the first search and
``cancel_search`` restores it without refetching.

All commands are coroutines meant to run on one event loop, which is the
only place state changes and ``on_state_changed`` is called. Overlapping
commands are not cancelled; every primary command (load, refresh, search)
and ``cancel_search`` starts a new generation, and results that arrive for
an older generation are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import httpx

from github_browser.logging_config import begin_command
from github_browser.models import User
from github_browser.network import NetworkError
from github_browser.repository import GitHubRepositoryProtocol
from github_browser.settings import settings

logger = logging.getLogger("github_browser.users_list")

FAILED_FETCH_USERS = "error.failed.fetch.users"
FAILED_SEARCH = "error.failed.search"


# ── States ─────────────────────────────────────────────────────
@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded:
    users: tuple[User, ...]


@dataclass(frozen=True)
class LoadingMore:
    pass


@dataclass(frozen=True)
class LoadedMore:
    users: tuple[User, ...]


@dataclass(frozen=True)
class Error:
    message: str


UsersListState = Loading | Loaded | LoadingMore | LoadedMore | Error

StateObserver = Callable[[UsersListState], None]


# ── View-model ─────────────────────────────────────────────────
class UsersListViewModel:
    def __init__(
        self,
        repository: GitHubRepositoryProtocol,
        *,
        per_page: int | None = None,
        localize: Callable[[str], str] | None = None,
    ) -> None:
        self._repository = repository
        self._per_page = settings.users_per_page if per_page is None else per_page
        self._localize = localize or (lambda key: key)

        self._state: UsersListState = Loading()
        self._is_loading_more = False
        self._is_searching = False
        self._current_users: list[User] = []
        self._snapshot: list[User] | None = None
        self._generation = 0

        self.on_state_changed: StateObserver | None = None

    @property
    def state(self) -> UsersListState:
        return self._state

    @property
    def is_loading_more(self) -> bool:
        return self._is_loading_more

    @property
    def is_searching(self) -> bool:
        return self._is_searching

    # ── Commands ───────────────────────────────────────────────
    async def view_did_load(self) -> None:
        begin_command("view_did_load", logger)
        self._leave_search()
        await self._fetch_users(since=0)

    async def refresh_users(self) -> None:
        begin_command("refresh_users", logger)
        self._current_users = []
        self._leave_search()
        await self._fetch_users(since=0)

    async def load_more_users(self) -> None:
        # Cooperative single-flight guard: checked and set on the loop
        # before the first await, so a second call sees it.
        if self._is_loading_more or self._is_searching:
            return

        match self._state:
            case Loaded() | LoadedMore():
                pass
            case Loading() | LoadingMore() | Error():
                return

        if not self._current_users:
            return

        begin_command("load_more_users", logger)
        self._is_loading_more = True
        self._update_state(LoadingMore())
        await self._fetch_users(since=self._current_users[-1].id, paginating=True)

    async def search_users(self, query: str) -> None:
        if not query.strip():
            return

        begin_command("search_users", logger)
        if not self._is_searching:
            self._snapshot = list(self._current_users)
        self._is_searching = True

        generation = self._next_generation()
        self._update_state(Loading())

        try:
            results = await self._repository.search_users(query, self._per_page)
        except (NetworkError, httpx.HTTPError) as exc:
            if self._is_stale(generation, "search_users"):
                return
            logger.warning("Search for %r failed: %s", query, exc)
            self._update_state(Error(self._localize(FAILED_SEARCH)))
            return

        if self._is_stale(generation, "search_users"):
            return
        logger.info("Search for %r returned %d users", query, len(results))
        self._update_state(Loaded(tuple(results)))

    async def cancel_search(self) -> None:
        if not self._is_searching and self._snapshot is None:
            return

        begin_command("cancel_search", logger)
        self._next_generation()
        restored = self._snapshot or []
        self._leave_search()
        self._current_users = list(restored)
        self._update_state(Loaded(tuple(restored)))

    # ── Internals ──────────────────────────────────────────────
    async def _fetch_users(self, since: int, paginating: bool = False) -> None:
        if paginating:
            generation = self._generation
        else:
            generation = self._next_generation()
            self._update_state(Loading())

        command = "load_more_users" if paginating else "fetch_users"
        try:
            page = await self._repository.fetch_users(self._per_page, since=since)
        except (NetworkError, httpx.HTTPError) as exc:
            if paginating:
                self._is_loading_more = False
            if self._is_stale(generation, command):
                return
            logger.warning("Fetching users since %d failed: %s", since, exc)
            self._update_state(Error(self._localize(FAILED_FETCH_USERS)))
            return

        if paginating:
            self._is_loading_more = False
        if self._is_stale(generation, command):
            return

        logger.info("Fetched %d users since %d", len(page), since)
        if paginating:
            self._current_users.extend(page)
            self._update_state(LoadedMore(tuple(self._current_users)))
        else:
            self._current_users = list(page)
            self._update_state(Loaded(tuple(page)))

    def _leave_search(self) -> None:
        self._is_searching = False
        self._snapshot = None

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int, command: str) -> bool:
        if generation == self._generation:
            return False
        logger.info("Dropping stale %s result (generation %d)", command, generation)
        return True

    def _update_state(self, new_state: UsersListState) -> None:
        self._state = new_state
        if self.on_state_changed is not None:
            self.on_state_changed(new_state)
