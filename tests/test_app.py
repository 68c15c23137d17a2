"""
End-to-end tests through the composition root.
GitHub is mocked with respx; no real HTTP traffic leaves this process.
"""

import contextvars
import json
import logging

import httpx
import pytest
import respx

from github_browser.app import AppContext, create_app_context
from github_browser.logging_config import (
    CommandContextFilter,
    JSONFormatter,
    begin_command,
    command_id_ctx,
    command_name_ctx,
)
from github_browser.user_detail import DetailLoaded
from github_browser.users_list import Error, Loaded, LoadedMore

API = "https://api.github.com"


@pytest.fixture
def root_logging():
    """Restore root handlers and level replaced by setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def _users(*ids):
    return [
        {"id": i, "login": f"user{i}", "avatar_url": f"https://example.com/{i}.png"}
        for i in ids
    ]


@pytest.mark.asyncio
@respx.mock
async def test_users_list_paginates_over_http():
    route = respx.get(f"{API}/users")
    route.side_effect = [
        httpx.Response(200, json=_users(1, 2, 3)),
        httpx.Response(200, json=_users(4, 5)),
    ]

    async with AppContext() as ctx:
        vm = ctx.users_list()
        await vm.view_did_load()
        await vm.load_more_users()

    assert isinstance(vm.state, LoadedMore)
    assert [u.id for u in vm.state.users] == [1, 2, 3, 4, 5]
    sent = [call.request.url.params["since"] for call in route.calls]
    assert sent == ["0", "3"]


@pytest.mark.asyncio
@respx.mock
async def test_error_message_is_localized():
    respx.get(f"{API}/search/users").mock(return_value=httpx.Response(503))

    async with AppContext() as ctx:
        vm = ctx.users_list()
        await vm.search_users("octo cat")

    assert vm.state == Error("Search failed. Please try again.")


@pytest.mark.asyncio
@respx.mock
async def test_search_then_cancel_over_http():
    users_route = respx.get(f"{API}/users").mock(
        return_value=httpx.Response(200, json=_users(1, 2))
    )
    respx.get(f"{API}/search/users").mock(
        return_value=httpx.Response(
            200,
            json={"total_count": 1, "incomplete_results": False, "items": _users(77)},
        )
    )

    async with AppContext() as ctx:
        vm = ctx.users_list()
        await vm.view_did_load()
        await vm.search_users("seventy seven")
        assert [u.id for u in vm.state.users] == [77]
        await vm.cancel_search()

    assert isinstance(vm.state, Loaded)
    assert [u.id for u in vm.state.users] == [1, 2]
    assert users_route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_user_detail_over_http(root_logging):
    respx.get(f"{API}/users/octocat").mock(
        return_value=httpx.Response(
            200,
            json={
                "login": "octocat",
                "avatar_url": "https://example.com/o.png",
                "name": "The Octocat",
                "followers": 1,
                "following": 2,
            },
        )
    )
    respx.get(f"{API}/users/octocat/repos").mock(
        return_value=httpx.Response(500)
    )

    async with create_app_context() as ctx:
        vm = ctx.user_detail("octocat")
        await vm.view_did_load()

    assert isinstance(vm.state, DetailLoaded)
    assert vm.state.user_detail.name == "The Octocat"
    assert vm.state.repositories == ()
    assert any(
        isinstance(h.formatter, JSONFormatter) for h in root_logging.handlers
    )


# ── Logging ────────────────────────────────────────────────────
def _record(msg, *args):
    return logging.LogRecord(
        "github_browser.users_list", logging.INFO, __file__, 1, msg, args, None,
    )


def test_json_formatter_includes_command_context():
    id_token = command_id_ctx.set("abc123")
    name_token = command_name_ctx.set("load_more_users")
    try:
        record = _record("Fetched %d users", 3)
        CommandContextFilter().filter(record)
    finally:
        command_id_ctx.reset(id_token)
        command_name_ctx.reset(name_token)

    # The filter captured the context; the formatter no longer needs it.
    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "Fetched 3 users"
    assert entry["command"] == "load_more_users"
    assert entry["command_id"] == "abc123"
    assert entry["level"] == "INFO"


def test_begin_command_sets_fresh_id():
    logger = logging.getLogger("github_browser.test")

    def run():
        first = begin_command("search_users", logger)
        second = begin_command("cancel_search", logger)
        return first, second, command_id_ctx.get(), command_name_ctx.get()

    first, second, current_id, current_name = contextvars.copy_context().run(run)

    assert first != second
    assert current_id == second
    assert current_name == "cancel_search"
