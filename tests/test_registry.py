"""Tests for the guild command registry client (mocked with respx)."""

import asyncio
import json

import httpx
import pytest
import respx

from services.discord.registry import (
    GuildCommandRegistry,
    RegistryHTTPError,
    guild_commands_route,
)
from shared.config.registration import RegistrationConfig
from tests.conftest import APPLICATION_ID, GUILD_COMMANDS_URL, GUILD_ID, TOKEN

COMMANDS = [{"type": 1, "name": "ping", "description": "Replies with Pong!"}]


@pytest.fixture
def registry():
    config = RegistrationConfig(
        token=TOKEN,
        application_id=APPLICATION_ID,
        guild_id=GUILD_ID,
    )
    return GuildCommandRegistry(config)


def test_route():
    assert guild_commands_route("1", "2") == "/applications/1/guilds/2/commands"


def test_url(registry):
    assert registry.url == GUILD_COMMANDS_URL


def test_custom_api_base():
    config = RegistrationConfig(token=TOKEN, application_id="1", guild_id="2")
    registry = GuildCommandRegistry(config, api_base="http://localhost:8080/api/")

    assert registry.url == "http://localhost:8080/api/applications/1/guilds/2/commands"


def test_bulk_overwrite_sends_single_put(registry):
    with respx.mock(assert_all_called=True) as respx_mock:
        route = respx_mock.put(GUILD_COMMANDS_URL).mock(
            return_value=httpx.Response(200, json=[{"id": "1", "name": "ping"}])
        )

        result = asyncio.run(registry.bulk_overwrite(COMMANDS))

    assert result == [{"id": "1", "name": "ping"}]
    assert route.call_count == 1

    request = route.calls.last.request
    assert request.headers["Authorization"] == f"Bot {TOKEN}"
    assert request.headers["User-Agent"].startswith("DiscordBot (")
    assert json.loads(request.content) == COMMANDS


def test_error_body_is_decoded(registry):
    with respx.mock() as respx_mock:
        respx_mock.put(GUILD_COMMANDS_URL).mock(
            return_value=httpx.Response(
                403,
                json={"message": "Missing Access", "code": 50001},
            )
        )

        with pytest.raises(RegistryHTTPError) as exc_info:
            asyncio.run(registry.bulk_overwrite(COMMANDS))

    error = exc_info.value
    assert error.status == 403
    assert error.code == 50001
    assert error.raw_error == {"message": "Missing Access", "code": 50001}
    assert TOKEN not in str(error)


def test_non_json_error_body(registry):
    with respx.mock() as respx_mock:
        respx_mock.put(GUILD_COMMANDS_URL).mock(
            return_value=httpx.Response(502, text="<html>Bad Gateway</html>")
        )

        with pytest.raises(RegistryHTTPError) as exc_info:
            asyncio.run(registry.bulk_overwrite(COMMANDS))

    assert exc_info.value.status == 502
    assert exc_info.value.code is None
    assert exc_info.value.raw_error == {}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="ok"),
        httpx.Response(204),
    ],
)
def test_success_without_json_body(registry, response):
    with respx.mock() as respx_mock:
        respx_mock.put(GUILD_COMMANDS_URL).mock(return_value=response)

        assert asyncio.run(registry.bulk_overwrite(COMMANDS)) == []


def test_transport_error_propagates(registry):
    with respx.mock() as respx_mock:
        respx_mock.put(GUILD_COMMANDS_URL).mock(
            side_effect=httpx.ConnectError("boom")
        )

        with pytest.raises(httpx.ConnectError):
            asyncio.run(registry.bulk_overwrite(COMMANDS))
