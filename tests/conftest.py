"""Shared fixtures for the command sync tests."""

import pytest

APPLICATION_ID = "123456789012345678"
GUILD_ID = "876543210987654321"
TOKEN = "bot-token-value"

GUILD_COMMANDS_URL = (
    f"https://discord.com/api/v10/applications/{APPLICATION_ID}"
    f"/guilds/{GUILD_ID}/commands"
)


@pytest.fixture
def env():
    """A complete, valid environment mapping."""
    return {
        "DISCORD_TOKEN": TOKEN,
        "CLIENT_ID": APPLICATION_ID,
        "GUILD_ID": GUILD_ID,
    }
