"""
======================================================================
 Guild Command Sync — Version v0.1.0 (Build 2026.10)
Owner: Daniel Clancy
 Copyright © 2026 Brainstream Media Group
======================================================================
"""

"""Version metadata for the guild command sync tool.

This module is import-safe and exposes authoritative version identifiers for
other modules (including the Discord User-Agent) without side effects.
"""

PROJECT_NAME = "Guild Command Sync"
VERSION = "v0.1.0"
BUILD = "2026.10"
OWNER = "Daniel Clancy"
COPYRIGHT = "© 2026 Brainstream Media Group"
# Placeholder; Discord only requires a URL-shaped value here
PROJECT_URL = "https://example.invalid/guild-command-sync"

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "BUILD",
    "OWNER",
    "COPYRIGHT",
    "PROJECT_URL",
    "user_agent",
]


def user_agent() -> str:
    """
    Return the User-Agent Discord expects from bots.

    Format: DiscordBot ($url, $versionNumber)
    """

    return f"DiscordBot ({PROJECT_URL}, {VERSION.lstrip('v')})"
