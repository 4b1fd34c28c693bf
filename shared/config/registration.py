"""
Registration configuration loader.

This module reads and validates the three values the command sync needs
before anything else may run: the bot token, the application id and the
guild id.

Design rules:
- Import-safe (no side effects)
- Environment-only configuration (.env loading happens at the entrypoint)
- All missing values are reported together, not one at a time
- The bot token never appears in repr() or log output
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, MutableMapping, Optional, Tuple

from shared.logging.logger import get_logger, mask_token

log = get_logger("shared.config.registration")


# ------------------------------------------------------------
# Environment variable names
# ------------------------------------------------------------

TOKEN_ENV = "DISCORD_TOKEN"
APPLICATION_ID_ENV = "CLIENT_ID"
GUILD_ID_ENV = "GUILD_ID"
INVITE_URL_ENV = "DISCORD_BOT_INVITE"
DEBUG_ENV = "DEBUG"

REQUIRED_VARS: Tuple[str, ...] = (TOKEN_ENV, APPLICATION_ID_ENV, GUILD_ID_ENV)

# Discord snowflakes rendered as decimal strings
SNOWFLAKE_PATTERN = re.compile(r"[0-9]{17,20}")

_TRUTHY = ("1", "true", "yes")


# ------------------------------------------------------------
# Errors
# ------------------------------------------------------------

class RegistrationError(Exception):
    """Base class for pre-flight configuration failures."""


class ConfigError(RegistrationError):
    """One or more required variables are absent."""

    def __init__(self, missing: Tuple[str, ...]):
        self.missing = tuple(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}"
        )


class ValidationError(RegistrationError):
    """A required variable is present but malformed."""

    def __init__(self, field_name: str):
        self.field = field_name
        super().__init__(
            f"{field_name} is not a valid Discord ID (must be 17-20 digits)."
        )


# ------------------------------------------------------------
# Model
# ------------------------------------------------------------

@dataclass(frozen=True)
class RegistrationConfig:
    token: str = field(repr=False)
    application_id: str
    guild_id: str

    def describe(self) -> str:
        return (
            f"application_id={self.application_id} "
            f"guild_id={self.guild_id} "
            f"token={mask_token(self.token)}"
        )


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def read_env(
    name: str,
    environ: Optional[MutableMapping[str, str]] = None,
) -> str:
    """
    Return the trimmed value of an environment variable ("" when absent).

    A non-blank value is written back trimmed so anything that reads the
    same mapping later sees the cleaned-up version.
    """
    env = os.environ if environ is None else environ

    value = env.get(name)
    if value is None:
        return ""

    trimmed = value.strip()
    if trimmed:
        env[name] = trimmed
    return trimmed


def is_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def invite_url(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the optional re-invite URL hint, if one is configured."""
    env = os.environ if environ is None else environ
    raw = (env.get(INVITE_URL_ENV) or "").strip()
    return raw or None


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------

def load_registration_config(
    environ: Optional[MutableMapping[str, str]] = None,
) -> RegistrationConfig:
    """
    Read, trim and validate the registration configuration.

    Raises:
    - ConfigError listing every missing variable
    - ValidationError naming the first malformed identifier
    """

    values = {name: read_env(name, environ) for name in REQUIRED_VARS}

    missing = tuple(name for name in REQUIRED_VARS if not values[name])
    if missing:
        log.debug(f"Missing configuration: {missing}")
        raise ConfigError(missing)

    for name in (APPLICATION_ID_ENV, GUILD_ID_ENV):
        if not SNOWFLAKE_PATTERN.fullmatch(values[name]):
            log.debug(f"{name} failed snowflake validation")
            raise ValidationError(name)

    config = RegistrationConfig(
        token=values[TOKEN_ENV],
        application_id=values[APPLICATION_ID_ENV],
        guild_id=values[GUILD_ID_ENV],
    )
    log.debug(f"Registration config loaded: {config.describe()}")

    return config
