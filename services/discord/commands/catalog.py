"""
Discord Command Catalog

The complete set of guild commands this deployment registers. The
registry treats the submitted list as the full desired state: anything
left out of this catalog is unregistered on the next sync.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence, Tuple

from shared.logging.logger import get_logger
from services.discord.commands.models import (
    CatalogError,
    Choice,
    CommandDefinition,
    ContextMenuCommand,
    ContextMenuTarget,
    IntegerOption,
    SlashCommand,
    StringOption,
)

log = get_logger("discord.commands.catalog")

# Registry limits
MAX_NAME_LENGTH = 32
MAX_DESCRIPTION_LENGTH = 100
MAX_OPTIONS = 25
MAX_CHOICES = 25

_SLASH_NAME = re.compile(r"[-_a-z0-9]{1,32}")


# --------------------------------------------------
# Catalog
# --------------------------------------------------

def _definitions() -> Tuple[CommandDefinition, ...]:
    return (
        SlashCommand(
            name="ping",
            description="Replies with Pong!",
        ),
        SlashCommand(
            name="echo",
            description="Echo back the provided text",
            options=(
                StringOption(
                    name="text",
                    description="What should I say?",
                    required=True,
                ),
            ),
        ),
        SlashCommand(
            name="roll",
            description="Roll a dice",
            options=(
                IntegerOption(
                    name="sides",
                    description="How many sides? (default 6)",
                    min_value=2,
                    max_value=1000,
                ),
            ),
        ),
        SlashCommand(
            name="ye",
            description="Render text in Olde English (Shakespearean style)",
            options=(
                StringOption(
                    name="text",
                    description="Text to translate",
                    required=True,
                ),
                StringOption(
                    name="style",
                    description="Flavor",
                    choices=(
                        Choice(name="plain", value="plain"),
                        Choice(
                            name="bardic (adds “Prithee/Forsooth…”)",
                            value="bardic",
                        ),
                    ),
                ),
            ),
        ),
        ContextMenuCommand(
            name="Ye Olde-ify",
            target=ContextMenuTarget.MESSAGE,
        ),
    )


def build_catalog() -> Tuple[CommandDefinition, ...]:
    """
    Build and validate the fixed command list, in registration order.
    """
    catalog = _definitions()
    validate_catalog(catalog)
    return catalog


def serialize_catalog(
    catalog: Sequence[CommandDefinition],
) -> List[Dict[str, Any]]:
    """Render the catalog as the request body for a bulk replace."""
    return [command.to_payload() for command in catalog]


# --------------------------------------------------
# Validation
# --------------------------------------------------

def _check_text(label: str, value: str, limit: int):
    if not value or not value.strip():
        raise CatalogError(f"{label} must not be empty")
    if len(value) > limit:
        raise CatalogError(f"{label} exceeds {limit} characters: {value!r}")


def _validate_slash(command: SlashCommand):
    if not _SLASH_NAME.fullmatch(command.name):
        raise CatalogError(f"invalid slash command name: {command.name!r}")
    _check_text(
        f"/{command.name} description",
        command.description,
        MAX_DESCRIPTION_LENGTH,
    )

    if len(command.options) > MAX_OPTIONS:
        raise CatalogError(f"/{command.name} has more than {MAX_OPTIONS} options")

    seen_optional = False
    option_names = set()
    for option in command.options:
        label = f"/{command.name} option '{option.name}'"

        if not _SLASH_NAME.fullmatch(option.name):
            raise CatalogError(f"{label}: invalid name")
        if option.name in option_names:
            raise CatalogError(f"{label}: duplicate option name")
        option_names.add(option.name)

        _check_text(f"{label} description", option.description, MAX_DESCRIPTION_LENGTH)

        # Discord rejects required options that follow optional ones
        if option.required and seen_optional:
            raise CatalogError(f"{label}: required option after an optional one")
        seen_optional = seen_optional or not option.required

        if isinstance(option, IntegerOption):
            if (
                option.min_value is not None
                and option.max_value is not None
                and option.min_value > option.max_value
            ):
                raise CatalogError(f"{label}: min_value exceeds max_value")
        elif isinstance(option, StringOption) and len(option.choices) > MAX_CHOICES:
            raise CatalogError(f"{label}: more than {MAX_CHOICES} choices")


def validate_catalog(catalog: Sequence[CommandDefinition]) -> None:
    """
    Enforce the registry constraints over a whole catalog.

    Raises CatalogError on the first violation found.
    """
    names = set()

    for command in catalog:
        if command.name in names:
            raise CatalogError(f"duplicate command name: {command.name!r}")
        names.add(command.name)

        if isinstance(command, SlashCommand):
            _validate_slash(command)
        elif isinstance(command, ContextMenuCommand):
            _check_text("context menu name", command.name, MAX_NAME_LENGTH)
        else:
            raise CatalogError(f"unsupported command definition: {command!r}")

    log.debug(f"Command catalog validated ({len(catalog)} commands)")
