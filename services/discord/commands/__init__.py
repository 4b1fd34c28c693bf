"""
Discord Command Package

This package holds the declarative command catalog pushed to the
guild-scoped application-command registry.

Modules:
- models   → command / option shapes and their wire serialization
- catalog  → the fixed command list for this deployment

IMPORTANT DESIGN RULES:
- No registration on import
- No Discord client ownership
- No network access
"""

from __future__ import annotations

from services.discord.commands.catalog import (
    build_catalog,
    serialize_catalog,
    validate_catalog,
)
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

__all__ = [
    "build_catalog",
    "serialize_catalog",
    "validate_catalog",
    "CatalogError",
    "Choice",
    "CommandDefinition",
    "ContextMenuCommand",
    "ContextMenuTarget",
    "IntegerOption",
    "SlashCommand",
    "StringOption",
]
