"""
Discord Command Definitions

Declarative, immutable command shapes for the application-command
registry. Two command kinds exist (slash and context-menu) and two option
kinds (string and integer). Each knows how to render itself in the
Discord wire schema.

IMPORTANT:
- Definitions carry no handler logic
- Serialization is deterministic and order-preserving
- Wire type codes come from discord.py enums, not literals
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import discord


class CatalogError(ValueError):
    """A command definition violates a registry constraint."""


# --------------------------------------------------
# Options
# --------------------------------------------------

@dataclass(frozen=True)
class Choice:
    name: str
    value: str

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class StringOption:
    name: str
    description: str
    required: bool = False
    choices: Tuple[Choice, ...] = ()

    option_type = discord.AppCommandOptionType.string

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.option_type.value,
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.choices:
            payload["choices"] = [choice.to_payload() for choice in self.choices]
        return payload


@dataclass(frozen=True)
class IntegerOption:
    name: str
    description: str
    required: bool = False
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    option_type = discord.AppCommandOptionType.integer

    def __post_init__(self):
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise CatalogError(
                f"option '{self.name}': min_value {self.min_value} "
                f"exceeds max_value {self.max_value}"
            )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.option_type.value,
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.min_value is not None:
            payload["min_value"] = self.min_value
        if self.max_value is not None:
            payload["max_value"] = self.max_value
        return payload


Option = Union[StringOption, IntegerOption]


# --------------------------------------------------
# Commands
# --------------------------------------------------

class ContextMenuTarget(enum.Enum):
    MESSAGE = discord.AppCommandType.message


@dataclass(frozen=True)
class SlashCommand:
    name: str
    description: str
    options: Tuple[Option, ...] = ()

    command_type = discord.AppCommandType.chat_input

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.command_type.value,
            "name": self.name,
            "description": self.description,
            "options": [option.to_payload() for option in self.options],
        }


@dataclass(frozen=True)
class ContextMenuCommand:
    name: str
    target: ContextMenuTarget = ContextMenuTarget.MESSAGE

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.target.value.value,
            "name": self.name,
        }


CommandDefinition = Union[SlashCommand, ContextMenuCommand]
