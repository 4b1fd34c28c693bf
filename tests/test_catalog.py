"""Tests for the command catalog and its wire serialization."""

import pytest

from services.discord.commands import (
    CatalogError,
    Choice,
    ContextMenuCommand,
    IntegerOption,
    SlashCommand,
    StringOption,
    build_catalog,
    serialize_catalog,
    validate_catalog,
)


@pytest.fixture
def payload():
    return serialize_catalog(build_catalog())


def _by_name(payload, name):
    return next(command for command in payload if command["name"] == name)


class TestCatalog:
    def test_five_commands_in_order(self, payload):
        assert [command["name"] for command in payload] == [
            "ping",
            "echo",
            "roll",
            "ye",
            "Ye Olde-ify",
        ]

    def test_names_unique(self, payload):
        names = [command["name"] for command in payload]
        assert len(set(names)) == len(names) == 5

    def test_ping_has_no_options(self, payload):
        assert _by_name(payload, "ping") == {
            "type": 1,
            "name": "ping",
            "description": "Replies with Pong!",
            "options": [],
        }

    def test_echo_requires_text(self, payload):
        (option,) = _by_name(payload, "echo")["options"]

        assert option == {
            "type": 3,
            "name": "text",
            "description": "What should I say?",
            "required": True,
        }

    def test_roll_bounds(self, payload):
        (option,) = _by_name(payload, "roll")["options"]

        assert option["type"] == 4
        assert option["required"] is False
        assert option["min_value"] == 2
        assert option["max_value"] == 1000
        assert option["min_value"] <= option["max_value"]

    def test_ye_options(self, payload):
        text, style = _by_name(payload, "ye")["options"]

        assert text["name"] == "text"
        assert text["required"] is True
        assert style["name"] == "style"
        assert style["required"] is False
        assert [choice["value"] for choice in style["choices"]] == [
            "plain",
            "bardic",
        ]

    def test_context_menu_targets_messages(self, payload):
        assert _by_name(payload, "Ye Olde-ify") == {
            "type": 3,
            "name": "Ye Olde-ify",
        }

    def test_serialization_is_deterministic(self):
        assert serialize_catalog(build_catalog()) == serialize_catalog(
            build_catalog()
        )


class TestValidation:
    def test_duplicate_names_rejected(self):
        with pytest.raises(CatalogError, match="duplicate"):
            validate_catalog(
                [
                    SlashCommand(name="ping", description="a"),
                    SlashCommand(name="ping", description="b"),
                ]
            )

    def test_empty_description_rejected(self):
        with pytest.raises(CatalogError):
            validate_catalog([SlashCommand(name="ping", description="  ")])

    def test_empty_name_rejected(self):
        with pytest.raises(CatalogError):
            validate_catalog([SlashCommand(name="", description="x")])

    def test_uppercase_slash_name_rejected(self):
        with pytest.raises(CatalogError):
            validate_catalog([SlashCommand(name="Ping", description="x")])

    def test_context_menu_allows_spaces_and_case(self):
        validate_catalog([ContextMenuCommand(name="Ye Olde-ify")])

    def test_inverted_bounds_rejected(self):
        with pytest.raises(CatalogError, match="min_value"):
            IntegerOption(name="sides", description="d", min_value=10, max_value=2)

    def test_required_after_optional_rejected(self):
        command = SlashCommand(
            name="ye",
            description="x",
            options=(
                StringOption(name="style", description="s"),
                StringOption(name="text", description="t", required=True),
            ),
        )

        with pytest.raises(CatalogError, match="required option"):
            validate_catalog([command])

    def test_too_many_choices_rejected(self):
        choices = tuple(Choice(name=f"c{i}", value=f"c{i}") for i in range(26))
        command = SlashCommand(
            name="pick",
            description="x",
            options=(StringOption(name="c", description="c", choices=choices),),
        )

        with pytest.raises(CatalogError, match="choices"):
            validate_catalog([command])
