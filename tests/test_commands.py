"""Tests for `/snagbot` parsing, dispatch and reply wording.

WHY: Users type the configuration command by hand. Every malformed shape
must map to the right error reason, and every valid one must land in the
store and produce the documented confirmation text.

HOW: parse_config_command() is tested directly with a table of inputs.
CommandService is tested against a real InMemoryConfigStore, and against
a MagicMock store for outage paths.

RULES:
- No Slack objects; CommandService is platform-neutral
- Store outages are simulated with StoreUnavailable side effects
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from snagbot.core import messages
from snagbot.core.commands import CommandResult, CommandService, parse_config_command
from snagbot.core.models import ChannelConfig, CommandParseResult
from snagbot.errors import CommandError, ErrorKind, StoreUnavailable, ValidationError


# ---------------------------------------------------------------------------
# Tests: parse_config_command
# ---------------------------------------------------------------------------


class TestParseConfigCommand:
    """Grammar: item <name | "quoted name"> price <value>."""

    @pytest.mark.parametrize(
        "text, name, price",
        [
            ('item "coffee" price 5.00', "coffee", Decimal("5.00")),
            ("item coffee price 5", "coffee", Decimal("5")),
            ('item "flat white" price 4.50', "flat white", Decimal("4.50")),
            ("ITEM Coffee PRICE 5.00", "Coffee", Decimal("5.00")),
            ("  item   coffee    price   $5.00  ", "coffee", Decimal("5.00")),
            ('item"coffee" price 5', "coffee", Decimal("5")),
            ("item beer price .5", "beer", Decimal(".5")),
            ("item beer price 7.", "beer", Decimal("7")),
        ],
    )
    def test_valid(self, text, name, price):
        result = parse_config_command(text)
        assert result == CommandParseResult(unit_name=name, unit_price=price)

    @pytest.mark.parametrize(
        "text, kind",
        [
            ("", ErrorKind.INVALID_COMMAND),
            ("coffee price 5", ErrorKind.INVALID_COMMAND),
            ("items coffee price 5", ErrorKind.INVALID_COMMAND),
            ("item", ErrorKind.MISSING_ITEM),
            ("item price 5", ErrorKind.MISSING_ITEM),
            ('item "" price 5', ErrorKind.MISSING_ITEM),
            ('item "coffee price 5', ErrorKind.INVALID_COMMAND),
            ("item coffee", ErrorKind.MISSING_PRICE),
            ('item "coffee"', ErrorKind.MISSING_PRICE),
            ("item coffee price", ErrorKind.MISSING_PRICE),
            ("item coffee cost 5", ErrorKind.INVALID_COMMAND),
            ("item coffee price abc", ErrorKind.INVALID_PRICE),
            ("item coffee price 0", ErrorKind.INVALID_PRICE),
            ("item coffee price -5", ErrorKind.INVALID_PRICE),
            ("item coffee price 1e3", ErrorKind.INVALID_PRICE),
            ("item coffee price 5 dollars", ErrorKind.INVALID_PRICE),
        ],
    )
    def test_invalid(self, text, kind):
        with pytest.raises(CommandError) as exc_info:
            parse_config_command(text)
        assert exc_info.value.kind is kind

    def test_invalid_price_detail_names_the_value(self):
        with pytest.raises(CommandError) as exc_info:
            parse_config_command("item coffee price abc")
        assert str(exc_info.value) == "price must be a positive number: abc is not a valid number"

    def test_none_text(self):
        with pytest.raises(CommandError):
            parse_config_command(None)


# ---------------------------------------------------------------------------
# Tests: CommandService
# ---------------------------------------------------------------------------


class TestCommandServiceConfigure:
    """item/price configuration through the service."""

    def test_update_success(self, memory_store):
        service = CommandService(memory_store)
        result = service.handle("C1", 'item "coffee" price 5.00')

        assert result.ok
        assert result.text == "Configuration updated! Now converting dollar amounts to coffee (at $5.00 each)."
        assert memory_store.get("C1") == ChannelConfig("C1", "coffee", Decimal("5.00"))

    def test_price_rendered_with_two_decimals(self, memory_store):
        result = CommandService(memory_store).handle("C1", "item beer price 7")
        assert "(at $7.00 each)" in result.text

    def test_invalid_price_reply(self, memory_store):
        result = CommandService(memory_store).handle("C1", "item coffee price abc")

        assert not result.ok
        assert result.error is ErrorKind.INVALID_PRICE
        assert "price must be a positive number" in result.text
        assert 'Usage example: `/snagbot item "coffee" price 5.00`' in result.text
        assert memory_store.exists("C1") is False

    def test_usage_example_uses_configured_command(self, memory_store):
        result = CommandService(memory_store, command="/snag").handle("C1", "nonsense")
        assert '`/snag item "coffee" price 5.00`' in result.text

    def test_validation_error_from_store_becomes_reply(self):
        store = MagicMock()
        store.update.side_effect = ValidationError(ErrorKind.VALIDATION, "item name cannot be empty")
        result = CommandService(store).handle("C1", "item coffee price 5")

        assert result.error is ErrorKind.VALIDATION
        assert "item name cannot be empty" in result.text

    def test_store_failure_becomes_reply(self):
        store = MagicMock()
        store.update.side_effect = StoreUnavailable(detail="connection refused")
        result = CommandService(store).handle("C1", "item coffee price 5")

        assert result.error is ErrorKind.STORE_UNAVAILABLE
        assert result.text == messages.format_store_failure("updating configuration")


class TestCommandServiceDispatch:
    """status / reset / help routing."""

    def test_empty_text_shows_default_status(self, memory_store):
        result = CommandService(memory_store).handle("C1", "")
        assert result.text == (
            "This channel is using the default configuration: Bunnings snags (at $3.50 each)."
        )

    def test_none_text_shows_status(self, memory_store):
        assert CommandService(memory_store).handle("C1", None).ok

    def test_status_after_update_is_custom(self, coffee_store):
        result = CommandService(coffee_store).handle("C_COFFEE", "STATUS")
        assert result.text == "Current configuration: coffee (at $5.00 each)."

    def test_reset(self, coffee_store):
        result = CommandService(coffee_store).handle("C_COFFEE", " reset ")

        assert result.text == (
            "Configuration has been reset! Now using the default item: Bunnings snags (at $3.50 each)."
        )
        assert coffee_store.exists("C_COFFEE") is False

    def test_reset_is_idempotent(self, memory_store):
        service = CommandService(memory_store)
        assert service.handle("C1", "reset").ok
        assert service.handle("C1", "reset").ok

    def test_help(self, memory_store):
        result = CommandService(memory_store).handle("C1", "help me")

        assert result.ok
        assert "*SnagBot Help*" in result.text
        assert "/snagbot reset" in result.text
        assert "Bunnings snags at $3.50 each" in result.text

    def test_help_must_be_its_own_word(self, memory_store):
        result = CommandService(memory_store).handle("C1", "helpful")

        assert result.error is ErrorKind.INVALID_COMMAND
        assert "*SnagBot Help*" not in result.text

    def test_help_keyword_is_case_insensitive(self, memory_store):
        assert "*SnagBot Help*" in CommandService(memory_store).handle("C1", "HELP").text

    def test_status_store_failure(self):
        store = MagicMock()
        store.get.side_effect = StoreUnavailable()
        result = CommandService(store).handle("C1", "status")

        assert result.error is ErrorKind.STORE_UNAVAILABLE
        assert result.text.startswith("Error retrieving configuration:")

    def test_reset_store_failure(self):
        store = MagicMock()
        store.reset.side_effect = StoreUnavailable()
        result = CommandService(store).handle("C1", "reset")

        assert result.text.startswith("Error resetting configuration:")

    def test_result_ok_property(self):
        assert CommandResult("fine").ok is True
        assert CommandResult("bad", ErrorKind.MISSING_ITEM).ok is False


# ---------------------------------------------------------------------------
# Tests: messages
# ---------------------------------------------------------------------------


class TestMessages:
    """Reply templates."""

    def test_format_price(self):
        assert messages.format_price(Decimal("5")) == "5.00"
        assert messages.format_price(Decimal("3.505")) == "3.51"

    def test_command_error_layout(self):
        text = messages.format_command_error(CommandError(ErrorKind.MISSING_PRICE))
        assert text == (
            "missing price value\n"
            "Please provide a price value.\n\n"
            'Usage example: `/snagbot item "coffee" price 5.00`'
        )
