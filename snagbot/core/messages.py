"""User-facing text for slash-command replies.

WHY: Every reply the command layer sends (confirmations, status, help,
errors) is a template. Keeping them together keeps commands.py focused on
parsing and dispatch, and makes the wording easy to change.

HOW: Plain functions returning str. Prices are always rendered with two
decimals. Error replies combine the error's reason and detail with a
per-kind hint and a literal usage example.

RULES:
- Every error reply ends with the usage example
- Prices render as "$5.00", never "$5" or "$5.0"
- The slash command name is a parameter, default "/snagbot"
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from snagbot.config import DEFAULT_COMMAND
from snagbot.core.models import ChannelConfig, CommandParseResult
from snagbot.errors import ErrorKind, SnagbotError

_ERROR_HINTS = {
    ErrorKind.INVALID_COMMAND: "The command format is invalid.",
    ErrorKind.MISSING_ITEM: "Please provide an item name.",
    ErrorKind.MISSING_PRICE: "Please provide a price value.",
    ErrorKind.INVALID_PRICE: "The price must be a positive number (e.g., 3.50).",
    ErrorKind.VALIDATION: "Check the item name and price and try again.",
}

STORE_FAILURE_TEXT = "Sorry, I couldn't reach the configuration store. Please try again in a moment."


def format_price(price: Decimal) -> str:
    """Render a price with exactly two decimals, e.g. "3.50"."""
    return str(Decimal(price).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def usage_example(command: str = DEFAULT_COMMAND) -> str:
    return '`{} item "coffee" price 5.00`'.format(command)


def format_config_updated(result: CommandParseResult) -> str:
    return "Configuration updated! Now converting dollar amounts to {} (at ${} each).".format(
        result.unit_name, format_price(result.unit_price)
    )


def format_reset(config: ChannelConfig) -> str:
    return "Configuration has been reset! Now using the default item: {} (at ${} each).".format(
        config.unit_name, format_price(config.unit_price)
    )


def format_status(config: ChannelConfig, is_custom: bool) -> str:
    if is_custom:
        prefix = "Current configuration: "
    else:
        prefix = "This channel is using the default configuration: "
    return "{}{} (at ${} each).".format(prefix, config.unit_name, format_price(config.unit_price))


def format_command_error(error: SnagbotError, command: str = DEFAULT_COMMAND) -> str:
    """Describe a failed command with a hint and a usage example.

    Output: "<reason>[: <detail>]\\n<hint>\\n\\nUsage example: `...`".
    """
    message = str(error)
    hint: Optional[str] = _ERROR_HINTS.get(error.kind)
    if hint:
        message += "\n" + hint
    return "{}\n\nUsage example: {}".format(message, usage_example(command))


def format_store_failure(action: str) -> str:
    return "Error {}: {}".format(action, STORE_FAILURE_TEXT)


def help_text(
    command: str = DEFAULT_COMMAND,
    default_item_name: str = "Bunnings snags",
    default_item_price: Decimal = Decimal("3.50"),
) -> str:
    return (
        "*SnagBot Help*\n\n"
        "SnagBot automatically responds to messages containing dollar amounts "
        "by converting them to a fun comparison.\n\n"
        "*Available Commands:*\n"
        "• {cmd} or {cmd} status - Show current configuration\n"
        '• {cmd} item "coffee" price 5.00 - Set custom item and price\n'
        "• {cmd} reset - Reset to default configuration\n"
        "• {cmd} help - Show this help message\n\n"
        "By default, dollar amounts are converted to {name} at ${price} each."
    ).format(cmd=command, name=default_item_name, price=format_price(default_item_price))
