"""Slash-command parsing and dispatch for `/snagbot`.

WHY: Channel members configure the conversion unit by typing
`/snagbot item "coffee" price 5.00`. The text is free-form, so it needs a
forgiving parser with precise error reasons, and a dispatcher that maps
status/reset/help/item commands onto the configuration store.

HOW: parse_config_command() is a single-pass parser over whitespace-
normalised text; it raises CommandError with a specific ErrorKind.
CommandService.handle() dispatches on the first word and always returns a
CommandResult (reply text plus optional error kind) instead of raising, so
the Slack layer only has to send the text back.

RULES:
- Keywords ("item", "price", "reset", "status", "help") are case-insensitive
- The item name keeps its original case; quotes allow multi-word names
- Price must be a plain positive decimal, optionally prefixed with "$"
- Store outages become user-facing text, never exceptions
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from snagbot.config import DEFAULT_COMMAND
from snagbot.core import messages
from snagbot.core.models import CommandParseResult
from snagbot.errors import CommandError, ErrorKind, StoreUnavailable, ValidationError
from snagbot.store.base import ChannelConfigStore

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_QUOTED_NAME = re.compile(r'^"([^"]*)"')
_PRICE_LITERAL = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")

ITEM_KEYWORD = "item"
PRICE_KEYWORD = "price"


def _parse_price(price_text: str) -> Decimal:
    literal = price_text[1:] if price_text.startswith("$") else price_text
    if not _PRICE_LITERAL.match(literal):
        raise CommandError(ErrorKind.INVALID_PRICE, "{} is not a valid number".format(price_text))

    price = Decimal(literal)
    if price <= 0:
        raise CommandError(ErrorKind.INVALID_PRICE, "{} is not greater than zero".format(price_text))
    return price


def parse_config_command(command_text: Optional[str]) -> CommandParseResult:
    """Parse `item <name> price <value>` into a CommandParseResult.

    WHY: This is the only command that takes arguments, and users type it
    by hand, so every failure needs its own reason.

    HOW: Normalise whitespace, consume the "item" keyword, then either a
    quoted name or a single word, then the "price" keyword and a value.

    RULES:
    - Missing "item" keyword → INVALID_COMMAND
    - "price" (or "") where the name should be → MISSING_ITEM
    - Unclosed quote → INVALID_COMMAND
    - Nothing after the name, or "price" with no value → MISSING_PRICE
    - Something other than "price" after the name → INVALID_COMMAND
    - Non-numeric or <= 0 price → INVALID_PRICE
    """
    text = _WHITESPACE.sub(" ", (command_text or "").strip())

    head = text[:len(ITEM_KEYWORD)]
    after_head = text[len(ITEM_KEYWORD):]
    if head.lower() != ITEM_KEYWORD or (after_head and after_head[0] not in ' "'):
        raise CommandError(ErrorKind.INVALID_COMMAND, "command must start with 'item'")

    rest = after_head.strip()
    if not rest:
        raise CommandError(ErrorKind.MISSING_ITEM)

    if rest.startswith('"'):
        match = _QUOTED_NAME.match(rest)
        if match is None:
            raise CommandError(ErrorKind.INVALID_COMMAND, "unclosed quote in item name")
        unit_name = match.group(1).strip()
        if not unit_name:
            raise CommandError(ErrorKind.MISSING_ITEM)
        remaining = rest[match.end():].strip()
    else:
        unit_name, _, remaining = rest.partition(" ")
        if unit_name.lower() == PRICE_KEYWORD:
            raise CommandError(ErrorKind.MISSING_ITEM)
        remaining = remaining.strip()

    if not remaining:
        raise CommandError(ErrorKind.MISSING_PRICE)

    keyword, _, price_text = remaining.partition(" ")
    if keyword.lower() != PRICE_KEYWORD:
        raise CommandError(ErrorKind.INVALID_COMMAND, "expected 'price' keyword after item name")

    price_text = price_text.strip()
    if not price_text:
        raise CommandError(ErrorKind.MISSING_PRICE)

    return CommandParseResult(unit_name=unit_name, unit_price=_parse_price(price_text))


@dataclass(frozen=True)
class CommandResult:
    """Reply for one slash command; error is None on success."""

    text: str
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CommandService:
    """Dispatch `/snagbot` subcommands against a configuration store."""

    def __init__(self, store: ChannelConfigStore, command: str = DEFAULT_COMMAND) -> None:
        self.store = store
        self.command = command

    def handle(self, channel_id: str, raw_text: Optional[str]) -> CommandResult:
        """Run one slash command and return the ephemeral reply.

        RULES:
        - "reset" → reset to defaults
        - "status" or empty → show current config
        - first word "help" → help text
        - anything else → item/price configuration
        """
        normalized = (raw_text or "").strip().lower()
        logger.info("Handling %s command %r in channel %s", self.command, raw_text, channel_id)

        if normalized == "reset":
            return self.reset(channel_id)
        if normalized in ("", "status"):
            return self.status(channel_id)
        if normalized.split()[0] == "help":
            return CommandResult(
                messages.help_text(
                    self.command,
                    self.store.default_item_name,
                    self.store.default_item_price,
                )
            )
        return self.configure(channel_id, raw_text or "")

    def configure(self, channel_id: str, raw_text: str) -> CommandResult:
        try:
            result = parse_config_command(raw_text)
            self.store.update(channel_id, result.unit_name, result.unit_price)
        except (CommandError, ValidationError) as exc:
            logger.info("Rejected configuration command in channel %s: %s", channel_id, exc)
            return CommandResult(messages.format_command_error(exc, self.command), exc.kind)
        except StoreUnavailable as exc:
            logger.error("Config update failed for channel %s: %s", channel_id, exc)
            return CommandResult(messages.format_store_failure("updating configuration"), exc.kind)

        return CommandResult(messages.format_config_updated(result))

    def reset(self, channel_id: str) -> CommandResult:
        try:
            self.store.reset(channel_id)
            config = self.store.get(channel_id)
        except StoreUnavailable as exc:
            logger.error("Config reset failed for channel %s: %s", channel_id, exc)
            return CommandResult(messages.format_store_failure("resetting configuration"), exc.kind)
        return CommandResult(messages.format_reset(config))

    def status(self, channel_id: str) -> CommandResult:
        try:
            config = self.store.get(channel_id)
            is_custom = self.store.exists(channel_id)
        except StoreUnavailable as exc:
            logger.error("Config lookup failed for channel %s: %s", channel_id, exc)
            return CommandResult(messages.format_store_failure("retrieving configuration"), exc.kind)
        return CommandResult(messages.format_status(config, is_custom))
