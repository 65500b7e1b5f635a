"""Orchestrator: inbound message → threaded reply.

WHY: A message event has to be filtered (bots, edits), matched with its
channel's configuration, run through the calculator and, if anything was
found, sent back as a threaded reply. Store outages or odd totals must
never crash the worker that handles the event.

HOW: MessageProcessor holds the configuration store. process() turns a
MessageEvent into an OutboundMessage (or None); handle() additionally
passes the reply to a send callable supplied by the platform layer.

RULES:
- Bot-originated messages are skipped (loop prevention)
- Edited messages are skipped (edits are not reprocessed)
- Store read failures fall back to the store's defaults
- InvalidInput (negative total, absurd amounts) suppresses the reply
- The reply always threads under the triggering message's timestamp
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from snagbot.core.calculator import build_response
from snagbot.core.models import ChannelConfig, MessageEvent, OutboundMessage
from snagbot.errors import InvalidInput, StoreUnavailable
from snagbot.store.base import ChannelConfigStore

logger = logging.getLogger(__name__)

SendFn = Callable[[OutboundMessage], None]


class MessageProcessor:
    """Turns channel messages into unit-conversion replies."""

    def __init__(self, store: ChannelConfigStore) -> None:
        self.store = store

    def _config_for(self, channel_id: str) -> ChannelConfig:
        try:
            return self.store.get(channel_id)
        except StoreUnavailable as exc:
            logger.error("Config lookup failed for channel %s, using defaults: %s", channel_id, exc)
            return self.store.default_config(channel_id)

    def process(self, event: MessageEvent) -> Optional[OutboundMessage]:
        """Build the reply for one message, or None when there is nothing to say."""
        if event.is_bot_originated:
            logger.debug("Skipping bot message in channel %s", event.channel_id)
            return None
        if event.is_edit:
            logger.debug("Skipping message_changed event in channel %s", event.channel_id)
            return None

        config = self._config_for(event.channel_id)
        logger.debug(
            "Processing message in %s with item=%s, price=%s",
            event.channel_id, config.unit_name, config.unit_price,
        )

        try:
            text = build_response(event.text, config.unit_name, config.unit_price)
        except InvalidInput as exc:
            logger.warning("Suppressing reply in channel %s: %s", event.channel_id, exc)
            return None

        if text is None:
            logger.debug("No dollar values found in message, skipping")
            return None

        logger.info("Responding in channel %s: %s", event.channel_id, text)
        return OutboundMessage(
            channel_id=event.channel_id,
            text=text,
            reply_to_timestamp=event.event_timestamp,
        )

    def handle(self, event: MessageEvent, send: SendFn) -> Optional[OutboundMessage]:
        """Process an event and send the reply, if any.

        Send failures are logged and swallowed so one bad post never takes
        down the event worker. Returns the reply that was attempted.
        """
        reply = self.process(event)
        if reply is None:
            return None

        try:
            send(reply)
        except Exception:
            logger.exception("Failed to post reply to channel %s", reply.channel_id)
        return reply
