"""Dataclasses passed between the pipeline stages and the store.

WHY: The extractor, converter, formatter, store and Slack glue each need
the same handful of shapes. Typed dataclasses keep the contract explicit
and keep Slack payload dicts out of the core.

HOW: Five small dataclasses:
  ChannelConfig      — the active unit name/price for one channel
  ConversionResult   — item count plus exact-division flag
  CommandParseResult — unit name/price parsed from a slash command
  MessageEvent       — inbound message, already stripped of the envelope
  OutboundMessage    — threaded reply handed to the platform client

RULES:
- Money fields are Decimal
- ChannelConfig.to_dict() stores the price as a string so no precision is lost
- MessageEvent.from_slack() is the only place that reads Slack event keys
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping


@dataclass
class ChannelConfig:
    """Conversion parameters for one channel.

    RULES:
    - channel_id: opaque Slack channel id, the store key
    - unit_name: free text as typed by the user ("coffee", "Bunnings snags")
    - unit_price: Decimal > 0 (enforced by the store on write)
    """

    channel_id: str
    unit_name: str
    unit_price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel_id": self.channel_id,
            "item_name": self.unit_name,
            "item_price": format(self.unit_price, "f"),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChannelConfig":
        return cls(
            channel_id=str(data["channel_id"]),
            unit_name=str(data["item_name"]),
            unit_price=Decimal(str(data["item_price"])),
        )


@dataclass(frozen=True)
class ConversionResult:
    """How many units a total buys, and whether it divides exactly."""

    item_count: int
    is_exact: bool


@dataclass(frozen=True)
class CommandParseResult:
    """Unit name and price parsed from `/snagbot item ... price ...`."""

    unit_name: str
    unit_price: Decimal


@dataclass(frozen=True)
class MessageEvent:
    """An inbound channel message, after signature checks and envelope parsing."""

    channel_id: str
    text: str
    event_timestamp: str
    is_bot_originated: bool = False
    is_edit: bool = False

    @classmethod
    def from_slack(cls, event: Mapping[str, Any]) -> "MessageEvent":
        """Build a MessageEvent from a Slack `message` event payload.

        RULES:
        - bot_id present or subtype "bot_message" → is_bot_originated
        - subtype "message_changed" → is_edit
        - Missing text (joins, deletions) becomes ""
        """
        subtype = event.get("subtype") or ""
        return cls(
            channel_id=event.get("channel", ""),
            text=event.get("text") or "",
            event_timestamp=event.get("ts", ""),
            is_bot_originated=bool(event.get("bot_id")) or subtype == "bot_message",
            is_edit=subtype == "message_changed",
        )


@dataclass(frozen=True)
class OutboundMessage:
    """A reply to post in the thread of the triggering message."""

    channel_id: str
    text: str
    reply_to_timestamp: str
