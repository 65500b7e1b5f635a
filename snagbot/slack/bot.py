"""Slack bot: bolt App factory, message/command listeners, Socket Mode entry.

WHY: Slack events arrive either as HTTP webhooks or over a Socket Mode
WebSocket. Both paths should end in the same two listeners — one for
channel messages, one for the `/snagbot` slash command — which turn Slack
payloads into core calls.

HOW: create_app() builds a slack-bolt App and registers closures that call
handle_message_event() and handle_snagbot_command(). Those two module
functions hold the actual glue and take their collaborators as arguments,
so tests can call them with mocks and no App at all.

RULES:
- Replies go out with client.chat_postMessage(..., thread_ts=<trigger ts>)
- Slash commands are acked at once, then answered through respond()
  with response_type "ephemeral"
- Bolt acks events before running listeners on its worker pool, so a slow
  Slack API call never blocks ingestion of the next event
- Runnable as: python -m snagbot socket
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from snagbot.config import require_app_token, require_bot_token, require_signing_secret
from snagbot.container import ServiceHub, build_container
from snagbot.core.commands import CommandResult, CommandService
from snagbot.core.models import MessageEvent, OutboundMessage
from snagbot.core.pipeline import MessageProcessor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Listener glue
# ---------------------------------------------------------------------------


def make_sender(client: Any) -> Callable[[OutboundMessage], None]:
    """Return a send function that posts an OutboundMessage as a thread reply."""

    def _send(message: OutboundMessage) -> None:
        client.chat_postMessage(
            channel=message.channel_id,
            text=message.text,
            thread_ts=message.reply_to_timestamp,
        )

    return _send


def handle_message_event(
    event: Dict[str, Any],
    client: Any,
    processor: MessageProcessor,
) -> Optional[OutboundMessage]:
    """Handle a Slack `message` event.

    WHY: Every channel message the bot can see arrives here; only those
    with dollar amounts get a reply.

    HOW: Converts the event dict into a MessageEvent and lets the
    processor decide and send.

    RULES:
    - Returns the reply that was posted (or attempted), None otherwise
    - Never raises on Slack API failures (the processor logs them)
    """
    message = MessageEvent.from_slack(event)
    return processor.handle(message, make_sender(client))


def handle_snagbot_command(
    ack: Callable[..., Any],
    respond: Callable[..., Any],
    command: Dict[str, Any],
    commands: CommandService,
) -> CommandResult:
    """Handle a `/snagbot` invocation.

    RULES:
    - ack() FIRST, before any store I/O (Slack allows 3 seconds)
    - The reply goes out afterwards through respond(), ephemeral
    """
    ack()

    channel_id = command.get("channel_id", "")
    text = command.get("text", "")

    result = commands.handle(channel_id, text)
    try:
        respond(response_type="ephemeral", text=result.text)
    except Exception:
        logger.exception("Failed to respond to %s in channel %s", command.get("command"), channel_id)
    return result


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def create_app(
    hub: ServiceHub,
    bot_token: Optional[str] = None,
    signing_secret: Optional[str] = None,
    socket_mode: bool = False,
) -> App:
    """Create and configure the Slack Bolt app with all listeners.

    WHY: Factory function allows the HTTP server, Socket Mode and tests to
    build an App around their own ServiceHub, and avoids module-level
    side effects.

    RULES:
    - bot_token / signing_secret default to the hub's settings
    - HTTP mode requires a signing secret; Socket Mode does not
    - The slash command name comes from settings (default "/snagbot")
    """
    settings = hub.settings
    token = bot_token or require_bot_token(settings)

    if socket_mode:
        app = App(token=token, request_verification_enabled=False)
    else:
        secret = signing_secret or require_signing_secret(settings)
        app = App(token=token, signing_secret=secret)

    @app.event("message")
    def _on_message(event: Dict[str, Any], client: Any) -> None:
        handle_message_event(event, client, hub.processor)

    @app.command(settings.slash_command)
    def _on_command(ack: Callable[..., Any], respond: Callable[..., Any], command: Dict[str, Any]) -> None:
        handle_snagbot_command(ack, respond, command, hub.commands)

    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(hub: Optional[ServiceHub] = None) -> None:
    """Start the Slack bot in Socket Mode.

    WHY: Socket Mode needs no public URL, which suits local development and
    deployments behind a firewall.

    HOW: Builds the ServiceHub (store selection included), creates the App
    and blocks on SocketModeHandler.start().

    RULES:
    - Requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN
    - Logging is configured by the caller (snagbot.cli)
    """
    hub = hub or build_container()
    app_token = require_app_token(hub.settings)
    app = create_app(hub, socket_mode=True)

    logger.info("Starting SnagBot in Socket Mode...")
    logger.info("Configuration store: %s", hub.store.backend_name)
    logger.info(
        "Default item: %s at $%s",
        hub.settings.default_item_name, hub.settings.default_item_price,
    )

    handler = SocketModeHandler(app, app_token)
    handler.start()
