"""Command-line interface for SnagBot.

WHY: One executable has to cover both deployment shapes (HTTP webhooks
behind a load balancer, or Socket Mode with no public URL), and it is
handy to try the conversion on a piece of text without Slack at all.

HOW: argparse with three subcommands:
  serve   — FastAPI + uvicorn, Slack posts to /api/events and /api/commands
  socket  — slack-bolt Socket Mode, no inbound HTTP
  convert — run one message through the calculator and print the reply
Logging is configured here, once per process, from LOG_LEVEL.

RULES:
- argv=None means sys.argv; explicit argv is for testing
- convert exits with status 1 when the text holds no dollar amounts
- Configuration errors (missing tokens, bad env values) print
  "Error: ..." to stderr and exit with status 1
- Python 3.9 compatible — no match/case, no X | Y unions
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from snagbot.config import load_settings
from snagbot.core.calculator import build_response
from snagbot.errors import InvalidInput, StoreUnavailable

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _price_arg(raw: str) -> Decimal:
    try:
        price = Decimal(raw.lstrip("$"))
    except InvalidOperation:
        raise argparse.ArgumentTypeError("{!r} is not a valid number".format(raw))
    if not price.is_finite() or price <= 0:
        raise argparse.ArgumentTypeError("price must be greater than zero")
    return price


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_serve(args: argparse.Namespace) -> None:
    from snagbot.server.app import run_api

    run_api(host=args.host, port=args.port)


def _cmd_socket(args: argparse.Namespace) -> None:
    from snagbot.slack.bot import main as socket_main

    socket_main()


def _cmd_convert(args: argparse.Namespace) -> None:
    settings = load_settings()
    item = args.item or settings.default_item_name
    price = args.price if args.price is not None else settings.default_item_price

    try:
        reply = build_response(args.text, item, price)
    except InvalidInput as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    if reply is None:
        print("No dollar amounts found.", file=sys.stderr)
        sys.exit(1)
    print(reply)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without starting a server.
    """
    parser = argparse.ArgumentParser(
        prog="snagbot",
        description="Slack bot that converts dollar amounts into Bunnings snags "
                    "(or whatever item a channel configures).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP webhook server (FastAPI + uvicorn).")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0).")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 8080).")
    serve.set_defaults(func=_cmd_serve)

    socket = sub.add_parser("socket", help="Run the bot over Slack Socket Mode.")
    socket.set_defaults(func=_cmd_socket)

    convert = sub.add_parser("convert", help="Convert the dollar amounts in TEXT and print the reply.")
    convert.add_argument("text", help='Message text, e.g. "lunch was $52.50".')
    convert.add_argument("--item", default=None, help="Unit name (default: DEFAULT_ITEM_NAME).")
    convert.add_argument(
        "--price",
        type=_price_arg,
        default=None,
        help="Unit price in dollars (default: DEFAULT_ITEM_PRICE).",
    )
    convert.set_defaults(func=_cmd_convert)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the `snagbot` console script and `python -m snagbot`."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    configure_logging(settings.log_level)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nStopped.", file=sys.stderr)
        sys.exit(130)
    except (ValueError, StoreUnavailable) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
