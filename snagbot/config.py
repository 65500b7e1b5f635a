"""Configuration loading: .env, environment variables and defaults.

WHY: Tokens, the default unit and the store backend differ between a
developer laptop and production. Keeping every knob in one place, read from
the environment, means nothing is hardcoded in the bot or the server.

HOW: python-dotenv loads the .env file on import. load_settings() reads
the environment (or an explicit mapping, for tests) into a frozen Settings
dataclass. The require_* helpers give a clear error when a token needed by
the chosen run mode is missing.

RULES:
- DEFAULT_ITEM_PRICE must parse as a decimal greater than zero
- REDIS_URL set → Redis backend, empty → in-memory backend
- CONFIG_TTL_DAYS = 0 disables key expiry in Redis
- Tokens are never logged and never have placeholder defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load .env from the project root (where the process is started)
load_dotenv()

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_ITEM_NAME = "Bunnings snags"
DEFAULT_ITEM_PRICE = Decimal("3.50")
DEFAULT_COMMAND = "/snagbot"
DEFAULT_CONFIG_TTL_DAYS = 30
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

REDIS_KEY_PREFIX = "snagbot:channel_config:"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for one SnagBot process."""

    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slack_app_token: str = ""
    slash_command: str = DEFAULT_COMMAND
    default_item_name: str = DEFAULT_ITEM_NAME
    default_item_price: Decimal = DEFAULT_ITEM_PRICE
    redis_url: str = ""
    config_ttl_days: int = DEFAULT_CONFIG_TTL_DAYS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def use_redis(self) -> bool:
        return bool(self.redis_url)

    @property
    def config_ttl_seconds(self) -> Optional[int]:
        if self.config_ttl_days <= 0:
            return None
        return self.config_ttl_days * 24 * 60 * 60


def _parse_price(raw: str) -> Decimal:
    try:
        price = Decimal(raw)
    except InvalidOperation:
        raise ValueError("DEFAULT_ITEM_PRICE must be a number, got {!r}".format(raw))
    if not price.is_finite() or price <= 0:
        raise ValueError("DEFAULT_ITEM_PRICE must be greater than zero, got {!r}".format(raw))
    return price


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw))


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    WHY: Entry points (CLI, FastAPI, Socket Mode) all need the same view
    of the configuration; tests need to inject their own.

    HOW: Reads each variable with a fallback default, then validates the
    values that have invariants (price > 0, integers).

    RULES:
    - environ=None means os.environ (already populated by python-dotenv)
    - Raises ValueError on malformed values, naming the variable
    - A slash command without a leading "/" gets one
    """
    env = os.environ if environ is None else environ

    item_name = env.get("DEFAULT_ITEM_NAME", "").strip() or DEFAULT_ITEM_NAME
    raw_price = env.get("DEFAULT_ITEM_PRICE", "").strip()
    item_price = _parse_price(raw_price) if raw_price else DEFAULT_ITEM_PRICE

    command = env.get("SNAGBOT_COMMAND", "").strip() or DEFAULT_COMMAND
    if not command.startswith("/"):
        command = "/" + command

    raw_ttl = env.get("CONFIG_TTL_DAYS", "").strip()
    raw_port = env.get("PORT", "").strip()

    return Settings(
        slack_bot_token=env.get("SLACK_BOT_TOKEN", "").strip(),
        slack_signing_secret=env.get("SLACK_SIGNING_SECRET", "").strip(),
        slack_app_token=env.get("SLACK_APP_TOKEN", "").strip(),
        slash_command=command,
        default_item_name=item_name,
        default_item_price=item_price,
        redis_url=env.get("REDIS_URL", "").strip(),
        config_ttl_days=_parse_int("CONFIG_TTL_DAYS", raw_ttl) if raw_ttl else DEFAULT_CONFIG_TTL_DAYS,
        host=env.get("HOST", "").strip() or DEFAULT_HOST,
        port=_parse_int("PORT", raw_port) if raw_port else DEFAULT_PORT,
        log_level=(env.get("LOG_LEVEL", "").strip() or "INFO").upper(),
    )


def require_bot_token(settings: Settings) -> str:
    """Return the bot token or raise ValueError if it is missing."""
    if not settings.slack_bot_token:
        raise ValueError(
            "Slack bot token not configured. "
            "Add SLACK_BOT_TOKEN to the .env file or the environment."
        )
    return settings.slack_bot_token


def require_signing_secret(settings: Settings) -> str:
    """Return the signing secret (HTTP mode) or raise ValueError."""
    if not settings.slack_signing_secret:
        raise ValueError(
            "Slack signing secret not configured. "
            "Add SLACK_SIGNING_SECRET to the .env file or the environment."
        )
    return settings.slack_signing_secret


def require_app_token(settings: Settings) -> str:
    """Return the app-level token (Socket Mode) or raise ValueError."""
    if not settings.slack_app_token:
        raise ValueError(
            "Slack app token not configured. "
            "Add SLACK_APP_TOKEN to the .env file to use Socket Mode."
        )
    return settings.slack_app_token
