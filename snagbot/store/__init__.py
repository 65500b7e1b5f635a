"""Channel configuration store backends and the startup-time selector.

WHY: The bot picks its storage once, at startup, from configuration. The
rest of the code only ever sees a ChannelConfigStore.

HOW: create_store() returns a RedisConfigStore when REDIS_URL is set and
an InMemoryConfigStore otherwise, both seeded with the configured defaults.

RULES:
- Backend selection happens here and nowhere else
- A configured but unreachable Redis raises StoreUnavailable at startup
"""

from __future__ import annotations

from snagbot.config import Settings
from snagbot.store.base import ChannelConfigStore
from snagbot.store.memory import InMemoryConfigStore
from snagbot.store.redis_store import RedisConfigStore

__all__ = [
    "ChannelConfigStore",
    "InMemoryConfigStore",
    "RedisConfigStore",
    "create_store",
]


def create_store(settings: Settings) -> ChannelConfigStore:
    """Build the configuration store selected by settings."""
    if settings.use_redis:
        return RedisConfigStore.from_url(
            settings.redis_url,
            default_item_name=settings.default_item_name,
            default_item_price=settings.default_item_price,
            ttl_seconds=settings.config_ttl_seconds,
        )
    return InMemoryConfigStore(
        default_item_name=settings.default_item_name,
        default_item_price=settings.default_item_price,
    )
