"""In-memory channel configuration store.

WHY: A single-workspace bot with no Redis still needs per-channel
configuration, and tests need a store with no external dependencies.

HOW: Configs live in a plain dict keyed by channel id. Every access goes
through one threading.Lock, which is plenty for one write per human
command and a read per message.

RULES:
- All public methods acquire self._lock
- Stored ChannelConfig objects are copied on the way in and out, so callers
  can never mutate store state behind the lock
- Nothing survives a process restart
"""

from __future__ import annotations

import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Optional

from snagbot.config import DEFAULT_ITEM_NAME, DEFAULT_ITEM_PRICE
from snagbot.core.models import ChannelConfig
from snagbot.store.base import ChannelConfigStore


class InMemoryConfigStore(ChannelConfigStore):
    """Thread-safe dict-backed store."""

    backend_name = "memory"

    def __init__(
        self,
        default_item_name: str = DEFAULT_ITEM_NAME,
        default_item_price: Decimal = DEFAULT_ITEM_PRICE,
    ) -> None:
        super().__init__(default_item_name, default_item_price)
        self._configs: Dict[str, ChannelConfig] = {}
        self._lock = threading.Lock()

    def exists(self, channel_id: str) -> bool:
        with self._lock:
            return channel_id in self._configs

    def ping(self) -> bool:
        return True

    def _load(self, channel_id: str) -> Optional[ChannelConfig]:
        with self._lock:
            config = self._configs.get(channel_id)
            return replace(config) if config is not None else None

    def _save(self, config: ChannelConfig) -> None:
        with self._lock:
            self._configs[config.channel_id] = replace(config)

    def _delete(self, channel_id: str) -> None:
        with self._lock:
            self._configs.pop(channel_id, None)
