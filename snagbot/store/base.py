"""Abstract channel configuration store.

WHY: The pipeline and the command layer only need four capabilities —
get, update, reset, exists — regardless of whether configs live in a dict
or in Redis. A single ABC lets either backend be injected at startup
without the callers knowing which one they got.

HOW: ChannelConfigStore is an ABC. Subclasses implement the raw storage
primitives (_load, _save, _delete, exists, ping); the base class owns the
validation and default-filling logic so both backends behave identically.

RULES:
- get() never fails on a missing channel: it returns the defaults
- Defaults are never written back to the backend on read
- update() rejects empty/blank names and prices <= 0 with ValidationError
- reset() is idempotent
- Backends raise StoreUnavailable for connectivity failures
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Optional

from snagbot.config import DEFAULT_ITEM_NAME, DEFAULT_ITEM_PRICE
from snagbot.core.models import ChannelConfig
from snagbot.errors import ErrorKind, ValidationError

logger = logging.getLogger(__name__)


class ChannelConfigStore(ABC):
    """Keyed store of per-channel unit configuration.

    To add a new backend:
    1. Subclass ChannelConfigStore
    2. Implement _load, _save, _delete, exists and ping
    3. Select it in snagbot.store.create_store
    """

    backend_name = "unknown"

    def __init__(
        self,
        default_item_name: str = DEFAULT_ITEM_NAME,
        default_item_price: Decimal = DEFAULT_ITEM_PRICE,
    ) -> None:
        self.default_item_name = default_item_name
        self.default_item_price = Decimal(default_item_price)

    # -- public API ---------------------------------------------------------

    def default_config(self, channel_id: str) -> ChannelConfig:
        """Return the system default config scoped to channel_id."""
        return ChannelConfig(
            channel_id=channel_id,
            unit_name=self.default_item_name,
            unit_price=self.default_item_price,
        )

    def get(self, channel_id: str) -> ChannelConfig:
        """Return the channel's custom config, or the defaults."""
        config = self._load(channel_id)
        if config is None:
            return self.default_config(channel_id)
        return config

    def update(self, channel_id: str, unit_name: str, unit_price) -> ChannelConfig:
        """Validate and store a custom config, overwriting any previous one."""
        name = (unit_name or "").strip()
        if not name:
            raise ValidationError(ErrorKind.VALIDATION, "item name cannot be empty")

        try:
            price = Decimal(str(unit_price))
        except InvalidOperation:
            raise ValidationError(ErrorKind.VALIDATION, "item price must be a number")
        if not price.is_finite() or price <= 0:
            raise ValidationError(ErrorKind.VALIDATION, "item price must be greater than zero")

        config = ChannelConfig(channel_id=channel_id, unit_name=name, unit_price=price)
        self._save(config)
        logger.info("Updated configuration for channel %s: item=%s, price=%.2f", channel_id, name, price)
        return config

    def reset(self, channel_id: str) -> None:
        """Remove any custom config for the channel."""
        self._delete(channel_id)
        logger.info("Reset configuration for channel %s to default", channel_id)

    @abstractmethod
    def exists(self, channel_id: str) -> bool:
        """True iff a custom config is set for the channel."""

    @abstractmethod
    def ping(self) -> bool:
        """True when the backend is reachable."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""

    # -- backend primitives -------------------------------------------------

    @abstractmethod
    def _load(self, channel_id: str) -> Optional[ChannelConfig]:
        """Return the stored config, or None when there is none."""

    @abstractmethod
    def _save(self, config: ChannelConfig) -> None:
        """Persist a validated config."""

    @abstractmethod
    def _delete(self, channel_id: str) -> None:
        """Remove the stored config, if any."""
