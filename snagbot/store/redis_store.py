"""Redis-backed channel configuration store.

WHY: Configs in a dict vanish on every deploy and are not shared between
replicas. Redis keeps them across restarts and lets several processes
serve the same workspace.

HOW: Each channel's config is a JSON object stored under
"snagbot:channel_config:<channel_id>" with an optional expiry. Every
operation is a single Redis command (GET, SET EX, DEL, EXISTS), so each is
atomic per key without client-side locking. Payloads read back are checked
against CHANNEL_CONFIG_SCHEMA with jsonschema before use.

RULES:
- redis.RedisError is translated into StoreUnavailable
- A payload that is not valid JSON or fails the schema reads as "no config"
  (defaults), and is logged
- TTL is refreshed on every update, never on read
- The client is injectable so tests can pass a fake
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Optional

import jsonschema
import redis

from snagbot.config import DEFAULT_ITEM_NAME, DEFAULT_ITEM_PRICE, REDIS_KEY_PREFIX
from snagbot.core.models import ChannelConfig
from snagbot.errors import ErrorKind, StoreUnavailable
from snagbot.store.base import ChannelConfigStore

logger = logging.getLogger(__name__)

CHANNEL_CONFIG_SCHEMA = {
    "type": "object",
    "required": ["channel_id", "item_name", "item_price"],
    "properties": {
        "channel_id": {"type": "string", "minLength": 1},
        "item_name": {"type": "string", "minLength": 1},
        "item_price": {"type": "string", "pattern": r"^[0-9]+(\.[0-9]+)?$"},
    },
}

# Seconds before a socket call to Redis gives up
REDIS_SOCKET_TIMEOUT_S = 5.0


class RedisConfigStore(ChannelConfigStore):
    """Store configs as JSON strings in Redis."""

    backend_name = "redis"

    def __init__(
        self,
        client: Any,
        default_item_name: str = DEFAULT_ITEM_NAME,
        default_item_price: Decimal = DEFAULT_ITEM_PRICE,
        ttl_seconds: Optional[int] = None,
        key_prefix: str = REDIS_KEY_PREFIX,
    ) -> None:
        super().__init__(default_item_name, default_item_price)
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, redis_url: str, **kwargs: Any) -> "RedisConfigStore":
        """Connect to Redis and verify the connection with PING.

        Raises StoreUnavailable if the URL is malformed or the server does
        not answer.
        """
        try:
            client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=REDIS_SOCKET_TIMEOUT_S,
                socket_connect_timeout=REDIS_SOCKET_TIMEOUT_S,
            )
            client.ping()
        except (ValueError, redis.RedisError) as exc:
            raise StoreUnavailable(ErrorKind.STORE_UNAVAILABLE, "unable to connect to Redis: {}".format(exc))
        return cls(client, **kwargs)

    def key_for(self, channel_id: str) -> str:
        return self._key_prefix + channel_id

    def exists(self, channel_id: str) -> bool:
        try:
            return bool(self._client.exists(self.key_for(channel_id)))
        except redis.RedisError as exc:
            raise StoreUnavailable(ErrorKind.STORE_UNAVAILABLE, "error checking config: {}".format(exc))

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            logger.warning("Redis ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self._client.close()

    def _load(self, channel_id: str) -> Optional[ChannelConfig]:
        key = self.key_for(channel_id)
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            raise StoreUnavailable(ErrorKind.STORE_UNAVAILABLE, "error retrieving config: {}".format(exc))

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        try:
            data = json.loads(raw)
            jsonschema.validate(instance=data, schema=CHANNEL_CONFIG_SCHEMA)
        except (ValueError, jsonschema.ValidationError):
            logger.warning("Ignoring malformed config payload under %s", key, exc_info=True)
            return None

        config = ChannelConfig.from_dict(data)
        if config.unit_price <= 0:
            logger.warning("Ignoring non-positive price under %s", key)
            return None
        return config

    def _save(self, config: ChannelConfig) -> None:
        payload = json.dumps(config.to_dict())
        try:
            self._client.set(self.key_for(config.channel_id), payload, ex=self._ttl_seconds)
        except redis.RedisError as exc:
            raise StoreUnavailable(ErrorKind.STORE_UNAVAILABLE, "error storing config: {}".format(exc))

    def _delete(self, channel_id: str) -> None:
        try:
            self._client.delete(self.key_for(channel_id))
        except redis.RedisError as exc:
            raise StoreUnavailable(ErrorKind.STORE_UNAVAILABLE, "error deleting config: {}".format(exc))
