"""Shared test fixtures for the snagbot test suite.

WHY: Most test modules need a configuration store, a ServiceHub and a
stand-in for Redis. Centralizing them here keeps every module on the same
defaults (Bunnings snags at $3.50) and keeps tests off the network.

HOW: FakeRedis is a dict-backed object exposing the handful of redis-py
methods RedisConfigStore calls. Fixtures build stores, settings and a hub
from it or from InMemoryConfigStore.

RULES:
- No test talks to a real Redis or to Slack
- Settings are built explicitly, never read from the environment
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

import pytest

from snagbot.config import Settings
from snagbot.container import ServiceHub, build_container
from snagbot.store.memory import InMemoryConfigStore
from snagbot.store.redis_store import RedisConfigStore


class FakeRedis:
    """Minimal in-process replacement for redis.Redis(decode_responses=True)."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.closed = False

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.data)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        slack_bot_token="xoxb-test",
        slack_signing_secret="test-secret",
        slack_app_token="xapp-test",
    )


@pytest.fixture
def memory_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis: FakeRedis) -> RedisConfigStore:
    return RedisConfigStore(fake_redis, ttl_seconds=30 * 24 * 60 * 60)


@pytest.fixture
def hub(settings: Settings, memory_store: InMemoryConfigStore) -> ServiceHub:
    return build_container(settings=settings, store=memory_store)


@pytest.fixture
def coffee_store(memory_store: InMemoryConfigStore) -> InMemoryConfigStore:
    """Memory store with channel C_COFFEE configured as coffee at $5.00."""
    memory_store.update("C_COFFEE", "coffee", Decimal("5.00"))
    return memory_store
