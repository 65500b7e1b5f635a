"""Tests for the channel configuration stores and backend selection.

WHY: Both backends must behave identically from the caller's side —
defaults on a miss, validation on write, idempotent reset — and the Redis
backend must turn connectivity errors into StoreUnavailable and shrug off
malformed payloads.

HOW: A shared behaviour class runs against both InMemoryConfigStore and
RedisConfigStore (backed by the FakeRedis fixture). Redis-only behaviour
(key layout, TTL, error translation) uses FakeRedis or a MagicMock client.

RULES:
- No real Redis connection is ever opened
- redis.Redis.from_url is patched wherever create_store picks Redis
"""

from __future__ import annotations

import json
import threading
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import redis

from snagbot.config import Settings
from snagbot.core.models import ChannelConfig
from snagbot.errors import StoreUnavailable, ValidationError
from snagbot.store import InMemoryConfigStore, RedisConfigStore, create_store


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("redis_store")


# ---------------------------------------------------------------------------
# Tests: shared behaviour
# ---------------------------------------------------------------------------


class TestStoreBehaviour:
    """Contract every ChannelConfigStore backend honours."""

    def test_get_missing_returns_defaults(self, store):
        assert store.get("C1") == ChannelConfig("C1", "Bunnings snags", Decimal("3.50"))

    def test_get_missing_does_not_persist(self, store):
        store.get("C1")
        assert store.exists("C1") is False

    def test_update_then_get(self, store):
        store.update("C1", "coffee", Decimal("5.00"))
        assert store.get("C1") == ChannelConfig("C1", "coffee", Decimal("5.00"))
        assert store.exists("C1") is True

    def test_update_strips_name(self, store):
        config = store.update("C1", "  coffee  ", Decimal("5"))
        assert config.unit_name == "coffee"

    def test_update_overwrites(self, store):
        store.update("C1", "coffee", Decimal("5"))
        store.update("C1", "beer", Decimal("8"))
        assert store.get("C1").unit_name == "beer"

    def test_channels_are_independent(self, store):
        store.update("C1", "coffee", Decimal("5"))
        assert store.get("C2").unit_name == "Bunnings snags"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_update_rejects_blank_name(self, store, name):
        with pytest.raises(ValidationError):
            store.update("C1", name, Decimal("5"))
        assert store.exists("C1") is False

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1"), "abc"])
    def test_update_rejects_bad_price(self, store, price):
        with pytest.raises(ValidationError):
            store.update("C1", "coffee", price)

    def test_reset_removes_custom_config(self, store):
        store.update("C1", "coffee", Decimal("5"))
        store.reset("C1")
        assert store.exists("C1") is False
        assert store.get("C1").unit_name == "Bunnings snags"

    def test_reset_is_idempotent(self, store):
        store.reset("C1")
        store.reset("C1")
        assert store.exists("C1") is False

    def test_ping(self, store):
        assert store.ping() is True


# ---------------------------------------------------------------------------
# Tests: InMemoryConfigStore
# ---------------------------------------------------------------------------


class TestInMemoryConfigStore:
    """Dict-backed specifics."""

    def test_custom_defaults(self):
        store = InMemoryConfigStore("beers", Decimal("8.00"))
        assert store.get("C1") == ChannelConfig("C1", "beers", Decimal("8.00"))

    def test_returned_config_is_a_copy(self, memory_store):
        memory_store.update("C1", "coffee", Decimal("5"))
        config = memory_store.get("C1")
        config.unit_name = "tampered"
        assert memory_store.get("C1").unit_name == "coffee"

    def test_concurrent_updates(self, memory_store):
        def worker(index):
            for _ in range(50):
                memory_store.update("C{}".format(index), "coffee", Decimal("5"))
                memory_store.get("C{}".format(index))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(memory_store.exists("C{}".format(i)) for i in range(8))


# ---------------------------------------------------------------------------
# Tests: RedisConfigStore
# ---------------------------------------------------------------------------


class TestRedisConfigStore:
    """Redis-backed specifics."""

    def test_key_layout_and_payload(self, redis_store, fake_redis):
        redis_store.update("C1", "coffee", Decimal("5.00"))

        raw = fake_redis.data["snagbot:channel_config:C1"]
        assert json.loads(raw) == {"channel_id": "C1", "item_name": "coffee", "item_price": "5.00"}

    def test_ttl_applied_on_write(self, redis_store, fake_redis):
        redis_store.update("C1", "coffee", Decimal("5"))
        assert fake_redis.ttls["snagbot:channel_config:C1"] == 30 * 24 * 60 * 60

    def test_no_ttl(self, fake_redis):
        store = RedisConfigStore(fake_redis, ttl_seconds=None)
        store.update("C1", "coffee", Decimal("5"))
        assert fake_redis.ttls["snagbot:channel_config:C1"] is None

    def test_bytes_payload_is_decoded(self, fake_redis):
        client = MagicMock()
        client.get.return_value = json.dumps(
            {"channel_id": "C1", "item_name": "coffee", "item_price": "5.00"}
        ).encode("utf-8")
        store = RedisConfigStore(client)
        assert store.get("C1").unit_name == "coffee"

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            json.dumps({"channel_id": "C1", "item_name": "coffee"}),
            json.dumps({"channel_id": "C1", "item_name": "", "item_price": "5.00"}),
            json.dumps({"channel_id": "C1", "item_name": "coffee", "item_price": "-5"}),
            json.dumps({"channel_id": "C1", "item_name": "coffee", "item_price": "0"}),
            json.dumps({"channel_id": "C1", "item_name": "coffee", "item_price": 5}),
        ],
    )
    def test_malformed_payload_reads_as_defaults(self, redis_store, fake_redis, payload):
        fake_redis.data["snagbot:channel_config:C1"] = payload
        assert redis_store.get("C1") == redis_store.default_config("C1")

    @pytest.mark.parametrize("method, args", [
        ("get", ("C1",)),
        ("exists", ("C1",)),
        ("reset", ("C1",)),
        ("update", ("C1", "coffee", Decimal("5"))),
    ])
    def test_redis_errors_become_store_unavailable(self, method, args):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.set.side_effect = redis.ConnectionError("down")
        client.delete.side_effect = redis.ConnectionError("down")
        client.exists.side_effect = redis.ConnectionError("down")
        store = RedisConfigStore(client)

        with pytest.raises(StoreUnavailable):
            getattr(store, method)(*args)

    def test_ping_failure_returns_false(self):
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("down")
        assert RedisConfigStore(client).ping() is False

    def test_close(self, redis_store, fake_redis):
        redis_store.close()
        assert fake_redis.closed is True

    def test_from_url_unreachable(self):
        with patch("snagbot.store.redis_store.redis.Redis.from_url") as from_url:
            from_url.return_value.ping.side_effect = redis.ConnectionError("refused")
            with pytest.raises(StoreUnavailable):
                RedisConfigStore.from_url("redis://localhost:6379/0")


# ---------------------------------------------------------------------------
# Tests: create_store
# ---------------------------------------------------------------------------


class TestCreateStore:
    """Backend selection from Settings."""

    def test_memory_when_no_redis_url(self):
        store = create_store(Settings(default_item_name="beers", default_item_price=Decimal("8")))
        assert isinstance(store, InMemoryConfigStore)
        assert store.get("C1").unit_name == "beers"

    def test_redis_when_url_set(self):
        settings = Settings(redis_url="redis://localhost:6379/0", config_ttl_days=1)
        with patch("snagbot.store.redis_store.redis.Redis.from_url") as from_url:
            store = create_store(settings)

        assert isinstance(store, RedisConfigStore)
        from_url.assert_called_once()
        assert from_url.call_args[0][0] == "redis://localhost:6379/0"
        assert store._ttl_seconds == 24 * 60 * 60
