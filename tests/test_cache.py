"""Tests for ApiCache class.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import asyncio

import pytest

from apicache_core.cache.cache import ApiCache, CacheConfig
from apicache_core.exceptions import (
    CacheIOError,
    CacheNotStartedError,
    InvalidPatternError,
)
from apicache_core.network.monitor import ManualConnectivitySource
from apicache_core.store.persistence import PersistenceConfig, WriteMode


class TestApiCache:
    """Tests for ApiCache class."""

    @pytest.mark.asyncio
    async def test_miss_on_unknown_key(self, store, clock):
        """Test get on a key never written."""
        cache = await ApiCache.open(store=store, clock=clock)

        assert await cache.get("missing") is None
        assert cache.get_stats().total_misses == 1
        assert cache.get_stats().total_hits == 0

    @pytest.mark.asyncio
    async def test_basic_operations(self, store, clock):
        """Test get/set/delete."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key1", {"value": 1})
        assert await cache.get("key1") == {"value": 1}
        assert cache.get_stats().total_hits == 1

        assert await cache.delete("key1")
        assert await cache.get("key1") is None
        assert not await cache.delete("key1")

    @pytest.mark.asyncio
    async def test_ttl_expiration(self, store, clock):
        """Test an entry read past its TTL is gone."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("user:1", {"name": "Alice"}, ttl=1.0)
        assert await cache.get("user:1") == {"name": "Alice"}

        clock.advance(1.1)
        assert await cache.get("user:1") is None
        assert "user:1" not in cache
        assert cache.get_stats().total_misses == 1

    @pytest.mark.asyncio
    async def test_ttl_boundary_is_exclusive(self, store, clock):
        """Test an entry is still valid exactly at its TTL."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key", "value", ttl=5.0)
        clock.advance(5.0)
        assert await cache.get("key") == "value"

        clock.advance(0.001)
        assert await cache.get("key") is None

    @pytest.mark.asyncio
    async def test_ttl_expiration_real_clock(self, store):
        """Test TTL expiration with wall-clock time."""
        cache = await ApiCache.open(store=store)

        await cache.set("key", "value", ttl=0.1)
        assert await cache.get("key") == "value"

        await asyncio.sleep(0.2)
        assert await cache.get("key") is None

    @pytest.mark.asyncio
    async def test_default_ttl(self, store, clock):
        """Test entries without a TTL use the configured default."""
        cache = await ApiCache.open(CacheConfig(default_ttl=30.0), store, clock=clock)

        await cache.set("key", "value")
        assert cache.get_entry("key").ttl == 30.0

        await cache.set("zero", "value", ttl=0)
        assert cache.get_entry("zero").ttl == 0

    @pytest.mark.asyncio
    async def test_set_replaces_entry(self, store, clock):
        """Test a second set builds a fresh entry."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key", "old", ttl=10.0, etag='"v1"')
        first = cache.get_entry("key")

        clock.advance(3.0)
        await cache.set("key", "new", ttl=20.0, last_modified="Tue, 01 Oct 2024 10:00:00 GMT")
        second = cache.get_entry("key")

        assert first.data == "old"
        assert second.data == "new"
        assert second.timestamp == first.timestamp + 3.0
        assert second.etag is None
        assert second.last_modified == "Tue, 01 Oct 2024 10:00:00 GMT"
        assert second.key == "key"
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_max_size_evicts_oldest(self, store, clock):
        """Test eviction of the oldest write at max size."""
        cache = await ApiCache.open(CacheConfig(max_size=2), store, clock=clock)

        await cache.set("a", 1)
        clock.advance(1)
        await cache.set("b", 2)
        clock.advance(1)
        await cache.set("c", 3)

        assert sorted(cache.keys()) == ["b", "c"]
        assert cache.get_stats().total_entries == 2

    @pytest.mark.asyncio
    async def test_max_size_eviction_with_equal_timestamps(self, store, clock):
        """Test the first write wins ties."""
        cache = await ApiCache.open(CacheConfig(max_size=2), store, clock=clock)

        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)

        assert "a" not in cache
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_overwrite_refreshes_eviction_age(self, store, clock):
        """Test rewriting a key makes it the newest write."""
        cache = await ApiCache.open(CacheConfig(max_size=2), store, clock=clock)

        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("a", 10)
        await cache.set("c", 3)

        assert sorted(cache.keys()) == ["a", "c"]

    @pytest.mark.asyncio
    async def test_reads_do_not_protect_from_eviction(self, store, clock):
        """Test eviction is by write age, not access."""
        cache = await ApiCache.open(CacheConfig(max_size=2), store, clock=clock)

        await cache.set("a", 1)
        clock.advance(1)
        await cache.set("b", 2)
        await cache.get("a")
        clock.advance(1)
        await cache.set("c", 3)

        assert "a" not in cache

    @pytest.mark.asyncio
    async def test_lowered_max_size_shrinks_lazily(self, store, clock):
        """Test reconfiguring max_size trims one entry per set."""
        cache = await ApiCache.open(CacheConfig(max_size=5), store, clock=clock)
        for i in range(5):
            await cache.set(f"key{i}", i)
            clock.advance(1)

        cache.update_config(max_size=2)
        assert len(cache) == 5

        await cache.set("key5", 5)
        assert len(cache) == 5
        assert "key0" not in cache

    @pytest.mark.asyncio
    async def test_invalidate_pattern(self, store, clock):
        """Test regex invalidation deletes exactly the matching keys."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("user:1", "alice")
        await cache.set("user:2", "bob")
        await cache.set("session:1", "xyz")
        await cache.set("superuser:1", "root")
        writes_before = store.get_stats().writes

        removed = await cache.invalidate_pattern("^user:")

        assert removed == 2
        assert sorted(cache.keys()) == ["session:1", "superuser:1"]
        assert store.get_stats().writes == writes_before + 1

    @pytest.mark.asyncio
    async def test_invalidate_pattern_searches_anywhere(self, store, clock):
        """Test unanchored patterns match inside keys."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("user:1:avatar", "a")
        await cache.set("user:1:profile", "p")

        assert await cache.invalidate_pattern("avatar") == 1
        assert cache.keys() == ["user:1:profile"]

    @pytest.mark.asyncio
    async def test_invalid_pattern_deletes_nothing(self, store, clock):
        """Test a bad regex fails before any deletion."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("user:1", "alice")
        writes_before = store.get_stats().writes

        with pytest.raises(InvalidPatternError) as exc_info:
            await cache.invalidate_pattern("user:(")

        assert exc_info.value.pattern == "user:("
        assert "user:1" in cache
        assert store.get_stats().writes == writes_before

    @pytest.mark.asyncio
    async def test_clear(self, store, clock):
        """Test clear empties memory and removes the slot."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key1", "value1")
        await cache.set("key2", "value2")
        assert "api_cache" in store

        assert await cache.clear() == 2
        assert len(cache) == 0
        assert "api_cache" not in store

        reloaded = await ApiCache.open(store=store, clock=clock)
        assert len(reloaded) == 0

    @pytest.mark.asyncio
    async def test_clear_keeps_counters(self, store, clock):
        """Test hit/miss counters survive clear."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key", "value")
        await cache.get("key")
        await cache.get("missing")
        await cache.clear()

        stats = cache.get_stats()
        assert stats.total_hits == 1
        assert stats.total_misses == 1
        assert stats.total_entries == 0

    @pytest.mark.asyncio
    async def test_generate_key(self, store):
        """Test key generation through the cache."""
        cache = ApiCache(store=store)

        assert cache.generate_key("user", "profile") == "user:profile"
        assert cache.generate_key("user", "profile", {"a": 1, "b": 2}) == cache.generate_key(
            "user", "profile", {"b": 2, "a": 1}
        )

    @pytest.mark.asyncio
    async def test_unserializable_value(self, store, clock):
        """Test values the serializer rejects raise CacheIOError."""
        cache = await ApiCache.open(store=store, serializer="msgpack", clock=clock)

        with pytest.raises(CacheIOError):
            await cache.set("key", object())

        assert "key" not in cache
        assert "api_cache" not in store

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["etag", "last_modified"])
    async def test_unserializable_header_leaves_cache_usable(self, store, clock, field):
        """Test a rejected entry never reaches the map or later saves."""
        cache = await ApiCache.open(store=store, serializer="msgpack", clock=clock)
        await cache.set("good", "value")

        with pytest.raises(CacheIOError):
            await cache.set("bad", "value", **{field: object()})

        assert "bad" not in cache
        await cache.set("other", "value")
        assert await cache.delete("good")
        assert await cache.invalidate_pattern("^other$") == 1

    @pytest.mark.asyncio
    async def test_context_manager(self, store, clock):
        """Test async context manager loads and flushes."""
        async with ApiCache(store=store, clock=clock) as cache:
            await cache.set("key", "value")
            assert await cache.get("key") == "value"

        async with ApiCache(store=store, clock=clock) as cache:
            assert await cache.get("key") == "value"

    @pytest.mark.asyncio
    async def test_operations_load_lazily(self, store, clock):
        """Test the first operation loads persisted state."""
        first = await ApiCache.open(store=store, clock=clock)
        await first.set("key", "value")

        second = ApiCache(store=store, clock=clock)
        assert await second.get("key") == "value"

    @pytest.mark.asyncio
    async def test_sync_readers_require_start(self, store, clock):
        """Test sync readers refuse to report an unloaded store as empty."""
        first = await ApiCache.open(store=store, clock=clock)
        await first.set("a", 1)
        await first.set("b", 2)

        cache = ApiCache(store=store, clock=clock)
        readers = [
            cache.get_stats,
            cache.keys,
            lambda: cache.get_entry("a"),
            lambda: len(cache),
            lambda: "b" in cache,
            lambda: list(cache),
        ]
        for reader in readers:
            with pytest.raises(CacheNotStartedError) as exc_info:
                reader()
            assert exc_info.value.error_code == "CACHE_NOT_STARTED"

        await cache.start()

        assert cache.get_stats().total_entries == 2
        assert len(cache) == 2
        assert "b" in cache
        assert cache.get_entry("a").data == 1


class TestPersistence:
    """Tests for cache persistence."""

    @pytest.mark.asyncio
    async def test_rehydrates_from_storage(self, store, clock):
        """Test a new cache sees entries written by an earlier one."""
        cache = await ApiCache.open(store=store, clock=clock)
        await cache.set("user:1", {"name": "Alice"}, ttl=60.0, etag='"abc"')

        reloaded = await ApiCache.open(store=store, clock=clock)
        entry = reloaded.get_entry("user:1")

        assert entry.data == {"name": "Alice"}
        assert entry.etag == '"abc"'
        assert entry.ttl == 60.0
        assert reloaded.get_stats().total_misses == 0

    @pytest.mark.asyncio
    async def test_expired_entries_pruned_on_load(self, store, clock):
        """Test entries stale at load time are dropped without stats."""
        cache = await ApiCache.open(store=store, clock=clock)
        await cache.set("short", 1, ttl=10.0)
        await cache.set("long", 2, ttl=100.0)

        clock.advance(50.0)
        reloaded = await ApiCache.open(store=store, clock=clock)

        assert reloaded.keys() == ["long"]
        stats = reloaded.get_stats()
        assert stats.total_hits == 0
        assert stats.total_misses == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b'{"key": "value"}',
            b'[["a", {"key": "b", "data": 1, "timestamp": 0, "ttl": 10}]]',
            b'[["a", {"key": "a", "data": 1, "timestamp": "yesterday", "ttl": 10}]]',
            b'[["a"]]',
        ],
    )
    async def test_malformed_payload_yields_empty_store(self, store, clock, payload):
        """Test corrupt slots are treated as no data."""
        await store.write("api_cache", payload)

        cache = await ApiCache.open(store=store, clock=clock)

        assert len(cache) == 0
        await cache.set("key", "value")
        assert await cache.get("key") == "value"

    @pytest.mark.asyncio
    async def test_storage_failures_do_not_propagate(self, failing_store, clock):
        """Test the cache keeps working in memory when storage fails."""
        cache = await ApiCache.open(store=failing_store, clock=clock)

        await cache.set("key", "value")
        assert await cache.get("key") == "value"
        assert await cache.delete("key")
        await cache.set("key2", "value2")
        assert await cache.invalidate_pattern("^key") == 1
        await cache.clear()

        stats = failing_store.get_stats()
        assert stats.errors >= 5
        assert stats.last_error is not None

    @pytest.mark.asyncio
    async def test_msgpack_round_trip(self, store, clock):
        """Test persistence with the msgpack serializer."""
        cache = await ApiCache.open(store=store, serializer="msgpack", clock=clock)
        await cache.set("user:1", {"name": "Alice", "tags": ["a", "b"]})

        reloaded = await ApiCache.open(store=store, serializer="msgpack", clock=clock)
        assert await reloaded.get("user:1") == {"name": "Alice", "tags": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_custom_slot_key(self, store, clock):
        """Test caches with different slots do not see each other."""
        users = await ApiCache.open(
            store=store, persistence=PersistenceConfig(slot_key="users"), clock=clock
        )
        search = await ApiCache.open(
            store=store, persistence=PersistenceConfig(slot_key="search"), clock=clock
        )

        await users.set("key", "user")
        await search.set("key", "search")

        reloaded = await ApiCache.open(
            store=store, persistence=PersistenceConfig(slot_key="users"), clock=clock
        )
        assert await reloaded.get("key") == "user"

    @pytest.mark.asyncio
    async def test_write_through_overlapping_writes_can_lose_updates(self, gated_store, clock):
        """Test the slot holds whichever overlapping write finished last."""
        cache = await ApiCache.open(store=gated_store, clock=clock)

        first = asyncio.create_task(cache.set("a", 1))
        second = asyncio.create_task(cache.set("b", 2))
        while len(gated_store.gates) < 2:
            await asyncio.sleep(0)

        # The newer snapshot lands first and is then overwritten by the older one.
        gated_store.gates[1].set()
        await second
        gated_store.gates[0].set()
        await first

        assert cache.keys() == ["a", "b"]
        reloaded = await ApiCache.open(store=gated_store, clock=clock)
        assert reloaded.keys() == ["a"]

    @pytest.mark.asyncio
    async def test_write_behind_coalesces_writes(self, store, clock):
        """Test write-behind batches mutations into one write."""
        config = PersistenceConfig(write_mode=WriteMode.WRITE_BEHIND, flush_delay=60.0)
        cache = await ApiCache.open(store=store, persistence=config, clock=clock)

        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.delete("a")
        assert store.get_stats().writes == 0
        assert cache.persistence.has_pending

        await cache.flush()

        assert store.get_stats().writes == 1
        reloaded = await ApiCache.open(store=store, clock=clock)
        assert reloaded.keys() == ["b"]

    @pytest.mark.asyncio
    async def test_write_behind_flushes_after_delay(self, store, clock):
        """Test write-behind writes on its own after the delay."""
        config = PersistenceConfig(write_mode=WriteMode.WRITE_BEHIND, flush_delay=0.01)
        cache = await ApiCache.open(store=store, persistence=config, clock=clock)

        await cache.set("a", 1)
        await asyncio.sleep(0.1)

        assert store.get_stats().writes == 1
        assert not cache.persistence.has_pending

    @pytest.mark.asyncio
    async def test_write_behind_clear_discards_pending(self, store, clock):
        """Test clear drops a pending snapshot and removes the slot."""
        config = PersistenceConfig(write_mode=WriteMode.WRITE_BEHIND, flush_delay=60.0)
        cache = await ApiCache.open(store=store, persistence=config, clock=clock)

        await cache.set("a", 1)
        await cache.clear()
        await cache.stop()

        assert "api_cache" not in store
        assert store.get_stats().writes == 0

    @pytest.mark.asyncio
    async def test_stop_flushes_pending(self, store, clock):
        """Test stop writes a pending snapshot."""
        config = PersistenceConfig(write_mode=WriteMode.WRITE_BEHIND, flush_delay=60.0)
        cache = await ApiCache.open(store=store, persistence=config, clock=clock)

        await cache.set("a", 1)
        await cache.stop()

        reloaded = await ApiCache.open(store=store, clock=clock)
        assert reloaded.keys() == ["a"]


class TestCacheStats:
    """Tests for cache statistics."""

    @pytest.mark.asyncio
    async def test_hit_rate(self, store, clock):
        """Test hit and miss rates as percentages."""
        cache = await ApiCache.open(store=store, clock=clock)

        await cache.set("key", "value")
        await cache.get("key")
        await cache.get("key")
        await cache.get("key")
        await cache.get("missing")

        stats = cache.get_stats()
        assert stats.hit_rate == 75
        assert stats.miss_rate == 25
        assert stats.total_hits == 3
        assert stats.total_misses == 1

    @pytest.mark.asyncio
    async def test_empty_stats(self, store):
        """Test stats before any request."""
        cache = await ApiCache.open(store=store)

        stats = cache.get_stats()
        assert stats.total_entries == 0
        assert stats.hit_rate == 0
        assert stats.miss_rate == 0
        assert stats.cache_size == 0
        assert stats.oldest_entry is None
        assert stats.newest_entry is None

    @pytest.mark.asyncio
    async def test_size_and_timestamps(self, store, clock):
        """Test size and age range are computed from live entries."""
        cache = await ApiCache.open(store=store, clock=clock)
        start = clock.now

        await cache.set("a", {"name": "Alice"})
        clock.advance(5)
        await cache.set("b", "xyz")

        stats = cache.get_stats()
        assert stats.total_entries == 2
        assert stats.cache_size == len('{"name": "Alice"}') + len('"xyz"')
        assert stats.oldest_entry == start
        assert stats.newest_entry == start + 5

    @pytest.mark.asyncio
    async def test_to_dict(self, store, clock):
        """Test stats export."""
        cache = await ApiCache.open(store=store, clock=clock)
        await cache.get("missing")

        data = cache.get_stats().to_dict()
        assert data["total_misses"] == 1
        assert data["miss_rate"] == 100


class TestCacheConfig:
    """Tests for cache configuration."""

    def test_defaults(self):
        config = CacheConfig()

        assert config.default_ttl == 300.0
        assert config.max_size == 1000
        assert config.enable_offline_mode is True
        assert config.enable_compression is False

    def test_from_dict_accepts_camel_case(self):
        config = CacheConfig.from_dict(
            {"defaultTtl": 60, "maxSize": 10, "enable_offline_mode": False, "extra": 1}
        )

        assert config.default_ttl == 60
        assert config.max_size == 10
        assert config.enable_offline_mode is False

    @pytest.mark.parametrize("changes", [{"max_size": 0}, {"default_ttl": -1}])
    def test_validation(self, changes):
        with pytest.raises(ValueError):
            CacheConfig(**changes)

    def test_update_config_validates(self, store):
        cache = ApiCache(store=store)

        with pytest.raises(ValueError):
            cache.update_config(max_size=0)
        assert cache.config.max_size == 1000


class TestOnlineMode:
    """Tests for connectivity awareness."""

    def test_online_without_source(self, store):
        cache = ApiCache(store=store)

        assert cache.is_online_mode()

    def test_tracks_connectivity(self, store):
        source = ManualConnectivitySource()
        cache = ApiCache(store=store, connectivity=source)

        assert cache.is_online_mode()
        source.set_connected(False)
        assert not cache.is_online_mode()
        source.set_connected(True, "wifi")
        assert cache.is_online_mode()
        source.set_connected(None)
        assert not cache.is_online_mode()

    def test_offline_mode_disabled(self, store):
        source = ManualConnectivitySource()
        cache = ApiCache(CacheConfig(enable_offline_mode=False), store, connectivity=source)

        source.set_connected(False)
        assert len(source) == 0
        assert cache.is_online_mode()

    @pytest.mark.asyncio
    async def test_offline_does_not_change_behavior(self, store, clock):
        source = ManualConnectivitySource()
        cache = await ApiCache.open(store=store, connectivity=source, clock=clock)
        source.set_connected(False)

        await cache.set("key", "value")
        assert await cache.get("key") == "value"

    @pytest.mark.asyncio
    async def test_stop_unsubscribes(self, store):
        source = ManualConnectivitySource()
        cache = await ApiCache.open(store=store, connectivity=source)
        assert len(source) == 1

        await cache.stop()
        assert len(source) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
