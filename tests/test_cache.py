import pytest

from wallet_profiler.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_entries_expire():
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)

    await cache.set("k", "v")
    assert await cache.get("k") == "v"

    clock.now += 11
    assert await cache.get("k") is None
    assert await cache.get("k", allow_stale=True) == "v"


@pytest.mark.asyncio
async def test_per_key_ttl_override():
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)

    await cache.set("long", 1, ttl=100)
    clock.now += 50
    assert await cache.get("long") == 1


@pytest.mark.asyncio
async def test_lru_eviction():
    cache = TTLCache(default_ttl=10, max_size=2)

    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.get("a")
    await cache.set("c", 3)

    assert cache.size() == 2
    assert await cache.get("b") is None
    assert await cache.get("a") == 1


@pytest.mark.asyncio
async def test_delete_and_clear():
    cache = TTLCache()
    await cache.set("a", 1)
    await cache.set("b", 2)

    await cache.delete("a")
    assert await cache.get("a") is None

    await cache.clear()
    assert cache.size() == 0
