import pytest

from voice_tagger.settings import load_settings
from voice_tagger.toggles import ALL_AS_VOICE, SEND_AS_VOICE, MemoryToggleStore, RedisToggleStore


class DummyRedis:
    def __init__(self, values=None, *, fail: bool = False) -> None:
        self.values = dict(values or {})
        self.fail = fail

    async def hget(self, key, field):
        if self.fail:
            raise ConnectionError("redis down")
        return self.values.get((key, field))

    async def hset(self, key, field, value):
        self.values[(key, field)] = value
        return 1


@pytest.mark.asyncio
async def test_memory_store_defaults_from_settings(monkeypatch):
    monkeypatch.setenv("VT_SEND_AS_VOICE", "0")
    monkeypatch.setenv("VT_ALL_AS_VOICE", "yes")

    store = MemoryToggleStore.from_settings(load_settings().toggles)

    assert await store.get(SEND_AS_VOICE) is False
    assert await store.get(ALL_AS_VOICE) is True
    assert await store.get("unknown") is False


@pytest.mark.asyncio
async def test_memory_store_notifies_watchers():
    store = MemoryToggleStore()
    seen = []
    unwatch = store.watch(lambda key, value: seen.append((key, value)))

    await store.set(ALL_AS_VOICE, True)
    unwatch()
    unwatch()
    await store.set(ALL_AS_VOICE, False)

    assert seen == [(ALL_AS_VOICE, True)]


@pytest.mark.asyncio
async def test_memory_store_survives_failing_watcher():
    store = MemoryToggleStore()

    def _boom(key, value):
        raise RuntimeError("listener failure")

    store.watch(_boom)
    await store.set(SEND_AS_VOICE, True)

    assert await store.get(SEND_AS_VOICE) is True


@pytest.mark.asyncio
async def test_redis_store_reads_fresh_values():
    client = DummyRedis()
    store = RedisToggleStore(client, "toggles", defaults={SEND_AS_VOICE: True})

    assert await store.get(SEND_AS_VOICE) is True
    assert await store.get(ALL_AS_VOICE) is False

    await store.set(SEND_AS_VOICE, False)
    client.values[("toggles", ALL_AS_VOICE)] = b"true"

    assert await store.get(SEND_AS_VOICE) is False
    assert await store.get(ALL_AS_VOICE) is True


@pytest.mark.asyncio
async def test_redis_store_falls_back_to_defaults_when_unreachable():
    store = RedisToggleStore(DummyRedis(fail=True), "toggles", defaults={ALL_AS_VOICE: True})

    assert await store.get(ALL_AS_VOICE) is True
