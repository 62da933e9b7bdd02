from __future__ import annotations

import asyncio

from gremlinbot.store.base import join_path
from gremlinbot.store.memory import MemoryStore


def test_join_path_drops_empty_segments() -> None:
    assert join_path("bans", "", "/address/", "1_2_3_4") == "bans/address/1_2_3_4"


def test_nested_set_get_delete() -> None:
    store = MemoryStore()

    async def scenario() -> None:
        await store.set("a/b/c", {"x": 1})
        assert await store.get("a/b/c") == {"x": 1}
        assert await store.get("a") == {"b": {"c": {"x": 1}}}

        await store.delete("a/b/c")
        # emptied parents disappear, like the realtime database
        assert await store.get("a") is None

    asyncio.run(scenario())


def test_delete_missing_path_is_noop() -> None:
    store = MemoryStore({"keep": 1})

    asyncio.run(store.delete("nothing/here"))

    assert asyncio.run(store.get("keep")) == 1


def test_setting_none_deletes() -> None:
    store = MemoryStore({"a": {"b": 1, "c": 2}})

    asyncio.run(store.set("a/b", None))

    assert asyncio.run(store.get("a")) == {"c": 2}


def test_get_returns_copies() -> None:
    store = MemoryStore({"a": {"b": 1}})

    value = asyncio.run(store.get("a"))
    value["b"] = 99

    assert asyncio.run(store.get("a")) == {"b": 1}


def test_tail_subscription_yields_latest_then_appends() -> None:
    store = MemoryStore({"logs": {"-a": {"n": 1}, "-b": {"n": 2}}})

    async def scenario() -> list[tuple[str, dict]]:
        stream = store.subscribe_tail("logs", limit=1)
        first = await anext(stream)

        await store.set("logs/-b", {"n": 20})  # update, not an append
        await store.set("logs/-c", {"n": 3})

        second = await asyncio.wait_for(anext(stream), timeout=1)
        await stream.aclose()
        return [first, second]

    first, second = asyncio.run(scenario())

    assert first == ("-b", {"n": 2})
    assert second == ("-c", {"n": 3})
