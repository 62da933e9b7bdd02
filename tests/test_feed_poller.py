from __future__ import annotations

import asyncio
from typing import Any

from gremlinbot.services.feed_poller import FeedPoller, TrackedFeed, format_announcement
from gremlinbot.services.feed_sources import FeedItem, SourceResult
from gremlinbot.core.errors import SourceFetchError
from gremlinbot.store.memory import MemoryStore

FEED = TrackedFeed.youtube("UCgremlin", notify_channel_id=99)


def _item(video_id: str, source: str = "primary") -> FeedItem:
    return FeedItem(
        id=video_id,
        title=f"Video {video_id}",
        link=f"https://www.youtube.com/watch?v={video_id}",
        source=source,
    )


class RecordingNotifier:
    def __init__(self, store: MemoryStore | None = None, path: str | None = None) -> None:
        self.sent: list[tuple[int | None, str]] = []
        self.state_at_send: list[Any] = []
        self._store = store
        self._path = path

    async def send(self, channel_id: int | None, text: str) -> bool:
        if self._store is not None and self._path is not None:
            self.state_at_send.append(await self._store.get(self._path))
        self.sent.append((channel_id, text))
        return True


class ScriptedSource:
    """Returns the queued results in order, repeating the last one"""

    def __init__(self, name: str, results: list[SourceResult]) -> None:
        self.name = name
        self.results = list(results)
        self.calls: list[str] = []

    async def latest(self, feed_id: str) -> SourceResult:
        self.calls.append(feed_id)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class BrokenSource:
    name = "broken"

    async def latest(self, feed_id: str) -> SourceResult:
        raise RuntimeError("unexpected")


def test_announces_only_on_transitions() -> None:
    store = MemoryStore()
    notifier = RecordingNotifier()
    source = ScriptedSource("primary", [SourceResult.ok(_item(v)) for v in "AABBA"])
    poller = FeedPoller(store, notifier, [source], [FEED])

    async def scenario() -> list[list[FeedItem]]:
        return [await poller.poll_once() for _ in range(5)]

    cycles = asyncio.run(scenario())

    assert [len(cycle) for cycle in cycles] == [1, 0, 1, 0, 1]
    assert len(notifier.sent) == 3
    assert [text.split("\n")[0] for _, text in notifier.sent] == [
        "📺 **New upload:** Video A",
        "📺 **New upload:** Video B",
        "📺 **New upload:** Video A",
    ]
    assert asyncio.run(store.get("notifications/youtube_UCgremlin/lastSeenId")) == "A"


def test_state_is_written_before_notifying() -> None:
    store = MemoryStore()
    path = "notifications/youtube_UCgremlin/lastSeenId"
    notifier = RecordingNotifier(store, path)
    poller = FeedPoller(store, notifier, [ScriptedSource("p", [SourceResult.ok(_item("X"))])], [FEED])

    asyncio.run(poller.poll_once())

    assert notifier.state_at_send == ["X"]


def test_known_item_is_not_announced() -> None:
    store = MemoryStore({"notifications": {"youtube_UCgremlin": {"lastSeenId": "A"}}})
    notifier = RecordingNotifier()
    poller = FeedPoller(store, notifier, [ScriptedSource("p", [SourceResult.ok(_item("A"))])], [FEED])

    assert asyncio.run(poller.poll_once()) == []
    assert notifier.sent == []


def test_falls_back_when_primary_errors() -> None:
    store = MemoryStore()
    notifier = RecordingNotifier()
    primary = ScriptedSource("primary", [SourceResult.failed(SourceFetchError("primary", "HTTP 403"))])
    fallback = ScriptedSource("fallback", [SourceResult.ok(_item("F", source="fallback"))])
    poller = FeedPoller(store, notifier, [primary, fallback], [FEED])

    announced = asyncio.run(poller.poll_once())

    assert [item.source for item in announced] == ["fallback"]
    assert primary.calls == ["UCgremlin"]
    assert fallback.calls == ["UCgremlin"]
    assert notifier.sent[0][0] == 99


def test_falls_back_when_primary_unconfigured() -> None:
    primary = ScriptedSource("primary", [SourceResult.unavailable("no API key configured")])
    fallback = ScriptedSource("fallback", [SourceResult.ok(_item("F"))])
    poller = FeedPoller(MemoryStore(), RecordingNotifier(), [primary, fallback], [FEED])

    assert len(asyncio.run(poller.poll_once())) == 1


def test_primary_success_skips_fallback() -> None:
    primary = ScriptedSource("primary", [SourceResult.ok(_item("P"))])
    fallback = ScriptedSource("fallback", [SourceResult.ok(_item("F"))])
    poller = FeedPoller(MemoryStore(), RecordingNotifier(), [primary, fallback], [FEED])

    asyncio.run(poller.poll_once())

    assert fallback.calls == []


def test_no_item_anywhere_is_a_noop() -> None:
    store = MemoryStore()
    notifier = RecordingNotifier()
    sources = [
        ScriptedSource("primary", [SourceResult.failed(SourceFetchError("primary", "timeout"))]),
        ScriptedSource("fallback", [SourceResult.unavailable("feed has no entries")]),
    ]
    poller = FeedPoller(store, notifier, sources, [FEED])

    assert asyncio.run(poller.poll_once()) == []
    assert notifier.sent == []
    assert asyncio.run(store.get("notifications")) is None


def test_failure_in_one_feed_does_not_stop_others() -> None:
    store = MemoryStore()
    notifier = RecordingNotifier()
    other = TrackedFeed.youtube("UCother", notify_channel_id=99)

    class PickySource:
        name = "picky"

        async def latest(self, feed_id: str) -> SourceResult:
            if feed_id == "UCgremlin":
                raise RuntimeError("unexpected")
            return SourceResult.ok(_item("O"))

    poller = FeedPoller(store, notifier, [PickySource()], [FEED, other])

    announced = asyncio.run(poller.poll_once())

    assert [item.id for item in announced] == ["O"]


def test_cycles_are_independent_after_errors() -> None:
    poller = FeedPoller(MemoryStore(), RecordingNotifier(), [BrokenSource()], [FEED])

    assert asyncio.run(poller.poll_once()) == []
    assert asyncio.run(poller.poll_once()) == []


def test_announcement_format() -> None:
    assert format_announcement(_item("abc")) == (
        "📺 **New upload:** Video abc\nhttps://www.youtube.com/watch?v=abc"
    )
