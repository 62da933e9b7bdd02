"""Announce new uploads exactly once per change of the newest item"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..store.base import KeyValueStore, join_path
from .feed_sources import FeedItem, FeedSource, SourceStatus
from .notifier import Notifier

logger = logging.getLogger("gremlinbot.feed_poller")


@dataclass(frozen=True)
class TrackedFeed:
    name: str
    source_id: str
    channel_id: int | None

    @classmethod
    def youtube(cls, channel: str, notify_channel_id: int | None) -> "TrackedFeed":
        return cls(name=f"youtube_{channel}", source_id=channel, channel_id=notify_channel_id)


def format_announcement(item: FeedItem) -> str:
    return f"📺 **New upload:** {item.title}\n{item.link}"


class FeedPoller:
    """Checks every tracked feed against its last-seen id in the store.

    Sources are tried in order until one returns an item. The new id is
    written before the announcement goes out: a crash in between loses one
    announcement instead of repeating it after restart.
    """

    def __init__(
        self,
        store: KeyValueStore,
        notifier: Notifier,
        sources: Sequence[FeedSource],
        feeds: Sequence[TrackedFeed],
        root: str = "notifications",
    ):
        self.store = store
        self.notifier = notifier
        self.sources = list(sources)
        self.feeds = list(feeds)
        self.root = root

    def state_path(self, feed: TrackedFeed) -> str:
        return join_path(self.root, feed.name, "lastSeenId")

    async def fetch_latest(self, feed: TrackedFeed) -> FeedItem | None:
        for source in self.sources:
            result = await source.latest(feed.source_id)
            if result.status is SourceStatus.OK and result.item is not None:
                return result.item
            if result.status is SourceStatus.ERROR:
                logger.warning(f"{source.name} failed for {feed.name}: {result.reason}")
            else:
                logger.debug(f"{source.name} unavailable for {feed.name}: {result.reason}")
        return None

    async def poll_feed(self, feed: TrackedFeed) -> FeedItem | None:
        """Return the item that was announced, if any"""
        item = await self.fetch_latest(feed)
        if item is None:
            logger.debug(f"No item from any source for {feed.name}")
            return None

        path = self.state_path(feed)
        if await self.store.get(path) == item.id:
            return None

        await self.store.set(path, item.id)
        await self.notifier.send(feed.channel_id, format_announcement(item))
        logger.info(f"Announced {feed.name}: {item.title} ({item.id}) via {item.source}")
        return item

    async def poll_once(self) -> list[FeedItem]:
        """Run one cycle over all feeds; one feed failing does not stop the others"""
        announced = []
        for feed in self.feeds:
            try:
                item = await self.poll_feed(feed)
            except Exception as e:
                logger.exception(f"Polling {feed.name} failed: {e}")
                continue
            if item is not None:
                announced.append(item)
        return announced
