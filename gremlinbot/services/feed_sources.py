"""Where new uploads are looked up: the YouTube Data API first, the channel feed second"""

import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import feedparser
import httpx

from ..core.errors import SourceFetchError

logger = logging.getLogger("gremlinbot.feed_sources")

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class FeedItem:
    id: str
    title: str
    link: str
    source: str


class SourceStatus(Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass(frozen=True)
class SourceResult:
    status: SourceStatus
    item: FeedItem | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, item: FeedItem) -> "SourceResult":
        return cls(SourceStatus.OK, item=item)

    @classmethod
    def unavailable(cls, reason: str) -> "SourceResult":
        return cls(SourceStatus.UNAVAILABLE, reason=reason)

    @classmethod
    def failed(cls, error: SourceFetchError) -> "SourceResult":
        return cls(SourceStatus.ERROR, reason=str(error))


class FeedSource(Protocol):
    name: str

    async def latest(self, feed_id: str) -> SourceResult:
        """Newest item of ``feed_id``; never raises, failures come back tagged"""
        ...


class YouTubeApiSource:
    """Keyed structured query; newest upload via ``search?order=date``"""

    name = "youtube_api"
    SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"

    def __init__(self, api_key: str | None, client: httpx.AsyncClient | None = None):
        self.api_key = api_key or None
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def latest(self, feed_id: str) -> SourceResult:
        if not self.api_key:
            return SourceResult.unavailable("no API key configured")

        try:
            item = await self._fetch(feed_id)
        except SourceFetchError as e:
            return SourceResult.failed(e)

        if item is None:
            return SourceResult.unavailable("channel has no videos")
        return SourceResult.ok(item)

    async def _fetch(self, channel_id: str) -> FeedItem | None:
        try:
            response = await self._client.get(
                self.SEARCH_URL,
                params={
                    "key": self.api_key,
                    "channelId": channel_id,
                    "part": "snippet",
                    "order": "date",
                    "type": "video",
                    "maxResults": "1",
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceFetchError(self.name, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise SourceFetchError(self.name, f"invalid JSON: {e}") from e

        items = payload.get("items") if isinstance(payload, dict) else None
        if not items:
            return None

        try:
            video_id = items[0]["id"]["videoId"]
            title = items[0]["snippet"]["title"]
        except (KeyError, TypeError) as e:
            raise SourceFetchError(self.name, f"unexpected response shape: {e}") from e

        # the API returns HTML-escaped titles
        return FeedItem(
            id=video_id,
            title=html.unescape(title),
            link=WATCH_URL.format(video_id=video_id),
            source=self.name,
        )


class YouTubeFeedSource:
    """Unauthenticated Atom feed of a channel's uploads"""

    name = "youtube_feed"
    FEED_URL = "https://www.youtube.com/feeds/videos.xml"

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def latest(self, feed_id: str) -> SourceResult:
        try:
            response = await self._client.get(self.FEED_URL, params={"channel_id": feed_id})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return SourceResult.failed(
                SourceFetchError(self.name, f"HTTP {e.response.status_code}")
            )
        except httpx.HTTPError as e:
            return SourceResult.failed(SourceFetchError(self.name, str(e) or type(e).__name__))

        feed = feedparser.parse(response.content)
        if not feed.entries:
            if feed.bozo:
                return SourceResult.failed(
                    SourceFetchError(self.name, f"unparseable feed: {feed.get('bozo_exception')}")
                )
            return SourceResult.unavailable("feed has no entries")

        entry = feed.entries[0]
        # same id as the API source so the last-seen state works across both
        video_id = entry.get("yt_videoid") or entry.get("id", "").removeprefix("yt:video:")
        if not video_id:
            return SourceResult.failed(SourceFetchError(self.name, "entry without an id"))

        return SourceResult.ok(
            FeedItem(
                id=video_id,
                title=entry.get("title", ""),
                link=entry.get("link") or WATCH_URL.format(video_id=video_id),
                source=self.name,
            )
        )
