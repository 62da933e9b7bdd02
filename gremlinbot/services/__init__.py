"""Background services and the notification sink."""

from .feed_poller import FeedPoller, TrackedFeed, format_announcement
from .feed_sources import (
    FeedItem,
    FeedSource,
    SourceResult,
    SourceStatus,
    YouTubeApiSource,
    YouTubeFeedSource,
)
from .login_tail import (
    RECENCY_WINDOW,
    ForwarderState,
    LogEvent,
    LoginTailForwarder,
    format_login_alert,
)
from .notifier import DiscordChannelNotifier, Notifier

__all__ = [
    "DiscordChannelNotifier",
    "Notifier",
    "FeedItem",
    "FeedSource",
    "SourceResult",
    "SourceStatus",
    "YouTubeApiSource",
    "YouTubeFeedSource",
    "FeedPoller",
    "TrackedFeed",
    "format_announcement",
    "LogEvent",
    "LoginTailForwarder",
    "ForwarderState",
    "RECENCY_WINDOW",
    "format_login_alert",
]
