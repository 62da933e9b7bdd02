"""Upload announcements for the tracked YouTube channels"""

import logging

import httpx
from discord.ext import commands, tasks

from ..core.config import BotConfig
from ..services.feed_poller import FeedPoller, TrackedFeed
from ..services.feed_sources import YouTubeApiSource, YouTubeFeedSource

logger = logging.getLogger("gremlinbot.cogs.feeds")


class Feeds(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self._client = httpx.AsyncClient(timeout=10.0, follow_redirects=True)
        self.poller = FeedPoller(
            store=bot.store,  # type: ignore[attr-defined]
            notifier=bot.notifier,  # type: ignore[attr-defined]
            sources=[
                YouTubeApiSource(BotConfig.YOUTUBE_API_KEY, client=self._client),
                YouTubeFeedSource(client=self._client),
            ],
            feeds=[
                TrackedFeed.youtube(channel, BotConfig.FEED_NOTIFY_CHANNEL_ID)
                for channel in BotConfig.YOUTUBE_CHANNEL_IDS
            ],
            root=BotConfig.NOTIFICATIONS_PATH,
        )

    async def cog_load(self) -> None:
        if not self.poller.feeds:
            logger.warning("YOUTUBE_CHANNEL_IDS not set, upload announcements disabled")
            return
        if not BotConfig.YOUTUBE_API_KEY:
            logger.info("YOUTUBE_API_KEY not set, using channel feeds only")

        self.poll_task.change_interval(seconds=BotConfig.FEED_POLL_INTERVAL)
        self.poll_task.start()

    async def cog_unload(self) -> None:
        self.poll_task.cancel()
        await self._client.aclose()

    @tasks.loop(seconds=60)
    async def poll_task(self) -> None:
        try:
            announced = await self.poller.poll_once()
        except Exception as e:
            logger.exception(f"Feed poll cycle failed: {e}")
            return
        if announced:
            logger.info(f"Poll cycle announced {len(announced)} new upload(s)")

    @poll_task.before_loop
    async def before_poll(self) -> None:
        await self.bot.wait_until_ready()


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(Feeds(bot))
