"""
Login alert Cog
Posts fresh platform logins into the log channel
"""

import asyncio
import logging

from discord.ext import commands

from ..core.config import BotConfig
from ..services.login_tail import LoginTailForwarder

logger = logging.getLogger("gremlinbot.cogs.login_alerts")


class LoginAlerts(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.forwarder = LoginTailForwarder(
            store=bot.store,  # type: ignore[attr-defined]
            notifier=bot.notifier,  # type: ignore[attr-defined]
            channel_id=BotConfig.LOG_CHANNEL_ID,
            path=BotConfig.LOGIN_LOGS_PATH,
        )
        self._starter: asyncio.Task | None = None

    async def cog_load(self) -> None:
        if BotConfig.LOG_CHANNEL_ID is None:
            logger.warning("LOG_CHANNEL_ID not set, login alerts disabled")
            return
        # don't block startup; subscribe once the gateway is ready
        self._starter = asyncio.create_task(self._start_when_ready())

    async def _start_when_ready(self) -> None:
        await self.bot.wait_until_ready()
        self.forwarder.start()

    async def cog_unload(self) -> None:
        if self._starter:
            self._starter.cancel()
        await self.forwarder.stop()


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(LoginAlerts(bot))
