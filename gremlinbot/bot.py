"""
GremlinOS Discord Bot
discord.py 2.x with prefix commands
"""

import asyncio
import logging

import discord
from discord.ext import commands

from .core.config import BOT_NAME, BotConfig
from .core.health_server import HealthCheckServer
from .core.logging import RICH_AVAILABLE, setup_logging
from .services.notifier import DiscordChannelNotifier
from .store.base import KeyValueStore
from .store.firebase import FirebaseRealtimeStore

logger = logging.getLogger("gremlinbot")

INITIAL_EXTENSIONS = [
    "gremlinbot.cogs.moderation",
    "gremlinbot.cogs.giveaway",
    "gremlinbot.cogs.login_alerts",
    "gremlinbot.cogs.feeds",
]


def _markup(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]" if RICH_AVAILABLE else text


class GremlinClient(commands.Bot):
    """Bot client; the store and the notifier are shared by every cog"""

    def __init__(self, store: KeyValueStore, health_server: bool = True):
        intents = discord.Intents.default()
        intents.message_content = True  # prefix commands read message text

        super().__init__(
            command_prefix=BotConfig.COMMAND_PREFIX,
            intents=intents,
            help_command=None,
        )

        self.store = store
        self.notifier = DiscordChannelNotifier(self)
        self.health_server = HealthCheckServer(self) if health_server else None
        self.initial_extensions = list(INITIAL_EXTENSIONS)

    async def setup_hook(self) -> None:
        if self.health_server:
            await self.health_server.start()

        loaded = []
        failed = []
        for extension in self.initial_extensions:
            try:
                await self.load_extension(extension)
                loaded.append(extension.split(".")[-1])
            except Exception as e:
                logger.exception(f"Extension {extension} failed to load")
                failed.append(f"{extension.split('.')[-1]} ({e})")

        if loaded:
            logger.info(f"{_markup('Loaded cogs:', 'green')} {', '.join(loaded)}")
        if failed:
            logger.error(f"{_markup('Failed to load:', 'red')} {', '.join(failed)}")

        logger.info(_markup("Connecting to Discord...", "yellow"))

    async def on_ready(self) -> None:
        await self.change_presence(
            status=BotConfig.get_status(), activity=BotConfig.get_activity()
        )
        logger.info(f"{_markup('Ready! Logged in as', 'bold green')} {self.user}")
        logger.info(f"{len(self.guilds)} guild(s) | discord.py {discord.__version__}")

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.MissingPermissions):
            await ctx.reply("⛔ **ACCESS DENIED**\nAdministrator privileges required.")
            return

        if isinstance(error, commands.NoPrivateMessage):
            await ctx.reply("This command only works inside a server.")
            return

        logger.error(f"Command error in {ctx.command}: {error}", exc_info=error)
        await ctx.reply("Something went wrong while running that command.")

    async def close(self) -> None:
        if self.health_server:
            await self.health_server.stop()
        await super().close()


async def main() -> None:
    setup_logging()

    missing = BotConfig.missing_required()
    if missing:
        logger.error(_markup(f"Missing required settings: {', '.join(missing)}", "bold red"))
        logger.error("Set them in the environment or in a .env file")
        return

    store = FirebaseRealtimeStore(BotConfig.FIREBASE_DB_URL, BotConfig.FIREBASE_AUTH_TOKEN)
    logger.info(f"Starting {BOT_NAME}")

    try:
        async with GremlinClient(store) as bot:
            try:
                await bot.start(BotConfig.TOKEN)
            except (KeyboardInterrupt, asyncio.CancelledError):
                if not bot.is_closed():
                    await bot.close()
    finally:
        await store.aclose()
