"""Platform moderation commands: address/device bans and the online list"""

import logging

from discord.ext import commands

from ..core.config import BotConfig
from ..core.errors import InvalidDurationError, InvalidTargetError, StoreError
from ..repositories.bans import BanRepository
from ..repositories.presence import PresenceRepository, format_online

logger = logging.getLogger("gremlinbot.cogs.moderation")

DEFAULT_BAN_DURATION = "1h"
PERMANENT_WORDS = {"perm", "permanent", "never", "forever"}
FLAG_WORDS = {"y", "yes", "true"}
DURATION_USAGE = "Use format like 10s, 5m, 1h, 1d"


def resolve_duration(arg: str | None) -> str | None:
    """Command argument to duration token; ``None`` means permanent"""
    if arg is None:
        return DEFAULT_BAN_DURATION
    if arg.lower() in PERMANENT_WORDS:
        return None
    return arg


def parse_flag(arg: str | None) -> bool:
    return arg is not None and arg.lower() in FLAG_WORDS


def duration_error_reply(error: InvalidDurationError) -> str:
    if error.reason:
        return f"Invalid duration `{error.token}`: {error.reason}. {DURATION_USAGE}"
    return f"Invalid duration. {DURATION_USAGE}"


def target_error_reply(error: InvalidTargetError) -> str:
    return f"Invalid target `{error.target}`: {error.reason}. Use a plain IP or a dev_ device id"


class Moderation(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        store = bot.store  # type: ignore[attr-defined]
        self.bans = BanRepository(store, root=BotConfig.BANS_PATH)
        self.presence = PresenceRepository(store, root=BotConfig.ONLINE_USERS_PATH)

    @commands.command(name="ban")
    @commands.has_permissions(administrator=True)
    async def ban(
        self,
        ctx: commands.Context,
        target: str | None = None,
        duration: str | None = None,
        scare: str | None = None,
    ) -> None:
        """!ban <ip_or_device> [duration] [y/n]"""
        if not target:
            await ctx.reply("Usage: !ban <ip_or_device> <duration> [y/n]")
            return

        token = resolve_duration(duration)
        flagged = parse_flag(scare)

        try:
            record = await self.bans.ban(target, token, flagged=flagged, issued_by=str(ctx.author))
        except InvalidTargetError as e:
            await ctx.reply(target_error_reply(e))
            return
        except InvalidDurationError as e:
            await ctx.reply(duration_error_reply(e))
            return
        except StoreError as e:
            logger.error(f"Ban of {target} failed: {e}")
            await ctx.reply(f"Error: {e}")
            return

        length = f"for {token}" if not record.is_permanent else "permanently"
        suffix = " (SCARED)" if record.flagged else ""
        await ctx.reply(f"✅ Banned **{target}** {length}{suffix}")

    @commands.command(name="unban")
    @commands.has_permissions(administrator=True)
    async def unban(self, ctx: commands.Context, target: str | None = None) -> None:
        """!unban <ip_or_device>"""
        if not target:
            await ctx.reply("Usage: !unban <ip_or_device>")
            return

        try:
            await self.bans.unban(target)
        except InvalidTargetError as e:
            await ctx.reply(target_error_reply(e))
            return
        except StoreError as e:
            logger.error(f"Unban of {target} failed: {e}")
            await ctx.reply(f"Error: {e}")
            return

        await ctx.reply(f"✅ Unbanned **{target}**")

    @commands.command(name="users")
    @commands.has_permissions(administrator=True)
    async def users(self, ctx: commands.Context) -> None:
        """List users currently online on the platform"""
        try:
            online = await self.presence.list_online()
        except StoreError as e:
            await ctx.reply(f"Error fetching users: {e}")
            return

        await ctx.reply(format_online(online))


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(Moderation(bot))
