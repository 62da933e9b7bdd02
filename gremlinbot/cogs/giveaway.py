"""
Giveaway entry commands
One ticket per member, cleared by an administrator between draws
"""

import logging

from discord.ext import commands

from ..core.config import BotConfig
from ..core.errors import AlreadyJoinedError, StoreError
from ..repositories.giveaway import GiveawayRepository

logger = logging.getLogger("gremlinbot.cogs.giveaway")


class Giveaway(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.entries = GiveawayRepository(bot.store, root=BotConfig.GIVEAWAY_PATH)  # type: ignore[attr-defined]

    @commands.command(name="join")
    async def join(self, ctx: commands.Context, *, name: str | None = None) -> None:
        """!join [ticket name], defaults to the Discord username"""
        display_name = (name or "").strip() or ctx.author.name

        try:
            await self.entries.join(
                str(ctx.author.id), display_name, avatar_url=ctx.author.display_avatar.url
            )
        except AlreadyJoinedError:
            await ctx.reply("⚠️ **You have already joined!** One entry per person.")
            return
        except StoreError as e:
            logger.error(f"Giveaway join for {ctx.author.id} failed: {e}")
            await ctx.reply(f"Error joining giveaway: {e}")
            return

        await ctx.reply(f"🎟️ **Entry Confirmed!** Ticket Name: **{display_name}**")

    @commands.command(name="clear_giveaway")
    @commands.has_permissions(administrator=True)
    async def clear_giveaway(self, ctx: commands.Context) -> None:
        try:
            count = await self.entries.count()
            await self.entries.clear()
        except StoreError as e:
            await ctx.reply(f"Error clearing entries: {e}")
            return

        logger.info(f"Giveaway cleared by {ctx.author} ({count} entries)")
        await ctx.reply(f"🗑️ **Giveaway entries cleared.** ({count} removed)")


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(Giveaway(bot))
