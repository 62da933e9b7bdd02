"""Notification sink backed by Discord text channels"""

import logging
from typing import Protocol

import discord

logger = logging.getLogger("gremlinbot.notifier")

MESSAGE_LIMIT = 2000


class Notifier(Protocol):
    async def send(self, channel_id: int | None, text: str) -> bool:
        """Best-effort delivery; returns whether the message went out and never raises"""
        ...


class DiscordChannelNotifier:
    def __init__(self, bot: discord.Client):
        self.bot = bot

    async def _resolve(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden) as e:
                logger.warning(f"Channel {channel_id} unavailable: {e}")
                return None
            except discord.HTTPException as e:
                logger.warning(f"Fetching channel {channel_id} failed: {e}")
                return None

        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(f"Channel {channel_id} cannot receive messages")
            return None
        return channel

    async def send(self, channel_id: int | None, text: str) -> bool:
        if channel_id is None:
            logger.warning("No notification channel configured, dropping message")
            return False

        channel = await self._resolve(channel_id)
        if channel is None:
            return False

        try:
            await channel.send(text[:MESSAGE_LIMIT])
        except discord.HTTPException as e:
            logger.warning(f"Sending to channel {channel_id} failed: {e}")
            return False
        return True
