"""Bot configuration"""

import logging
import os

import discord

logger = logging.getLogger(__name__)

BOT_NAME = "GremlinOS Bot"


def _int_or_none(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric id: {value!r}")
        return None


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class BotConfig:
    TOKEN: str = os.getenv("DISCORD_BOT_TOKEN", "")
    COMMAND_PREFIX: str = os.getenv("COMMAND_PREFIX", "!")

    STATUS: str = os.getenv("DISCORD_STATUS", "")
    ACTIVITY_TYPE: str = os.getenv("DISCORD_ACTIVITY_TYPE", "")
    ACTIVITY_NAME: str = os.getenv("DISCORD_ACTIVITY_NAME", "")

    # Firebase Realtime Database
    FIREBASE_DB_URL: str = os.getenv("FIREBASE_DB_URL", "")
    FIREBASE_AUTH_TOKEN: str = os.getenv("FIREBASE_AUTH_TOKEN", "")

    # Collection roots inside the store
    BANS_PATH: str = os.getenv("BANS_PATH", "bans")
    LOGIN_LOGS_PATH: str = os.getenv("LOGIN_LOGS_PATH", "loginLogs")
    NOTIFICATIONS_PATH: str = os.getenv("NOTIFICATIONS_PATH", "notifications")
    GIVEAWAY_PATH: str = os.getenv("GIVEAWAY_PATH", "giveaway/entries")
    ONLINE_USERS_PATH: str = os.getenv("ONLINE_USERS_PATH", "onlineUsers")

    LOG_CHANNEL_ID: int | None = _int_or_none(os.getenv("LOG_CHANNEL_ID"))
    FEED_NOTIFY_CHANNEL_ID: int | None = _int_or_none(os.getenv("FEED_NOTIFY_CHANNEL_ID"))

    YOUTUBE_API_KEY: str = os.getenv("YOUTUBE_API_KEY", "")
    YOUTUBE_CHANNEL_IDS: list[str] = _split_csv(os.getenv("YOUTUBE_CHANNEL_IDS", ""))
    FEED_POLL_INTERVAL: float = float(os.getenv("FEED_POLL_INTERVAL", "60"))

    PORT: int = int(os.getenv("PORT", "8080"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")

    @classmethod
    def get_status(cls) -> discord.Status:
        status_map = {
            "online": discord.Status.online,
            "idle": discord.Status.idle,
            "dnd": discord.Status.dnd,
            "invisible": discord.Status.invisible,
        }
        return status_map.get(cls.STATUS.lower(), discord.Status.online)

    @classmethod
    def get_activity(cls) -> discord.Activity | None:
        """Get bot activity from environment variables

        Supports: playing, listening, watching, competing
        """
        if not cls.ACTIVITY_NAME:
            return None

        activity_map = {
            "playing": discord.ActivityType.playing,
            "listening": discord.ActivityType.listening,
            "watching": discord.ActivityType.watching,
            "competing": discord.ActivityType.competing,
        }

        activity_type = activity_map.get(cls.ACTIVITY_TYPE.lower(), discord.ActivityType.watching)
        return discord.Activity(type=activity_type, name=cls.ACTIVITY_NAME)

    @classmethod
    def missing_required(cls) -> list[str]:
        """Names of settings the bot cannot start without"""
        missing = []
        if not cls.TOKEN:
            missing.append("DISCORD_BOT_TOKEN")
        if not cls.FIREBASE_DB_URL:
            missing.append("FIREBASE_DB_URL")
        return missing
