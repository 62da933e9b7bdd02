"""Repositories over the external store."""

from .bans import PERMANENT_EXPIRY, BanRecord, BanRepository
from .giveaway import GiveawayEntry, GiveawayRepository
from .presence import OnlineUser, PresenceRepository, format_online

__all__ = [
    "BanRecord",
    "BanRepository",
    "PERMANENT_EXPIRY",
    "GiveawayEntry",
    "GiveawayRepository",
    "OnlineUser",
    "PresenceRepository",
    "format_online",
]
