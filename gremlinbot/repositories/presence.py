"""Online users reported by the platform"""

from dataclasses import dataclass
from typing import Any

from ..store.base import KeyValueStore

MESSAGE_LIMIT = 2000
TRUNCATE_AT = 1900
REDACTED_NAME = "REDACTED"


@dataclass
class OnlineUser:
    device_id: str
    location: str
    isp: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OnlineUser":
        return cls(
            device_id=str(data.get("deviceId", "unknown")),
            location=str(data.get("location", "unknown")),
            isp=str(data.get("isp", "unknown")),
        )


class PresenceRepository:
    def __init__(self, store: KeyValueStore, root: str = "onlineUsers"):
        self.store = store
        self.root = root

    async def list_online(self) -> list[OnlineUser]:
        data = await self.store.get(self.root)
        if not isinstance(data, dict):
            return []
        return [OnlineUser.from_dict(value) for value in data.values() if isinstance(value, dict)]


def format_online(users: list[OnlineUser]) -> str:
    """Render the listing, cut down to fit a single Discord message"""
    if not users:
        return "No users online."

    reply = "**Online Users:**\n"
    for user in users:
        reply += (
            f"🖥️ **{REDACTED_NAME}** ({user.location})\n"
            f"ID: `{user.device_id}`\n"
            f"ISP: {user.isp}\n\n"
        )

    if len(reply) > MESSAGE_LIMIT:
        reply = reply[:TRUNCATE_AT] + "... (truncated)"
    return reply
