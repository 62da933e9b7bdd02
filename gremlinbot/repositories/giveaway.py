"""Giveaway entry repository"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.errors import AlreadyJoinedError
from ..core.timestamps import to_epoch_ms, utcnow
from ..store.base import KeyValueStore, join_path

logger = logging.getLogger("gremlinbot.giveaway")


@dataclass
class GiveawayEntry:
    actor_id: str
    display_name: str
    avatar_url: str | None
    joined_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.display_name,
            "id": self.actor_id,
            "avatar": self.avatar_url,
            "joined_at": to_epoch_ms(self.joined_at),
        }


class GiveawayRepository:
    """One entry per actor; entries only go away through ``clear``."""

    def __init__(
        self,
        store: KeyValueStore,
        root: str = "giveaway/entries",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.root = root
        self._clock = clock

    async def join(
        self, actor_id: str, display_name: str, avatar_url: str | None = None
    ) -> GiveawayEntry:
        path = join_path(self.root, str(actor_id))

        # check-then-set is not atomic; one person cannot race themselves in chat
        if await self.store.get(path) is not None:
            raise AlreadyJoinedError(str(actor_id))

        entry = GiveawayEntry(
            actor_id=str(actor_id),
            display_name=display_name,
            avatar_url=avatar_url,
            joined_at=self._clock(),
        )
        await self.store.set(path, entry.to_dict())
        logger.info(f"Giveaway entry | {display_name} ({actor_id})")
        return entry

    async def count(self) -> int:
        data = await self.store.get(self.root)
        return len(data) if isinstance(data, dict) else 0

    async def clear(self) -> None:
        await self.store.delete(self.root)
        logger.info("Giveaway entries cleared")
