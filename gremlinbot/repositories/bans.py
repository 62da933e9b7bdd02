"""Ban repository: time-bound bans keyed by address or device"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.durations import parse_duration
from ..core.identity import BanCategory, normalize_target
from ..core.timestamps import from_epoch_ms, to_epoch_ms, utcnow
from ..store.base import KeyValueStore, join_path

logger = logging.getLogger("gremlinbot.bans")

# Stored in place of an expiry for bans that never lapse
PERMANENT_EXPIRY = -1


@dataclass
class BanRecord:
    """A single banned address or device."""

    category: BanCategory
    canonical_key: str
    created_at: datetime
    expires_at: datetime | None
    issued_by: str
    flagged: bool = False

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None

    def is_active(self, now: datetime | None = None) -> bool:
        """Whether the ban still applies; expiry is checked by readers, never purged"""
        if self.expires_at is None:
            return True
        return (now or utcnow()) < self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "banned_at": to_epoch_ms(self.created_at),
            "expires_at": (
                PERMANENT_EXPIRY if self.expires_at is None else to_epoch_ms(self.expires_at)
            ),
            "banned_by": self.issued_by,
            "is_scared": self.flagged,
        }

    @classmethod
    def from_dict(cls, category: BanCategory, key: str, data: dict[str, Any]) -> "BanRecord":
        expires = data.get("expires_at", PERMANENT_EXPIRY)
        return cls(
            category=category,
            canonical_key=key,
            created_at=from_epoch_ms(data["banned_at"]),
            expires_at=None if expires in (None, PERMANENT_EXPIRY) else from_epoch_ms(expires),
            issued_by=str(data.get("banned_by", "")),
            flagged=bool(data.get("is_scared", False)),
        )


class BanRepository:
    """Stores and removes ban records; enforcement happens wherever they are read."""

    def __init__(
        self,
        store: KeyValueStore,
        root: str = "bans",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.root = root
        self._clock = clock

    def path_for(self, category: BanCategory, key: str) -> str:
        return join_path(self.root, category.value, key)

    async def ban(
        self,
        raw_target: str,
        duration: str | None,
        flagged: bool = False,
        issued_by: str = "unknown",
    ) -> BanRecord:
        """Ban ``raw_target`` until ``duration`` from now (``None`` bans forever).

        Re-banning overwrites the existing record and so resets the clock.
        Raises InvalidTargetError or InvalidDurationError before touching the
        store and lets StoreError from the store propagate.
        """
        category, key = normalize_target(raw_target)
        now = self._clock()
        expires_at = parse_duration(duration, now=now)

        record = BanRecord(
            category=category,
            canonical_key=key,
            created_at=now,
            expires_at=expires_at,
            issued_by=issued_by,
            flagged=flagged,
        )
        await self.store.set(self.path_for(category, key), record.to_dict())

        logger.info(
            f"Ban stored | {category.value}: {key} | "
            f"expires: {expires_at.isoformat() if expires_at else 'never'} | by: {issued_by}"
        )
        return record

    async def unban(self, raw_target: str) -> None:
        """Remove the ban for ``raw_target``; removing a missing ban is fine."""
        category, key = normalize_target(raw_target)
        await self.store.delete(self.path_for(category, key))
        logger.info(f"Ban removed | {category.value}: {key}")

    async def get(self, raw_target: str) -> BanRecord | None:
        category, key = normalize_target(raw_target)
        data = await self.store.get(self.path_for(category, key))
        if not isinstance(data, dict):
            return None
        return BanRecord.from_dict(category, key, data)
