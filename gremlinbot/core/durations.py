"""Compact duration tokens (``10s``, ``5m``, ``2w``, ``1mo``) to expiry instants"""

import re
from datetime import datetime, timedelta

from .errors import InvalidDurationError
from .timestamps import utcnow

DURATION_PATTERN = re.compile(r"^(\d+)(y|mo|w|d|h|m|s)$")

# months and years are fixed-length approximations
UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "mo": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}

ZERO_DURATION = "must be greater than zero"
DURATION_TOO_LONG = "too far in the future"


def parse_duration(token: str | None, now: datetime | None = None) -> datetime | None:
    """Return the absolute expiry for ``token``, or ``None`` for a permanent ban.

    ``now`` is read once so callers can reuse the same snapshot as the
    record's creation time. A zero magnitude is rejected because the expiry
    must lie after the creation time, and so is anything past ``datetime.max``.
    """
    if token is None:
        return None

    match = DURATION_PATTERN.fullmatch(token)
    if not match:
        raise InvalidDurationError(token)

    magnitude = int(match.group(1))
    if magnitude == 0:
        raise InvalidDurationError(token, ZERO_DURATION)

    if now is None:
        now = utcnow()
    try:
        return now + timedelta(seconds=magnitude * UNIT_SECONDS[match.group(2)])
    except OverflowError as e:
        raise InvalidDurationError(token, DURATION_TOO_LONG) from e
