"""Core modules for the bot."""

from .config import BOT_NAME, BotConfig
from .durations import parse_duration
from .errors import (
    AlreadyJoinedError,
    GremlinError,
    InvalidDurationError,
    InvalidTargetError,
    ParseError,
    SourceFetchError,
    StoreError,
)
from .health_server import HealthCheckServer
from .identity import DEVICE_PREFIX, BanCategory, normalize_target
from .logging import setup_logging

__all__ = [
    # Config
    "BotConfig",
    "BOT_NAME",
    # Targets and durations
    "BanCategory",
    "DEVICE_PREFIX",
    "normalize_target",
    "parse_duration",
    # Errors
    "GremlinError",
    "ParseError",
    "InvalidDurationError",
    "InvalidTargetError",
    "StoreError",
    "SourceFetchError",
    "AlreadyJoinedError",
    # Services
    "HealthCheckServer",
    # Logging
    "setup_logging",
]
