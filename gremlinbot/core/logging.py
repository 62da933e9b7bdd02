"""Logging configuration"""

import logging
from logging.handlers import RotatingFileHandler

try:
    from rich.console import Console
    from rich.logging import RichHandler

    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False

from .config import BotConfig

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"

# discord.py gateway chatter and one INFO line per store/feed request
NOISY_LOGGERS = ("discord", "discord.http", "aiohttp.access", "httpx", "httpcore")

LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3


def resolve_level(name: str | None) -> int:
    """``LOG_LEVEL`` value to a logging level; unknown names mean INFO"""
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler() -> logging.Handler:
    if not RICH_AVAILABLE:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT))
        return handler

    handler = RichHandler(
        console=Console(force_terminal=True, width=120),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        tracebacks_width=120,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))
    return handler


def _file_handler(path: str) -> logging.Handler:
    # rich markup is console-only; the file gets the plain format
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT))
    return handler


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure the root logger for the bot process.

    Console output goes through Rich when it is installed. ``log_file``
    (default ``LOG_FILE``) adds a rotating plain-text file, which keeps login
    alerts and ban actions around on hosts whose console scrollback is lost
    on restart.
    """
    numeric_level = resolve_level(level if level is not None else BotConfig.LOG_LEVEL)
    log_file = log_file if log_file is not None else BotConfig.LOG_FILE

    problems = []
    try:
        handlers = [_console_handler()]
    except Exception as e:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT))
        handlers = [handler]
        problems.append(f"Rich logging setup failed: {e}, using standard logging")

    if log_file:
        try:
            handlers.append(_file_handler(log_file))
        except OSError as e:
            problems.append(f"Cannot write log file {log_file}: {e}")

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    for problem in problems:
        logging.getLogger(__name__).warning(problem)
