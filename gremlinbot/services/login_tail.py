"""Forward fresh platform logins to the log channel.

The store subscription only pushes events onto a queue; the consumer loop
applies the recency gate so old entries redelivered on (re)connect are not
announced again. Duplicate deliveries inside the window are forwarded as-is.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from ..core.timestamps import from_epoch_ms, utcnow
from ..store.base import KeyValueStore
from .notifier import Notifier

logger = logging.getLogger("gremlinbot.login_tail")

RECENCY_WINDOW = timedelta(seconds=10)


@dataclass(frozen=True)
class LogEvent:
    key: str
    timestamp: datetime
    email: str | None = None
    ip: str | None = None
    device: str | None = None

    @classmethod
    def from_store(cls, key: str, data: Any) -> "LogEvent":
        """Build an event from a stored log entry; raises ValueError when malformed"""
        if not isinstance(data, dict):
            raise ValueError(f"log entry {key} is not an object")

        raw_timestamp = data.get("timestamp")
        if isinstance(raw_timestamp, bool) or not isinstance(raw_timestamp, int | float):
            raise ValueError(f"log entry {key} has no numeric timestamp")

        try:
            timestamp = from_epoch_ms(raw_timestamp)
        except (OverflowError, OSError) as e:
            raise ValueError(f"log entry {key} has an out-of-range timestamp") from e

        return cls(
            key=key,
            timestamp=timestamp,
            email=data.get("email"),
            ip=data.get("ip"),
            device=data.get("device"),
        )


def format_login_alert(event: LogEvent) -> str:
    return (
        "🚨 **New Login Detected**\n"
        f"User: {event.email or 'unknown'}\n"
        f"IP: {event.ip or 'unknown'}\n"
        f"Device: {event.device or 'unknown'}"
    )


class ForwarderState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


class LoginTailForwarder:
    def __init__(
        self,
        store: KeyValueStore,
        notifier: Notifier,
        channel_id: int | None,
        path: str = "loginLogs",
        window: timedelta = RECENCY_WINDOW,
        clock: Callable[[], datetime] = utcnow,
        retry_delay: float = 5.0,
    ):
        self.store = store
        self.notifier = notifier
        self.channel_id = channel_id
        self.path = path
        self.window = window
        self.retry_delay = retry_delay
        self._clock = clock
        self.queue: asyncio.Queue[LogEvent] = asyncio.Queue()
        self.state = ForwarderState.IDLE
        self._tasks: list[asyncio.Task] = []

    def start(self) -> None:
        """Subscribe to the log tail and begin forwarding; later calls do nothing"""
        if self.state is ForwarderState.LISTENING:
            return

        self.state = ForwarderState.LISTENING
        self._tasks = [
            asyncio.create_task(self._pump(), name="login-tail-subscription"),
            asyncio.create_task(self.run(), name="login-tail-forwarder"),
        ]
        logger.info(f"Forwarding logins from {self.path} (window={self.window.total_seconds():.0f}s)")

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    async def _pump(self) -> None:
        while True:
            try:
                async for key, value in self.store.subscribe_tail(self.path, limit=1):
                    try:
                        event = LogEvent.from_store(key, value)
                    except ValueError as e:
                        logger.warning(f"Skipping log entry: {e}")
                        continue
                    await self.queue.put(event)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"Login tail subscription failed: {e}")

            await asyncio.sleep(self.retry_delay)

    async def run(self) -> None:
        """Consume queued events forever"""
        while True:
            event = await self.queue.get()
            try:
                await self.handle(event)
            except Exception as e:
                logger.exception(f"Forwarding login {event.key} failed: {e}")
            finally:
                self.queue.task_done()

    def is_recent(self, event: LogEvent, now: datetime | None = None) -> bool:
        age = (now or self._clock()) - event.timestamp
        return age < self.window

    async def handle(self, event: LogEvent) -> bool:
        """Forward ``event`` when it falls inside the recency window"""
        if not self.is_recent(event):
            logger.debug(f"Discarding stale login {event.key}")
            return False

        await self.notifier.send(self.channel_id, format_login_alert(event))
        return True
