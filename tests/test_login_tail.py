from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from gremlinbot.services.login_tail import (
    ForwarderState,
    LogEvent,
    LoginTailForwarder,
    format_login_alert,
)
from gremlinbot.store.base import join_path
from gremlinbot.store.memory import MemoryStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[int | None, str]] = []
        self.delivered = asyncio.Event()

    async def send(self, channel_id: int | None, text: str) -> bool:
        self.sent.append((channel_id, text))
        self.delivered.set()
        return True


class ExplodingNotifier(FakeNotifier):
    async def send(self, channel_id: int | None, text: str) -> bool:
        if not self.sent:
            self.sent.append((channel_id, "boom"))
            raise RuntimeError("discord is down")
        return await super().send(channel_id, text)


def _event(key: str, age: timedelta, **fields) -> LogEvent:
    return LogEvent(key=key, timestamp=NOW - age, **fields)


def _forwarder(notifier: FakeNotifier, store: MemoryStore | None = None) -> LoginTailForwarder:
    return LoginTailForwarder(
        store=store or MemoryStore(), notifier=notifier, channel_id=42, clock=lambda: NOW
    )


def test_recent_event_is_forwarded() -> None:
    notifier = FakeNotifier()
    forwarder = _forwarder(notifier)

    forwarded = asyncio.run(
        forwarder.handle(_event("-a", timedelta(milliseconds=3000), email="a@b.c", ip="1.2.3.4"))
    )

    assert forwarded is True
    assert notifier.sent[0][0] == 42
    assert "User: a@b.c" in notifier.sent[0][1]


def test_stale_event_is_discarded() -> None:
    notifier = FakeNotifier()
    forwarder = _forwarder(notifier)

    forwarded = asyncio.run(forwarder.handle(_event("-a", timedelta(milliseconds=15000))))

    assert forwarded is False
    assert notifier.sent == []


def test_window_boundary_is_exclusive() -> None:
    forwarder = _forwarder(FakeNotifier())

    assert forwarder.is_recent(_event("-a", timedelta(seconds=9.999)))
    assert not forwarder.is_recent(_event("-b", timedelta(seconds=10)))


def test_alert_format() -> None:
    event = LogEvent(key="-a", timestamp=NOW, email="gremlin@example.com", ip="10.0.0.1", device="dev_x")

    assert format_login_alert(event) == (
        "🚨 **New Login Detected**\n"
        "User: gremlin@example.com\n"
        "IP: 10.0.0.1\n"
        "Device: dev_x"
    )
    assert "Device: unknown" in format_login_alert(LogEvent(key="-b", timestamp=NOW))


def test_log_event_from_store() -> None:
    event = LogEvent.from_store("-a", {"timestamp": 1_760_000_000_000, "email": "x@y.z"})

    assert event.timestamp == datetime.fromtimestamp(1_760_000_000, UTC)
    assert event.email == "x@y.z"


@pytest.mark.parametrize(
    "data",
    [
        None,
        "text",
        {},
        {"timestamp": "yesterday"},
        {"timestamp": True},
        {"timestamp": 10**22},
        {"timestamp": -(10**22)},
    ],
)
def test_malformed_log_entries_are_rejected(data) -> None:
    with pytest.raises(ValueError):
        LogEvent.from_store("-a", data)


def test_consumer_forwards_in_order_and_survives_sink_errors() -> None:
    notifier = ExplodingNotifier()
    forwarder = _forwarder(notifier)
    events = [
        _event("-1", timedelta(seconds=1), email="first"),
        _event("-2", timedelta(seconds=30), email="old"),
        _event("-3", timedelta(seconds=2), email="third"),
        _event("-3", timedelta(seconds=2), email="third"),
    ]

    async def scenario() -> None:
        consumer = asyncio.create_task(forwarder.run())
        for event in events:
            forwarder.queue.put_nowait(event)
        await forwarder.queue.join()
        consumer.cancel()

    asyncio.run(scenario())

    texts = [text for _, text in notifier.sent]
    # first send raised, stale one dropped, duplicate delivery forwarded twice
    assert texts[0] == "boom"
    assert len(texts) == 3
    assert all("User: third" in text for text in texts[1:])


def test_start_subscribes_and_forwards_new_logins() -> None:
    notifier = FakeNotifier()
    stale = int((datetime.now(UTC) - timedelta(minutes=5)).timestamp() * 1000)
    store = MemoryStore({"loginLogs": {"-old": {"timestamp": stale, "email": "old@x.y"}}})
    forwarder = LoginTailForwarder(store=store, notifier=notifier, channel_id=7)

    async def scenario() -> None:
        assert forwarder.state is ForwarderState.IDLE
        forwarder.start()
        forwarder.start()
        assert forwarder.state is ForwarderState.LISTENING
        assert len(forwarder._tasks) == 2

        await asyncio.sleep(0.05)
        fresh = int(datetime.now(UTC).timestamp() * 1000)
        await store.set(
            join_path("loginLogs", "-x-new"),
            {"timestamp": fresh, "email": "new@x.y", "ip": "1.1.1.1"},
        )

        await asyncio.wait_for(notifier.delivered.wait(), timeout=2)
        await forwarder.stop()

    asyncio.run(scenario())

    assert len(notifier.sent) == 1
    assert notifier.sent[0][0] == 7
    assert "User: new@x.y" in notifier.sent[0][1]


def test_out_of_range_entry_does_not_break_the_tail() -> None:
    notifier = FakeNotifier()
    store = MemoryStore({"loginLogs": {"-bad": {"timestamp": 10**22, "email": "bad@x.y"}}})
    forwarder = LoginTailForwarder(store=store, notifier=notifier, channel_id=7, retry_delay=60)

    async def scenario() -> None:
        forwarder.start()
        await asyncio.sleep(0.05)
        fresh = int(datetime.now(UTC).timestamp() * 1000)
        await store.set(join_path("loginLogs", "-good"), {"timestamp": fresh, "email": "ok@x.y"})

        await asyncio.wait_for(notifier.delivered.wait(), timeout=2)
        await forwarder.stop()

    asyncio.run(scenario())

    assert [text for _, text in notifier.sent if "bad@x.y" in text] == []
    assert "User: ok@x.y" in notifier.sent[0][1]
