from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from gremlinbot.core.durations import DURATION_TOO_LONG, ZERO_DURATION, parse_duration
from gremlinbot.core.errors import InvalidDurationError, ParseError

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("10s", timedelta(seconds=10)),
        ("5m", timedelta(minutes=5)),
        ("1h", timedelta(hours=1)),
        ("2d", timedelta(days=2)),
        ("1w", timedelta(weeks=1)),
        ("1mo", timedelta(days=30)),
        ("1y", timedelta(days=365)),
        ("90m", timedelta(minutes=90)),
    ],
)
def test_valid_tokens_offset_from_now(token: str, expected: timedelta) -> None:
    assert parse_duration(token, now=NOW) == NOW + expected


def test_missing_token_is_permanent() -> None:
    assert parse_duration(None, now=NOW) is None


@pytest.mark.parametrize(
    "token",
    ["", "10", "h", "1.5h", "10x", "-1h", "1 h", "1H", "1hh", "h1", "1h\n", "0s", "00m"],
)
def test_invalid_tokens_are_rejected(token: str) -> None:
    with pytest.raises(InvalidDurationError):
        parse_duration(token, now=NOW)


def test_invalid_duration_is_a_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_duration("soon")
    assert excinfo.value.token == "soon"


def test_defaults_to_current_time() -> None:
    before = datetime.now(UTC)
    expires = parse_duration("1h")
    after = datetime.now(UTC)

    assert expires is not None
    assert before + timedelta(hours=1) <= expires <= after + timedelta(hours=1)
    assert expires.tzinfo is not None


@pytest.mark.parametrize("token", ["0s", "00m", "0y"])
def test_zero_magnitude_says_why(token: str) -> None:
    with pytest.raises(InvalidDurationError) as excinfo:
        parse_duration(token, now=NOW)
    assert excinfo.value.reason == ZERO_DURATION


@pytest.mark.parametrize("token", ["10000y", "99999999999999s", "9" * 40 + "w"])
def test_out_of_range_magnitude_is_a_parse_error(token: str) -> None:
    with pytest.raises(InvalidDurationError) as excinfo:
        parse_duration(token, now=NOW)
    assert excinfo.value.reason == DURATION_TOO_LONG
    assert excinfo.value.token == token


def test_long_durations_still_parse() -> None:
    assert parse_duration("100y", now=NOW) == NOW + timedelta(days=36_500)


def test_malformed_token_has_no_reason() -> None:
    with pytest.raises(InvalidDurationError) as excinfo:
        parse_duration("1.5h", now=NOW)
    assert excinfo.value.reason is None
