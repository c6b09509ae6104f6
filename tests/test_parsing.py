from datetime import timedelta

import pytest

from conftest import MEMBER, TARGET, make_context
from guardbot.application import parsing
from guardbot.application.errors import ConfigurationError
from guardbot.application.models import Identifier

USAGE = "usage"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("30m", timedelta(minutes=30)),
        ("1h", timedelta(hours=1)),
        ("7d", timedelta(days=7)),
        ("2H", timedelta(hours=2)),
        (None, timedelta(minutes=10)),
        ("", timedelta(minutes=10)),
        ("abc", timedelta(minutes=10)),
        ("0m", timedelta(minutes=10)),
        ("-5m", timedelta(minutes=10)),
        ("10s", timedelta(minutes=10)),
        ("366d", timedelta(days=366)),
        ("400d", timedelta(days=366)),
        ("3000000d", timedelta(days=366)),
        ("9999999999d", timedelta(days=366)),
        ("99999999999999999999m", timedelta(days=366)),
    ],
)
def test_parse_duration(raw, expected):
    assert parsing.parse_duration(raw) == expected


@pytest.mark.parametrize(
    "duration, text",
    [(timedelta(minutes=30), "30m"), (timedelta(hours=2), "2h"), (timedelta(days=7), "7d")],
)
def test_format_duration(duration, text):
    assert parsing.format_duration(duration) == text


def test_parse_switch():
    assert parsing.parse_switch(["on"], USAGE) is True
    assert parsing.parse_switch(["OFF"], USAGE) is False
    for args in ([], ["maybe"]):
        with pytest.raises(ConfigurationError):
            parsing.parse_switch(args, USAGE)


def test_resolve_target_prefers_reply():
    ctx = make_context("30", "1h", reply_to_user=TARGET)

    assert parsing.resolve_target(ctx, USAGE) == (TARGET, ("30", "1h"))


def test_resolve_target_from_argument():
    ctx = make_context(str(MEMBER), "1h")

    assert parsing.resolve_target(ctx, USAGE) == (Identifier(MEMBER.value), ("1h",))


@pytest.mark.parametrize("args", [(), ("@someone",)])
def test_resolve_target_requires_target(args):
    with pytest.raises(ConfigurationError) as exc:
        parsing.resolve_target(make_context(*args), USAGE)

    assert exc.value.usage == USAGE


def test_parse_setflood():
    assert parsing.parse_setflood(["8", "15"], USAGE) == (8, 15)
    for args in (["8"], ["a", "b"]):
        with pytest.raises(ConfigurationError):
            parsing.parse_setflood(args, USAGE)


def test_purge_by_count():
    assert parsing.purge_message_ids(make_context("3", message_id=50), USAGE) == [47, 48, 49]


def test_purge_count_is_capped():
    ids = parsing.purge_message_ids(make_context("500", message_id=1000), USAGE)

    assert len(ids) == 100
    assert ids[0] == 900
    assert ids[-1] == 999


def test_purge_does_not_go_below_first_message():
    assert parsing.purge_message_ids(make_context("10", message_id=4), USAGE) == [1, 2, 3]


def test_purge_from_reply():
    ctx = make_context(message_id=60, reply_to_message=55)

    assert parsing.purge_message_ids(ctx, USAGE) == [55, 56, 57, 58, 59]


@pytest.mark.parametrize("args", [(), ("0",), ("x",)])
def test_purge_requires_valid_argument(args):
    with pytest.raises(ConfigurationError):
        parsing.purge_message_ids(make_context(*args), USAGE)
