from __future__ import annotations

import pytest

from cosirob.protocol.catalog import CommandCatalog
from cosirob.protocol.commands import NO_PREFIX_WARNING, CommandEncoder
from cosirob.protocol.parsing import looks_like_channel_prefixed
from cosirob.protocol.types import (
    CommandDefinition,
    CommandNotFound,
    LogKind,
    ParamCountMismatch,
)
from cosirob.services.event_log import EventLog


@pytest.mark.unit
@pytest.mark.parametrize(
    "code, channel, params, expected",
    [
        ("mv", "00", ["10", "20", "30", "0", "0", "0"], "00 mv 10 20 30 0 0 0"),
        ("rd", "50", ["3"], "50 rd 3"),
        ("io", "30", ["1", "1"], "30 io 1 1"),
        ("ho", "00", [], "00 ho"),
        ("st_query", "00", [], "00 st?"),
    ],
)
def test_compose_joins_with_single_spaces(
    encoder: CommandEncoder, events: EventLog, code, channel, params, expected
):
    cmd = encoder.compose(code, channel, params)
    assert cmd.line == expected
    assert str(cmd) == expected
    assert cmd.parameters == tuple(params)
    assert events.snapshot() == [], "well-formed input must not warn"


@pytest.mark.unit
def test_compose_wrong_arity_raises(encoder: CommandEncoder, events: EventLog):
    with pytest.raises(ParamCountMismatch) as exc:
        encoder.compose("mv", "00", ["10", "20", "30"])
    assert (exc.value.expected, exc.value.got) == (6, 3)
    assert events.snapshot() == []


@pytest.mark.unit
def test_compose_unknown_code(encoder: CommandEncoder):
    with pytest.raises(CommandNotFound):
        encoder.compose("qq", "00", [])


@pytest.mark.unit
@pytest.mark.parametrize("channel", ["0", "000", "ab"])
def test_odd_channel_warns_but_composes(encoder: CommandEncoder, events: EventLog, channel):
    cmd = encoder.compose("ho", channel, [])
    assert cmd.line == f"{channel} ho"
    kinds = [e.kind for e in events.snapshot()]
    assert kinds == [LogKind.WARNING]


@pytest.mark.unit
def test_channel_prefix_check():
    assert looks_like_channel_prefixed("00 mv 1 2 3")
    assert looks_like_channel_prefixed("40\tgo")
    assert not looks_like_channel_prefixed("mv 1 2 3")
    assert not looks_like_channel_prefixed("0 mv")
    assert not looks_like_channel_prefixed("000 mv")
    assert not looks_like_channel_prefixed("")


@pytest.mark.unit
def test_check_raw_warns_only_when_unprefixed(encoder: CommandEncoder, events: EventLog):
    assert encoder.check_raw("10 mv 1 2 3 0 0 0")
    assert not encoder.check_raw("mv 1 2 3")
    [event] = events.snapshot()
    assert event.kind is LogKind.WARNING
    assert event.message == NO_PREFIX_WARNING


@pytest.mark.unit
def test_compose_follows_catalog_arity(events: EventLog):
    catalog = CommandCatalog({"mv": CommandDefinition("<channel> mv <x> <y> <z>", "", "")})
    cmd = CommandEncoder(catalog, events).compose("mv", "00", ["10", "20", "30"])
    assert cmd.line == "00 mv 10 20 30"
