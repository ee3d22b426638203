"""Tests for topology enums — numeric codes are an output contract."""

from mqtopo.domain.types import ChannelType, EntityKind, ReposType


def test_repos_codes() -> None:
    assert [(m.name, m.value) for m in ReposType] == [
        ("FULL", 0),
        ("PARTIAL", 1),
        ("NORMAL", 2),
        ("UNKNOWN", 3),
    ]


def test_channel_codes_skip_five() -> None:
    assert 5 not in {m.value for m in ChannelType}
    assert ChannelType.UNKNOWN == 99


def test_entity_kinds_match_labels() -> None:
    assert EntityKind("QueueManager") is EntityKind.QUEUE_MANAGER
    assert EntityKind("Application") is EntityKind.APPLICATION
