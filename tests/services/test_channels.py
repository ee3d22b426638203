"""Tests for the channel-type service operation."""

from mqtopo.services.channels import describe_channel


def test_known_channel() -> None:
    result = describe_channel("CLUSSDR")
    assert result.ok
    assert result.data == {"name": "CLUSSDR", "code": 9, "type": "CLUSTER_SENDER"}


def test_unknown_channel_is_ok() -> None:
    result = describe_channel("svrconn")
    assert result.ok
    assert result.data["code"] == 99
    assert result.data["type"] == "UNKNOWN"
