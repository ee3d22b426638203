"""Topology classification enums.

Numeric codes are part of the serialized output consumed by the
topology viewer, so member values must never be renumbered.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EntityKind(StrEnum):
    """Node labels recognised as topology entities."""

    QUEUE_MANAGER = "QueueManager"
    APPLICATION = "Application"


class ReposType(IntEnum):
    """Cluster repository role of a queue manager."""

    FULL = 0
    PARTIAL = 1
    NORMAL = 2
    UNKNOWN = 3


class ChannelType(IntEnum):
    """MQ channel types, numbered after the MQCHT_* PCF constants."""

    SENDER = 1
    SERVER = 2
    RECEIVER = 3
    REQUESTER = 4
    CLIENT_CONN = 6
    SERVER_CONN = 7
    CLUSTER_RECEIVER = 8
    CLUSTER_SENDER = 9
    MQTT = 10
    UNKNOWN = 99
