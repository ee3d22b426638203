"""Relationship classifier — channel type name to MQ channel type code.

Lookup is exact and case-sensitive. Both the long names and the MQSC
short forms (``SVRCONN``, ``CLUSSDR``, ...) are accepted.
"""

from __future__ import annotations

from mqtopo.domain.types import ChannelType

_CHANNEL_TYPES: dict[str, ChannelType] = {
    "SENDER": ChannelType.SENDER,
    "SERVER": ChannelType.SERVER,
    "RECEIVER": ChannelType.RECEIVER,
    "REQUESTER": ChannelType.REQUESTER,
    "CLIENT_CONN": ChannelType.CLIENT_CONN,
    "CLNTCONN": ChannelType.CLIENT_CONN,
    "SERVER_CONN": ChannelType.SERVER_CONN,
    "SVRCONN": ChannelType.SERVER_CONN,
    "CLUSTER_RECEIVER": ChannelType.CLUSTER_RECEIVER,
    "CLUSRCVR": ChannelType.CLUSTER_RECEIVER,
    "CLUSTER_SENDER": ChannelType.CLUSTER_SENDER,
    "CLUSSDR": ChannelType.CLUSTER_SENDER,
    "MQTT": ChannelType.MQTT,
}


def classify_channel(name: str) -> int:
    """Return the channel type code for a relationship type name.

    Unrecognised names map to ``ChannelType.UNKNOWN`` (99); this never fails.
    """
    return int(_CHANNEL_TYPES.get(name, ChannelType.UNKNOWN))
