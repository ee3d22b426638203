"""Channel type lookup exposed as a service operation."""

from __future__ import annotations

from mqtopo.domain.channels import classify_channel
from mqtopo.domain.types import ChannelType
from mqtopo.services.result import ServiceResult


def describe_channel(name: str) -> ServiceResult:
    """Classify a relationship type name; unknown names are not an error."""
    code = classify_channel(name)
    return ServiceResult(
        ok=True,
        op="channel_type",
        data={"name": name, "code": code, "type": ChannelType(code).name},
    )
