"""Node classifier and extractor.

A node is classified by its first label only; additional labels are
ignored. Unrecognised labels are skipped, not errors. A recognised node
missing a required property raises :class:`ExtractionError` and yields
no record at all.
"""

from __future__ import annotations

from mqtopo.domain.channels import classify_channel
from mqtopo.domain.entities import Application, Connection, QueueManager
from mqtopo.domain.graph import RawNode, RawRelationship
from mqtopo.domain.properties import (
    ExtractionError,
    PropertyKind,
    optional_int,
    optional_str,
    require_int,
    require_str,
)
from mqtopo.domain.types import EntityKind, ReposType

__all__ = [
    "ExtractionError",
    "classify_node",
    "extract_application",
    "extract_connection",
    "extract_queue_manager",
    "node_kind",
]

_QM_TOOLTIP = "id:{id}, qmid:{qmid}, name:{name}, server:{host}"
_APP_TOOLTIP = "id:{id}, appid:{appid}, name:{name}, owner:{owner}"

_REPOS_BY_NAME: dict[str, ReposType] = {
    "Full": ReposType.FULL,
    "Partial": ReposType.PARTIAL,
    "Normal": ReposType.NORMAL,
}


def node_kind(node: RawNode) -> EntityKind | None:
    """Return the entity kind for *node*, or None if its first label is unmanaged."""
    label = node.primary_label
    if label is None:
        return None
    try:
        return EntityKind(label)
    except ValueError:
        return None


def _repos_type(node: RawNode) -> ReposType:
    prop = node.get("type")
    if prop.is_absent:
        return ReposType.PARTIAL
    if prop.kind is PropertyKind.STRING:
        return _REPOS_BY_NAME.get(str(prop.value), ReposType.UNKNOWN)
    return ReposType.UNKNOWN


def extract_queue_manager(node: RawNode, layer: int) -> QueueManager:
    """Build a :class:`QueueManager` from a ``QueueManager``-labelled node.

    Required: ``qmid`` (int), ``name`` (str), ``host`` (str).
    A missing or non-integer ``decom`` defaults to 0 and forces the
    repository role to ``UNKNOWN`` whatever ``type`` says.
    """
    qmid = require_int(node, "qmid")
    name = require_str(node, "name")
    host = require_str(node, "host")
    host2 = optional_str(node, "host2")
    multi = optional_int(node, "multi")
    repos = _repos_type(node)

    decom_prop = node.get("decom")
    if decom_prop.kind is PropertyKind.INTEGER:
        decom = int(decom_prop.value)  # type: ignore[arg-type]
    else:
        decom = 0
        repos = ReposType.UNKNOWN

    return QueueManager(
        id=node.id,
        qmgr_id=qmid,
        name=name,
        repos=repos,
        tooltip=_QM_TOOLTIP.format(id=node.id, qmid=qmid, name=name, host=host),
        layer=layer,
        decom=decom,
        host=host,
        host2=host2,
        multi=multi,
    )


def extract_application(node: RawNode, layer: int) -> Application:
    """Build an :class:`Application` from an ``Application``-labelled node.

    Required: ``id`` (int), ``name`` (str), ``owner`` (str).
    """
    app_id = require_int(node, "id")
    name = require_str(node, "name")
    owner = require_str(node, "owner")
    return Application(
        id=node.id,
        app_id=app_id,
        name=name,
        owner=owner,
        tooltip=_APP_TOOLTIP.format(id=node.id, appid=app_id, name=name, owner=owner),
        layer=layer,
    )


def classify_node(
    node: RawNode,
    layer: int,
    *,
    include_applications: bool = True,
) -> QueueManager | Application | None:
    """Classify and extract one node.

    Returns None for unmanaged labels (and for applications when
    *include_applications* is False). Raises :class:`ExtractionError`
    when a recognised node is incomplete.
    """
    kind = node_kind(node)
    if kind is EntityKind.QUEUE_MANAGER:
        return extract_queue_manager(node, layer)
    if kind is EntityKind.APPLICATION and include_applications:
        return extract_application(node, layer)
    return None


def extract_connection(rel: RawRelationship) -> Connection:
    """Build a :class:`Connection`; the relationship type is the channel name."""
    return Connection(
        id=rel.id,
        channel_name=rel.type,
        channel_type=classify_channel(rel.type),
        start_id=rel.start_id,
        end_id=rel.end_id,
    )
