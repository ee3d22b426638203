"""Node property values and fallible coercion helpers.

Graph properties arrive dynamically typed. They are read through
:class:`PropertyValue`, a closed tagged value (integer, string, boolean,
or absent), and converted with the ``require_*`` / ``optional_*``
helpers which raise :class:`ExtractionError` instead of failing hard.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class PropertyKind(StrEnum):
    """Tag of a :class:`PropertyValue`."""

    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    ABSENT = "absent"


@dataclass(frozen=True)
class PropertyValue:
    """A single node property, tagged with its kind."""

    kind: PropertyKind
    value: int | str | bool | None = None

    @classmethod
    def of(cls, raw: object) -> PropertyValue:
        """Tag a raw driver value.

        ``bool`` is checked before ``int`` (it is an ``int`` subclass).
        Values outside the closed set (floats, lists, temporal types)
        are treated as absent.
        """
        if isinstance(raw, bool):
            return cls(PropertyKind.BOOLEAN, raw)
        if isinstance(raw, int):
            return cls(PropertyKind.INTEGER, raw)
        if isinstance(raw, str):
            return cls(PropertyKind.STRING, raw)
        return ABSENT

    @property
    def is_absent(self) -> bool:
        return self.kind is PropertyKind.ABSENT


ABSENT = PropertyValue(PropertyKind.ABSENT)


class ExtractionError(Exception):
    """A recognised node is missing a required property or has the wrong type."""

    def __init__(self, field: str, message: str, *, node_id: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
        self.node_id = node_id

    def to_detail(self) -> dict[str, object]:
        return {"field": self.field, "node_id": self.node_id}


class PropertySource(Protocol):
    """Anything exposing a graph identity and tagged property lookup."""

    @property
    def id(self) -> int: ...

    def get(self, key: str) -> PropertyValue: ...


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _wrong_kind(source: PropertySource, key: str, expected: PropertyKind) -> ExtractionError:
    actual = source.get(key).kind
    return ExtractionError(
        key,
        f"field {key} must be {expected}, got {actual}",
        node_id=source.id,
    )


def _missing(source: PropertySource, key: str) -> ExtractionError:
    return ExtractionError(key, f"missing required field {key}", node_id=source.id)


def require_int(source: PropertySource, key: str) -> int:
    """Return the integer property *key* or raise :class:`ExtractionError`."""
    prop = source.get(key)
    if prop.is_absent:
        raise _missing(source, key)
    if prop.kind is not PropertyKind.INTEGER:
        raise _wrong_kind(source, key, PropertyKind.INTEGER)
    assert isinstance(prop.value, int)
    return prop.value


def require_str(source: PropertySource, key: str) -> str:
    """Return the string property *key* or raise :class:`ExtractionError`."""
    prop = source.get(key)
    if prop.is_absent:
        raise _missing(source, key)
    if prop.kind is not PropertyKind.STRING:
        raise _wrong_kind(source, key, PropertyKind.STRING)
    assert isinstance(prop.value, str)
    return prop.value


def optional_str(source: PropertySource, key: str, default: str = "") -> str:
    """Return the string property *key*, or *default* when absent."""
    prop = source.get(key)
    if prop.is_absent:
        return default
    if prop.kind is not PropertyKind.STRING:
        raise _wrong_kind(source, key, PropertyKind.STRING)
    assert isinstance(prop.value, str)
    return prop.value


def optional_int(source: PropertySource, key: str, default: int = 0) -> int:
    """Return the integer property *key*, or *default* when absent.

    Booleans are accepted and widened to 0/1 since flag properties are
    stored either way depending on the loader.
    """
    prop = source.get(key)
    if prop.is_absent:
        return default
    if prop.kind not in (PropertyKind.INTEGER, PropertyKind.BOOLEAN):
        raise _wrong_kind(source, key, PropertyKind.INTEGER)
    return int(prop.value)  # type: ignore[arg-type]
