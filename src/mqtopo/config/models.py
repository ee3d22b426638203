"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mqtopo.toml only contains
overrides. A local Neo4j with default credentials needs only
``[neo4j] password``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

DEFAULT_EXPAND_QUERY = "MATCH p=(q {qmid: $qmid})-[]-() RETURN p"


class Neo4jConfig(BaseModel):
    """[neo4j] section."""

    model_config = {"frozen": True}

    uri: str = "bolt://localhost:7687"
    username: str = "neo4j"
    password: str = ""
    database: str | None = None
    encrypted: bool = False
    connection_timeout: float = 30.0


class TraversalConfig(BaseModel):
    """[traversal] section.

    ``expand_query`` is run once per queue manager on each follow-up
    layer and must reference the ``$qmid`` parameter.
    """

    model_config = {"frozen": True}

    default_layers: int = Field(default=1, ge=1)
    max_layers: int = Field(default=10, ge=1)
    deadline_seconds: float | None = Field(default=None, gt=0)
    expand_query: str = DEFAULT_EXPAND_QUERY
    include_nodes: bool = True
    include_applications: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> TraversalConfig:
        if self.default_layers > self.max_layers:
            msg = f"default_layers ({self.default_layers}) exceeds max_layers ({self.max_layers})"
            raise ValueError(msg)
        if "$qmid" not in self.expand_query:
            raise ValueError("expand_query must reference the $qmid parameter")
        return self
