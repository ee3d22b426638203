"""mqtopo — layered MQ topology snapshots from a Neo4j graph."""

__version__ = "0.3.0"
