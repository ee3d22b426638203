"""Domain layer — raw graph shapes, topology entities, and classification rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
