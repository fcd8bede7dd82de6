"""Domain layer — definitions, type trees, traversal and attribution.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
