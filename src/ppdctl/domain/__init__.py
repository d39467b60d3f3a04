"""Domain layer — catalog types, selection rules, and id allocation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
