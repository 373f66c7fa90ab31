"""Domain layer — destination parsing, validation, and the registry model.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
