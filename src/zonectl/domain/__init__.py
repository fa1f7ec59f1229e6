"""Domain layer — snapshot models, hydration, and closure.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
