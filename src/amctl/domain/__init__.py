"""Domain layer — command types, grammar, errors, and UI state rules.

This layer depends only on stdlib and pydantic.
It must never import from services, bridge, infrastructure, commands, or config.
"""
