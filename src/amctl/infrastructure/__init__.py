"""Infrastructure layer — filesystem channels and snapshot persistence.

This layer depends on stdlib, pydantic, and domain models.
It must never import from services, bridge, commands, or output.
"""
