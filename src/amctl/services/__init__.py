"""Service layer — handler sets returning Response.

Services may import from domain, infrastructure and plugins.
They must never import from bridge, commands, or output.
"""
