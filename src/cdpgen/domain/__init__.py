"""Domain layer: schema model, declaration tree, naming and errors.

This layer depends only on stdlib and pydantic.
It must never import from compiler, services, infrastructure, commands, or config.
"""
