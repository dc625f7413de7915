"""Service layer: compilation workflows returning ServiceResult.

Services may import from domain, compiler, and infrastructure layers.
They must never import from commands or output.
"""
