"""Service layer: the mapping engine and the surfaces built on top of it.

Services may import from the domain layer.
They must never import from commands, output, or config.logging.
"""
