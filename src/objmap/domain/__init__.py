"""Domain layer: references, rules, type catalog, and capability contracts.

This layer depends only on the stdlib.
It must never import from services, infrastructure, plugins, commands, or config.
"""
