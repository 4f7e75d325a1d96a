"""Infrastructure layer: profile files and JSON documents.

Depends on domain and services. Never imported by the domain layer.
"""
