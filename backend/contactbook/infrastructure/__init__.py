"""Infrastructure Layer — concrete collaborators and cross-cutting concerns.

Invariants:
    - Implements the Protocols in core/repository_protocols.py
    - All driver errors mapped to core error types before leaving this layer
"""
