"""Services Layer — async orchestration of core rules over boundary Protocols.

Invariants:
    - Services depend on Protocols (core/repository_protocols.py), never on concrete stores
"""
