"""Contact Book Package — personal contact management API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
