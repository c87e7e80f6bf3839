"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic, except core/errors
"""
