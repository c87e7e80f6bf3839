"""Service Layer: async persistence workflows over the ORM models.

Invariants:
    - Services own commits and rollbacks; routes only call them
"""
