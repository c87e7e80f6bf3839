"""enumforge application package: enum storage strategies over FastAPI and SQLAlchemy.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
