"""Database package: declarative base shared by models and Alembic."""
