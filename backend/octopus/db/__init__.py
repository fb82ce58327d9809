"""Database Declarations - SQLAlchemy Base and column types shared by every model.

Invariants:
    - Engines and sessions live in infrastructure/database.py, never here
"""
