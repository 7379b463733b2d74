"""Database Package — SQLAlchemy declarative Base shared by all ORM models.

Invariants:
    - Engine and sessions live in app.infrastructure.database, not here
"""
