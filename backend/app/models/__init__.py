"""ORM Models — SQLAlchemy declarative models for the durable intake record.

Invariants:
    - All models inherit from Base (db/base.py)
    - Application is the aggregate root; Responses are scoped by application_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.application import Application  # noqa: F401
from app.models.response import Response  # noqa: F401
