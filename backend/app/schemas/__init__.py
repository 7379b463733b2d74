"""Pydantic Schemas — request/response contracts for the intake API.

Invariants:
    - Schemas validate at the system boundary (request bodies, response shapes)
    - Domain rules that depend on the catalog (required, options) stay in app.core

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
