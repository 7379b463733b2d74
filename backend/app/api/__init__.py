"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All errors leave as the same JSON envelope

Design Decisions:
    - Thin routes delegate to services; wiring lives in api.dependencies
"""
