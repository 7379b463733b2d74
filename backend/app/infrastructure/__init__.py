"""Infrastructure Layer — database, session store, catalog, HTTP client and logging.

Invariants:
    - Infrastructure depends on core types (errors, Position), never on services
    - External calls (DB, HTTP) map their failures to typed IntakeErrors

Design Decisions:
    - Concrete implementations of the core protocols live here so they can be swapped
"""
