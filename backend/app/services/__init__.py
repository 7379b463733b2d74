"""Services Layer — imperative shell around the pure intake core.

Invariants:
    - Services own IO (DB session, session store, clock); decisions live in app.core
    - Every mutation commits the DB before the session store is updated

Design Decisions:
    - One service per concern (recorder, validator, review) composed by SessionManager
"""
