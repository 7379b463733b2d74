"""API Dependencies — request-scoped wiring of identity, clock, store, catalog and services.

Invariants:
    - Acting user comes only from the X-User-Id header; missing/blank → IdentityMissingError
    - Store and catalog are process-wide, created in the lifespan and kept on app.state
    - Services are built per request around the request's AsyncSession

Design Decisions:
    - Every collaborator is a Depends() so tests swap it via app.dependency_overrides
"""

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.clock import Clock, utc_now
from app.core.errors import IdentityMissingError
from app.core.repository_protocols import PositionCatalog, SessionStore
from app.infrastructure.database import get_db
from app.services.review_workflow import ReviewWorkflow
from app.services.session_manager import SessionManager


def get_app_settings() -> Settings:
    return get_settings()


def get_clock() -> Clock:
    return utc_now


def get_session_store(request: Request) -> SessionStore:
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise RuntimeError("Session store not initialized")
    return store


def get_position_catalog(request: Request) -> PositionCatalog:
    catalog = getattr(request.app.state, "position_catalog", None)
    if catalog is None:
        raise RuntimeError("Position catalog not initialized")
    return catalog


def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    if not x_user_id or not x_user_id.strip():
        raise IdentityMissingError()
    return x_user_id.strip()


def get_session_manager(
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    catalog: PositionCatalog = Depends(get_position_catalog),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_app_settings),
) -> SessionManager:
    return SessionManager(
        db, store, catalog,
        ttl=settings.session_ttl,
        rejection_cooldown_days=settings.rejection_cooldown_days,
        clock=clock,
    )


def get_review_workflow(
    db: AsyncSession = Depends(get_db),
    catalog: PositionCatalog = Depends(get_position_catalog),
    clock: Clock = Depends(get_clock),
) -> ReviewWorkflow:
    return ReviewWorkflow(db, catalog, clock)
