import os
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from elkpeak.core.config import get_settings
from elkpeak.db.session import engine

router = APIRouter(tags=["health"])

SERVICE = "elkpeak-backend"


def _release() -> str | None:
    return os.getenv("RENDER_GIT_COMMIT") or os.getenv("GIT_SHA") or None


def _status() -> dict:
    settings = get_settings()
    return {
        "status": "ok",
        "service": SERVICE,
        "environment": settings.environment,
        "release": _release(),
        "time": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/")
def root() -> dict:
    # Platform health checks may hit "/"; keep it cheap and 200.
    return _status()


@router.get("/health")
@router.get("/healthz")
def health() -> dict:
    return _status()


@router.get("/readyz")
def readyz(response: Response) -> dict:
    """
    Readiness: database reachable and, in production, the Alembic version
    table present. 503 when not ready.
    """
    settings = get_settings()
    checks: dict[str, object] = {}
    ok = True

    try:
        with engine.connect() as conn:
            conn.execute(text("select 1"))
        checks["db"] = "ok"
    except SQLAlchemyError as e:
        ok = False
        checks["db"] = "error"
        checks["db_error"] = type(e).__name__

    try:
        with engine.connect() as conn:
            v = conn.execute(text("select version_num from alembic_version limit 1")).scalar()
        checks["alembic_version"] = v or None
        if settings.environment == "production" and not v:
            ok = False
    except SQLAlchemyError:
        checks["alembic_version"] = None
        if settings.environment == "production":
            ok = False

    if not ok:
        response.status_code = 503
    return {
        "status": "ok" if ok else "not_ready",
        "service": SERVICE,
        "environment": settings.environment,
        "release": _release(),
        "checks": checks,
    }
