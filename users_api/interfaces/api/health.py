"""Health check API route."""

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from users_api.core.exceptions import envelope
from users_api.interfaces.deps import get_store

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request, store=Depends(get_store)):
    """Report API liveness and store reachability.

    An unreachable store is still a 200 with ``database_reachable`` false;
    only an unexpected fault while probing yields 503.
    """
    settings = request.app.state.settings
    try:
        reachable = store.ping()
    except Exception as exc:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=envelope(False, "API health check failed", error=str(exc) if settings.is_development else None),
        )

    uptime = time.monotonic() - request.app.state.started_at
    return envelope(
        True,
        "API is running",
        data={
            "status": "OK",
            "database": "connected" if reachable else "disconnected",
            "database_reachable": reachable,
            "uptime": f"{uptime:.2f}s",
            "uptime_seconds": round(uptime, 2),
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
