"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /readiness always returns 200 {"status": "ready"}
    - GET /liveness always returns 200 {"status": "alive"}
    - Health probe durations logged at INFO, all other requests at DEBUG

Design Decisions:
    - Shared by the trading and user services: registered on each app in main.py
    - Timing as HTTP middleware so it also covers error responses
"""

import logging
import time

from fastapi import APIRouter, FastAPI, Request, status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

HEALTH_PATHS = ("/readiness", "/liveness")


@router.get("/readiness", status_code=status.HTTP_200_OK)
async def readiness_check():
    """Readiness probe."""
    return {"status": "ready"}


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness_check():
    """Liveness probe. Returns 200 if the process is up."""
    return {"status": "alive"}


def register_health_logging(app: FastAPI) -> None:
    """Log request durations; health probes at INFO."""

    @app.middleware("http")
    async def health_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000)
        path = request.url.path
        extra = {"path": path, "method": request.method, "duration_ms": duration_ms}
        if any(p in path for p in HEALTH_PATHS):
            logger.info(f"Health check: {path} - {duration_ms}ms", extra=extra)
        else:
            logger.debug(f"{request.method} {path} - {duration_ms}ms", extra=extra)
        return response
