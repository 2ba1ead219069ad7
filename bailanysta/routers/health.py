from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bailanysta.core.config import get_settings
from bailanysta.repositories.json_storage import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _storage_ok(request: Request) -> bool:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        return False
    try:
        storage.load()
    except StorageError as exc:
        logger.error("Health check: storage unavailable (%s: %s)", exc.code, exc.message)
        return False
    return True


@router.get("/health")
def health(request: Request):
    settings = get_settings()
    checks = {"environment": True, "storage": _storage_ok(request), "api": True}
    healthy = all(checks.values())
    started = getattr(request.app.state, "started_at", time.monotonic())
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.app_env,
        "version": settings.app_version,
        "uptime": round(time.monotonic() - started, 3),
        "checks": checks,
    }
    return JSONResponse(body, status_code=200 if healthy else 503, headers=NO_CACHE_HEADERS)
