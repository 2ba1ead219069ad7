from __future__ import annotations

from fastapi import APIRouter, Request

from bailanysta.schemas import AnalyticsEventRequest
from bailanysta.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/api", tags=["analytics"])


def _get_analytics_service(request: Request) -> AnalyticsService:
    svc = getattr(getattr(request.app, "state", None), "analytics_service", None)
    if not svc:
        raise RuntimeError("AnalyticsService not configured")
    return svc


@router.post("/analytics")
def record_event(body: AnalyticsEventRequest, request: Request):
    result = _get_analytics_service(request).record_event(
        body.name, body.data, timestamp=body.timestamp, session_id=body.session_id
    )
    return {"ok": True, **result}
