"""Client analytics events: validated, stamped and written to the log."""

from __future__ import annotations

import json
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Optional

from bailanysta.services.errors import BadRequestError

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_event_id(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"evt_{int(moment.timestamp() * 1000)}_{suffix}"


class AnalyticsService:
    def record_event(
        self,
        name: Optional[str],
        data: Any,
        timestamp: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> dict:
        if not name or data is None or data == "":
            raise BadRequestError("Missing required fields: name, data")
        now = datetime.now(timezone.utc)
        payload = data
        if isinstance(data, str):
            try:
                payload = json.loads(data)
            except ValueError:
                payload = data
        stamp = timestamp or now.isoformat()
        event_id = new_event_id(now)
        logger.info(
            "Analytics event %s name=%s session=%s timestamp=%s data=%s",
            event_id,
            name,
            session_id or "-",
            stamp,
            json.dumps(payload, ensure_ascii=False, default=str),
        )
        return {"eventId": event_id, "timestamp": stamp}
