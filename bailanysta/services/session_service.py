"""Session helpers. There is no login: every request acts as the configured user."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from bailanysta.core.config import get_settings


@dataclass(frozen=True)
class CurrentUser:
    id: str
    name: str


def current_user(request: Request | None = None) -> CurrentUser:
    """Return the user acting on behalf of the current request."""
    settings = get_settings()
    return CurrentUser(settings.current_user_id, settings.current_user_name)
