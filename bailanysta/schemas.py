"""Request bodies accepted by the HTTP routers (camelCase on the wire)."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePostRequest(_Body):
    content: str
    mood: Optional[str] = None


class UpdatePostRequest(_Body):
    content: Optional[str] = None
    mood: Optional[str] = None


class CreateCommentRequest(_Body):
    post_id: str
    content: str


class ToggleReactionRequest(_Body):
    post_id: str


class PreferencesUpdate(_Body):
    theme: Optional[Literal["light", "dark", "system"]] = None
    language: Optional[Literal["en", "ru"]] = None


class UpdateUserRequest(_Body):
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    preferences: Optional[PreferencesUpdate] = None


class AnalyticsEventRequest(_Body):
    name: Optional[str] = None
    data: Any = None
    timestamp: Optional[str] = None
    session_id: Optional[str] = None
