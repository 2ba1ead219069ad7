"""
Pydantic models for the Bailanysta entities.

Attributes are snake_case in Python; the JSON document on disk and the HTTP
payloads use the camelCase aliases (``authorId``, ``createdAt``...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

POST_MAX_LENGTH = 280
COMMENT_MAX_LENGTH = 140
USERNAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 200

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Legacy documents may carry naive timestamps; treat them as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Mood(str, Enum):
    HAPPY = "Happy"
    THOUGHTFUL = "Thoughtful"
    EXCITED = "Excited"
    CONTEMPLATIVE = "Contemplative"
    ENERGETIC = "Energetic"


class _Entity(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys, as stored on disk and returned by the API."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class UserPreferences(_Entity):
    theme: Literal["light", "dark", "system"] = "system"
    language: Literal["en", "ru"] = "en"


class User(_Entity):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=BIO_MAX_LENGTH)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)


class Post(_Entity):
    id: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=POST_MAX_LENGTH)
    author_id: str = Field(min_length=1)
    author_name: str = Field(min_length=1)
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)
    mood: Optional[Mood] = None
    hashtags: List[str] = Field(default_factory=list)
    reaction_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)


class Comment(_Entity):
    id: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=COMMENT_MAX_LENGTH)
    post_id: str = Field(min_length=1)
    author_id: str = Field(min_length=1)
    author_name: str = Field(min_length=1)
    created_at: UtcDatetime = Field(default_factory=utcnow)


class Reaction(_Entity):
    id: str = Field(min_length=1)
    type: Literal["heart"] = "heart"
    post_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    created_at: UtcDatetime = Field(default_factory=utcnow)
