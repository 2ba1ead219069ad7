"""Hashtag extraction, validation and ranking helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from bailanysta.domain.models import Post

HASHTAG_MAX_LENGTH = 50

# A tag must stand alone: not glued to a preceding word (emails, "a#b") and not
# continued by a word char or by "-", "@", "." plus a word char ("#invalid-tag").
HASHTAG_PATTERN = re.compile(r"(?<![\w#])#([A-Za-z0-9_]+)(?![\w]|[-@.]\w)")
HASHTAG_BODY_PATTERN = re.compile(r"[A-Za-z0-9_]+")
HASHTAG_FORMAT_PATTERN = re.compile(r"#[A-Za-z0-9_]+")


@dataclass
class HashtagValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class PopularHashtag:
    hashtag: str
    count: int
    score: float
    recent_usage: datetime

    def to_dict(self) -> dict:
        return {
            "hashtag": self.hashtag,
            "count": self.count,
            "score": round(self.score, 4),
            "recentUsage": self.recent_usage.isoformat(),
        }


def extract_hashtags(content: object) -> List[str]:
    """
    Return the hashtags of a text, lowercased and de-duplicated in order of
    first appearance. The same content always yields the same list.
    """
    if not content or not isinstance(content, str):
        return []
    seen: List[str] = []
    for match in HASHTAG_PATTERN.finditer(content):
        tag = match.group(1).lower()
        if len(tag) > HASHTAG_MAX_LENGTH or tag in seen:
            continue
        seen.append(tag)
    return seen


def validate_hashtag(hashtag: str | None) -> HashtagValidation:
    """Check a bare hashtag (without '#') against the platform rules."""
    if not hashtag:
        return HashtagValidation(False, ["Hashtag cannot be empty"])
    errors: List[str] = []
    if len(hashtag) > HASHTAG_MAX_LENGTH:
        errors.append(f"Hashtag cannot exceed {HASHTAG_MAX_LENGTH} characters")
    if not HASHTAG_BODY_PATTERN.fullmatch(hashtag):
        errors.append("Hashtag can only contain letters, numbers, and underscores")
    if hashtag.startswith("_") or hashtag.endswith("_"):
        errors.append("Hashtag cannot start or end with underscore")
    return HashtagValidation(not errors, errors)


def validate_hashtag_with_prefix(value: str | None) -> HashtagValidation:
    if not value or not value.startswith("#"):
        return HashtagValidation(False, ["Hashtag must start with #"])
    return validate_hashtag(value[1:])


def normalize_hashtag(hashtag: str | None) -> str:
    cleaned = (hashtag or "").strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:]
    return cleaned.strip().lower()


def format_hashtag_for_display(hashtag: str | None) -> str:
    return f"#{normalize_hashtag(hashtag)}"


def is_valid_hashtag_format(text: str | None) -> bool:
    if not text:
        return False
    return bool(HASHTAG_FORMAT_PATTERN.fullmatch(text)) and 2 <= len(text) <= HASHTAG_MAX_LENGTH + 1


def count_hashtag_occurrences(content: str, hashtag: str) -> int:
    normalized = normalize_hashtag(hashtag)
    if not content or not normalized:
        return 0
    return sum(1 for match in HASHTAG_PATTERN.finditer(content) if match.group(1).lower() == normalized)


def remove_hashtags_from_content(content: str) -> str:
    stripped = HASHTAG_FORMAT_PATTERN.sub("", content or "")
    return re.sub(r"\s+", " ", stripped).strip()


def get_hashtag_suggestions(value: str, existing: Iterable[str], limit: int = 10) -> List[str]:
    """Existing hashtags starting with the typed prefix; an exact match is not a suggestion."""
    prefix = normalize_hashtag(value)
    if not prefix:
        return []
    suggestions: List[str] = []
    for tag in existing:
        normalized = normalize_hashtag(tag)
        if normalized == prefix or not normalized.startswith(prefix) or normalized in suggestions:
            continue
        suggestions.append(normalized)
        if len(suggestions) >= limit:
            break
    return suggestions


def rank_popular_hashtags(
    posts: Sequence[Post],
    limit: int = 10,
    *,
    now: Optional[datetime] = None,
    half_life_days: float = 7.0,
) -> List[PopularHashtag]:
    """
    Rank hashtags by recency-weighted frequency.

    Every post contributes ``0.5 ** (age_days / half_life_days)`` to each of
    its hashtags, so a tag used today counts fully and one used a half-life ago
    counts half. Ties fall back to the raw count, then to the tag name.
    """
    if limit <= 0:
        return []
    now = now or datetime.now(timezone.utc)
    half_life = half_life_days if half_life_days > 0 else 7.0
    buckets: dict[str, PopularHashtag] = {}
    for post in posts:
        if not post.hashtags:
            continue
        age_days = max(0.0, (now - post.created_at).total_seconds() / 86400)
        weight = 0.5 ** (age_days / half_life)
        for raw in post.hashtags:
            tag = raw.lower()
            entry = buckets.get(tag)
            if entry is None:
                buckets[tag] = PopularHashtag(tag, 1, weight, post.created_at)
                continue
            entry.count += 1
            entry.score += weight
            if post.created_at > entry.recent_usage:
                entry.recent_usage = post.created_at
    ranked = sorted(buckets.values(), key=lambda item: (-item.score, -item.count, item.hashtag))
    return ranked[:limit]
