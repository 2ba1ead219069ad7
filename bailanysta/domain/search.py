"""Pure filtering, scoring and ordering helpers over in-memory posts/users."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, TypeVar

from bailanysta.domain.hashtags import normalize_hashtag
from bailanysta.domain.models import Post, User

T = TypeVar("T")

SORT_FIELDS = {"createdAt", "updatedAt", "reactionCount"}


def tokenize_query(query: str | None) -> List[str]:
    return [word for word in (query or "").lower().split() if word]


def score_post(post: Post, words: Sequence[str], phrase: str, now: Optional[datetime] = None) -> float:
    """
    Relevance of a post for the query words; 0 means no match.

    Content matches weigh most, then hashtags, then the author name. Recent
    and popular posts get a small bonus, but only once something matched.
    """
    if not words:
        return 0.0
    now = now or datetime.now(timezone.utc)
    score = 0.0
    matched = False

    content = post.content.lower()
    content_hits = 0
    for word in words:
        if word not in content:
            continue
        content_hits += 1
        score += 10
        if re.search(rf"\b{re.escape(word)}\b", content):
            score += 5
        if content.startswith(word):
            score += 8
    if content_hits > 1:
        score += content_hits * 3
    matched = matched or content_hits > 0

    for tag in post.hashtags:
        tag = tag.lower()
        for word in words:
            if word in tag:
                score += 7
                matched = True
                if tag == word or tag == normalize_hashtag(word):
                    score += 10

    author = post.author_name.lower()
    for word in words:
        if word in author:
            score += 4
            matched = True
            if author == word:
                score += 8

    if not matched:
        return 0.0

    if phrase and phrase in content:
        score += 20

    age_days = (now - post.created_at).total_seconds() / 86400
    if 0 <= age_days < 7:
        score += max(0, 5 - int(age_days))

    score += min(post.reaction_count * 0.5, 5)
    score += min(post.comment_count * 0.3, 3)
    return score


def rank_posts(posts: Iterable[Post], query: str, now: Optional[datetime] = None) -> List[Post]:
    """Posts matching the query, best score first, newest first on ties."""
    words = tokenize_query(query)
    phrase = (query or "").lower().strip()
    scored = []
    for post in posts:
        score = score_post(post, words, phrase, now)
        if score > 0:
            scored.append((score, post))
    scored.sort(key=lambda item: (-item[0], -item[1].created_at.timestamp()))
    return [post for _, post in scored]


def filter_posts_by_hashtag(posts: Iterable[Post], hashtag: str) -> List[Post]:
    tag = normalize_hashtag(hashtag)
    if not tag:
        return []
    return [post for post in posts if any(t.lower() == tag for t in post.hashtags)]


def sort_posts(posts: Iterable[Post], sort_by: str = "createdAt") -> List[Post]:
    if sort_by == "reactionCount":
        key = lambda post: (post.reaction_count, post.created_at)  # noqa: E731
    elif sort_by == "updatedAt":
        key = lambda post: post.updated_at  # noqa: E731
    else:
        key = lambda post: post.created_at  # noqa: E731
    return sorted(posts, key=key, reverse=True)


def paginate(items: Sequence[T], limit: Optional[int] = None, offset: int = 0) -> List[T]:
    start = max(0, offset or 0)
    if not limit:
        return list(items[start:])
    return list(items[start:start + limit])


def filter_users(users: Iterable[User], query: str | None) -> List[User]:
    """Users whose name or e-mail contains the query (case-insensitive)."""
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [
        user
        for user in users
        if needle in user.name.lower() or needle in (user.email or "").lower()
    ]


def suggest(posts: Sequence[Post], query: str | None, limit: int = 5) -> List[dict]:
    """Hashtags starting with the query first, then author names containing it."""
    needle = normalize_hashtag(query)
    if not needle or limit <= 0:
        return []
    tags: List[str] = []
    authors: List[str] = []
    for post in posts:
        for tag in post.hashtags:
            normalized = tag.lower()
            if normalized.startswith(needle) and normalized != needle and normalized not in tags:
                tags.append(normalized)
        if needle in post.author_name.lower() and post.author_name not in authors:
            authors.append(post.author_name)
    hashtag_part = [{"type": "hashtag", "value": f"#{tag}"} for tag in tags[: -(-limit // 2)]]
    author_part = [{"type": "user", "value": name} for name in authors[: limit - len(hashtag_part)]]
    return hashtag_part + author_part
