"""Post use cases: create, read, edit and delete with authorship checks."""

from __future__ import annotations

from typing import List, Optional

from bailanysta.domain.hashtags import extract_hashtags, normalize_hashtag
from bailanysta.domain.models import POST_MAX_LENGTH, Mood, Post
from bailanysta.domain.search import SORT_FIELDS
from bailanysta.repositories.json_storage import JsonStorage, get_storage
from bailanysta.services.errors import BadRequestError, ForbiddenError, NotFoundError, storage_errors

MOODS = {mood.value for mood in Mood}


def _clean_content(content: Optional[str]) -> str:
    text = (content or "").strip()
    if not text:
        raise BadRequestError("Post content cannot be empty")
    if len(text) > POST_MAX_LENGTH:
        raise BadRequestError(f"Post content cannot exceed {POST_MAX_LENGTH} characters")
    return text


def _clean_mood(mood: Optional[str]) -> Optional[str]:
    if mood is None or mood == "":
        return None
    value = mood.value if isinstance(mood, Mood) else str(mood)
    if value not in MOODS:
        raise BadRequestError(f"Invalid mood. Expected one of: {', '.join(sorted(MOODS))}")
    return value


def _check_sort(sort_by: str) -> str:
    if sort_by not in SORT_FIELDS:
        raise BadRequestError(f"Invalid sortBy. Expected one of: {', '.join(sorted(SORT_FIELDS))}")
    return sort_by


class PostService:
    def __init__(self, repository: JsonStorage | None = None) -> None:
        self.repository = repository or get_storage()

    def create_post(self, content: str, author_id: str, author_name: str, mood: Optional[str] = None) -> Post:
        text = _clean_content(content)
        mood_value = _clean_mood(mood)
        if not author_id or not author_name:
            raise BadRequestError("Author is required")
        with storage_errors("create post"):
            return self.repository.create_post(text, author_id, author_name, mood_value)

    def get_post(self, post_id: str) -> Post:
        with storage_errors("retrieve post"):
            post = self.repository.get_post_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    def list_posts(self, limit: Optional[int] = 20, offset: int = 0, sort_by: str = "createdAt") -> List[Post]:
        _check_sort(sort_by)
        with storage_errors("retrieve posts"):
            return self.repository.get_posts(limit=limit, offset=offset, sort_by=sort_by)

    def get_posts_by_hashtag(
        self, hashtag: str, limit: Optional[int] = 20, offset: int = 0, sort_by: str = "createdAt"
    ) -> List[Post]:
        if not normalize_hashtag(hashtag):
            raise BadRequestError("Hashtag cannot be empty")
        _check_sort(sort_by)
        with storage_errors("retrieve posts by hashtag"):
            return self.repository.get_posts_by_hashtag(hashtag, limit=limit, offset=offset, sort_by=sort_by)

    def update_post(self, post_id: str, updates: dict, author_id: str) -> Post:
        """Edit ``content`` and/or ``mood``; only the author may do it."""
        post = self.get_post(post_id)
        if post.author_id != author_id:
            raise ForbiddenError("You can only edit your own posts")
        changes: dict = {}
        if "content" in updates:
            changes["content"] = _clean_content(updates["content"])
            changes["hashtags"] = extract_hashtags(changes["content"])
        if "mood" in updates:
            changes["mood"] = _clean_mood(updates["mood"])
        if not changes:
            raise BadRequestError("Nothing to update")
        with storage_errors("update post"):
            updated = self.repository.update_post(post_id, changes)
        if not updated:
            raise NotFoundError("Post not found")
        return updated

    def delete_post(self, post_id: str, author_id: str) -> bool:
        post = self.get_post(post_id)
        if post.author_id != author_id:
            raise ForbiddenError("You can only delete your own posts")
        with storage_errors("delete post"):
            deleted = self.repository.delete_post(post_id)
        if not deleted:
            raise NotFoundError("Post not found")
        return True

    def get_user_posts_with_ownership(
        self, user_id: str, current_user_id: Optional[str], limit: Optional[int] = 20, offset: int = 0
    ) -> List[dict]:
        with storage_errors("retrieve user posts"):
            posts = self.repository.get_user_posts(user_id, limit=limit, offset=offset)
        return [{**post.to_document(), "isOwner": post.author_id == current_user_id} for post in posts]
