"""User profile use cases."""

from __future__ import annotations

from typing import List, Optional

from bailanysta.domain.models import BIO_MAX_LENGTH, USERNAME_MAX_LENGTH, Post, User
from bailanysta.repositories.json_storage import JsonStorage, get_storage
from bailanysta.services.errors import BadRequestError, NotFoundError, storage_errors

PREFERENCE_KEYS = {"theme", "language"}


class UserService:
    def __init__(self, repository: JsonStorage | None = None) -> None:
        self.repository = repository or get_storage()

    def _get_user(self, user_id: str) -> User:
        with storage_errors("retrieve user"):
            user = self.repository.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_user_profile(self, user_id: str) -> dict:
        user = self._get_user(user_id)
        with storage_errors("retrieve user profile"):
            post_count = len(self.repository.get_user_posts(user_id))
        return {**user.to_document(), "postCount": post_count}

    def ensure_user(self, user_id: str, name: str) -> User:
        """Return the user, creating it with default preferences on first use."""
        with storage_errors("create user"):
            user = self.repository.get_user_by_id(user_id)
            if user:
                return user
            return self.repository.create_user(name, user_id=user_id)

    def update_user(self, user_id: str, updates: dict) -> User:
        user = self._get_user(user_id)
        changes: dict = {}
        if "name" in updates:
            name = (updates["name"] or "").strip()
            if not name:
                raise BadRequestError("Name cannot be empty")
            if len(name) > USERNAME_MAX_LENGTH:
                raise BadRequestError(f"Name cannot exceed {USERNAME_MAX_LENGTH} characters")
            changes["name"] = name
        if "bio" in updates:
            bio = (updates["bio"] or "").strip() or None
            if bio and len(bio) > BIO_MAX_LENGTH:
                raise BadRequestError(f"Bio cannot exceed {BIO_MAX_LENGTH} characters")
            changes["bio"] = bio
        if "email" in updates:
            changes["email"] = (updates["email"] or "").strip() or None
        if updates.get("preferences"):
            extra = set(updates["preferences"]) - PREFERENCE_KEYS
            if extra:
                raise BadRequestError(f"Unknown preferences: {', '.join(sorted(extra))}")
            merged = user.preferences.model_dump()
            merged.update({k: v for k, v in updates["preferences"].items() if v is not None})
            changes["preferences"] = merged
        if not changes:
            return user
        with storage_errors("update user profile"):
            updated = self.repository.update_user(user_id, changes)
        if not updated:
            raise NotFoundError("User not found")
        return updated

    def get_user_posts(self, user_id: str, limit: Optional[int] = 20, offset: int = 0) -> List[Post]:
        self._get_user(user_id)
        with storage_errors("retrieve user posts"):
            return self.repository.get_user_posts(user_id, limit=limit, offset=offset)
