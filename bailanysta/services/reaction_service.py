"""Heart reactions: one per user and post, toggled on and off."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from bailanysta.domain.models import Reaction
from bailanysta.repositories.json_storage import JsonStorage, StorageError, get_storage
from bailanysta.services.errors import BadRequestError, NotFoundError, storage_errors

logger = logging.getLogger(__name__)


@dataclass
class ToggleResult:
    is_liked: bool
    reaction_count: int

    def to_dict(self) -> dict:
        return {"isLiked": self.is_liked, "reactionCount": self.reaction_count}


class ReactionService:
    def __init__(self, repository: JsonStorage | None = None) -> None:
        self.repository = repository or get_storage()

    def toggle_reaction(self, post_id: str, user_id: str) -> ToggleResult:
        if not post_id or not user_id:
            raise BadRequestError("Post id and user id are required")
        with storage_errors("toggle reaction"):
            liked, count = self.repository.toggle_reaction(post_id, user_id)
        return ToggleResult(liked, count)

    def get_user_reaction(self, post_id: str, user_id: str) -> Optional[Reaction]:
        with storage_errors("retrieve reaction"):
            return self.repository.get_user_reaction(post_id, user_id)

    def get_post_reactions(self, post_id: str) -> List[Reaction]:
        with storage_errors("retrieve reactions"):
            if not self.repository.get_post_by_id(post_id):
                raise NotFoundError("Post not found")
            return self.repository.get_post_reactions(post_id)

    def has_user_reacted(self, post_id: str, user_id: str) -> bool:
        try:
            return self.repository.get_user_reaction(post_id, user_id) is not None
        except StorageError as exc:
            logger.warning("Reaction lookup failed for post %s: %s", post_id, exc.code)
            return False
