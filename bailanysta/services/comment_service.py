"""Comment use cases."""

from __future__ import annotations

from typing import List

from bailanysta.domain.models import COMMENT_MAX_LENGTH, Comment
from bailanysta.repositories.json_storage import JsonStorage, get_storage
from bailanysta.services.errors import BadRequestError, ForbiddenError, NotFoundError, storage_errors


class CommentService:
    def __init__(self, repository: JsonStorage | None = None) -> None:
        self.repository = repository or get_storage()

    def create_comment(self, post_id: str, content: str, author_id: str, author_name: str) -> Comment:
        text = (content or "").strip()
        if not post_id:
            raise BadRequestError("Post id is required")
        if not author_id or not author_name:
            raise BadRequestError("Author is required")
        if not text:
            raise BadRequestError("Comment content cannot be empty")
        if len(text) > COMMENT_MAX_LENGTH:
            raise BadRequestError(f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters")
        with storage_errors("create comment"):
            return self.repository.create_comment(post_id, text, author_id, author_name)

    def list_comments(self, post_id: str) -> List[Comment]:
        with storage_errors("retrieve comments"):
            if not self.repository.get_post_by_id(post_id):
                raise NotFoundError("Post not found")
            return self.repository.get_comments_by_post_id(post_id)

    def delete_comment(self, comment_id: str, author_id: str) -> bool:
        with storage_errors("delete comment"):
            comment = self.repository.get_comment_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment not found")
            if comment.author_id != author_id:
                raise ForbiddenError("You can only delete your own comments")
            if not self.repository.delete_comment(comment_id):
                raise NotFoundError("Comment not found")
        return True
