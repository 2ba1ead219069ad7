from __future__ import annotations

from fastapi import APIRouter, Request

from bailanysta.schemas import CreateCommentRequest
from bailanysta.services.comment_service import CommentService
from bailanysta.services.session_service import current_user

router = APIRouter(prefix="/comments", tags=["comments"])


def _get_comment_service(request: Request) -> CommentService:
    svc = getattr(getattr(request.app, "state", None), "comment_service", None)
    if not svc:
        raise RuntimeError("CommentService not configured")
    return svc


@router.post("", status_code=201)
def create_comment(body: CreateCommentRequest, request: Request):
    user = current_user(request)
    comment = _get_comment_service(request).create_comment(body.post_id, body.content, user.id, user.name)
    return comment.to_document()


@router.get("/post/{post_id}")
def list_comments(post_id: str, request: Request):
    return [comment.to_document() for comment in _get_comment_service(request).list_comments(post_id)]


@router.delete("/{comment_id}")
def delete_comment(comment_id: str, request: Request):
    user = current_user(request)
    _get_comment_service(request).delete_comment(comment_id, user.id)
    return {"ok": True, "id": comment_id}
