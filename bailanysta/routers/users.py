from __future__ import annotations

from fastapi import APIRouter, Query, Request

from bailanysta.schemas import UpdateUserRequest
from bailanysta.services.post_service import PostService
from bailanysta.services.session_service import current_user
from bailanysta.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def _get_post_service(request: Request) -> PostService:
    svc = getattr(getattr(request.app, "state", None), "post_service", None)
    if not svc:
        raise RuntimeError("PostService not configured")
    return svc


@router.get("/me")
def my_profile(request: Request):
    user = current_user(request)
    svc = _get_user_service(request)
    svc.ensure_user(user.id, user.name)
    return svc.get_user_profile(user.id)


@router.patch("/me")
def update_my_profile(body: UpdateUserRequest, request: Request):
    user = current_user(request)
    svc = _get_user_service(request)
    svc.ensure_user(user.id, user.name)
    updated = svc.update_user(user.id, body.model_dump(exclude_unset=True))
    return updated.to_document()


@router.get("/{user_id}")
def user_profile(user_id: str, request: Request):
    return _get_user_service(request).get_user_profile(user_id)


@router.get("/{user_id}/posts")
def user_posts(
    user_id: str,
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    return _get_post_service(request).get_user_posts_with_ownership(
        user_id, current_user(request).id, limit=limit, offset=offset
    )
