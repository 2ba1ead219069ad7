from __future__ import annotations

from fastapi import APIRouter, Query, Request

from bailanysta.schemas import CreatePostRequest, UpdatePostRequest
from bailanysta.services.post_service import PostService
from bailanysta.services.session_service import current_user

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_post_service(request: Request) -> PostService:
    svc = getattr(getattr(request.app, "state", None), "post_service", None)
    if not svc:
        raise RuntimeError("PostService not configured")
    return svc


@router.post("", status_code=201)
def create_post(body: CreatePostRequest, request: Request):
    user = current_user(request)
    post = _get_post_service(request).create_post(body.content, user.id, user.name, body.mood)
    return post.to_document()


@router.get("")
def list_posts(
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("createdAt", alias="sortBy"),
):
    posts = _get_post_service(request).list_posts(limit=limit, offset=offset, sort_by=sort_by)
    return [post.to_document() for post in posts]


@router.get("/all")
def list_all_posts(request: Request):
    posts = _get_post_service(request).list_posts(limit=None)
    return [post.to_document() for post in posts]


@router.get("/hashtag/{tag}")
def posts_by_hashtag(
    tag: str,
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("createdAt", alias="sortBy"),
):
    posts = _get_post_service(request).get_posts_by_hashtag(tag, limit=limit, offset=offset, sort_by=sort_by)
    return [post.to_document() for post in posts]


@router.get("/{post_id}")
def get_post(post_id: str, request: Request):
    return _get_post_service(request).get_post(post_id).to_document()


@router.patch("/{post_id}")
def update_post(post_id: str, body: UpdatePostRequest, request: Request):
    user = current_user(request)
    updates = body.model_dump(exclude_unset=True)
    post = _get_post_service(request).update_post(post_id, updates, user.id)
    return post.to_document()


@router.delete("/{post_id}")
def delete_post(post_id: str, request: Request):
    user = current_user(request)
    _get_post_service(request).delete_post(post_id, user.id)
    return {"ok": True, "id": post_id}
