from __future__ import annotations

from fastapi import APIRouter, Query, Request

from bailanysta.services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


def _get_search_service(request: Request) -> SearchService:
    svc = getattr(getattr(request.app, "state", None), "search_service", None)
    if not svc:
        raise RuntimeError("SearchService not configured")
    return svc


@router.get("/posts")
def search_posts(
    request: Request,
    query: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
):
    posts = _get_search_service(request).search_posts(query, limit=limit, offset=offset)
    return [post.to_document() for post in posts]


@router.get("/popular-hashtags")
def popular_hashtags(request: Request, limit: int = Query(10, ge=1, le=20)):
    return [item.to_dict() for item in _get_search_service(request).get_popular_hashtags(limit)]


@router.get("/suggestions")
def suggestions(
    request: Request,
    query: str = Query(..., min_length=1, max_length=50),
    limit: int = Query(5, ge=1, le=10),
):
    return _get_search_service(request).get_search_suggestions(query, limit)


@router.get("/users")
def search_users(request: Request, query: str = Query("", max_length=100)):
    return [user.to_document() for user in _get_search_service(request).search_users(query)]
