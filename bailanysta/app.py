"""FastAPI application factory for the Bailanysta backend."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bailanysta.core.config import get_settings
from bailanysta.core.log import configure_logging
from bailanysta.repositories.json_storage import JsonStorage, StorageError, get_storage
from bailanysta.routers import analytics as analytics_router
from bailanysta.routers import comments as comments_router
from bailanysta.routers import health as health_router
from bailanysta.routers import posts as posts_router
from bailanysta.routers import reactions as reactions_router
from bailanysta.routers import search as search_router
from bailanysta.routers import users as users_router
from bailanysta.services.analytics_service import AnalyticsService
from bailanysta.services.comment_service import CommentService
from bailanysta.services.errors import ServiceError, from_storage_error
from bailanysta.services.post_service import PostService
from bailanysta.services.reaction_service import ReactionService
from bailanysta.services.search_service import SearchService
from bailanysta.services.user_service import UserService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline security headers for a JSON-only API."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError):
        err = from_storage_error(exc)
        return JSONResponse(err.to_dict(), status_code=err.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            {"ok": False, "error": "BAD_REQUEST", "message": "Invalid request", "details": {"errors": errors}},
            status_code=400,
        )


def create_app(storage: JsonStorage | None = None) -> FastAPI:
    """Build the app; tests pass their own storage pointed at a temp file."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Bailanysta API", version=settings.app_version)
    storage = storage or get_storage()

    app.state.storage = storage
    app.state.started_at = time.monotonic()
    app.state.post_service = PostService(storage)
    app.state.comment_service = CommentService(storage)
    app.state.reaction_service = ReactionService(storage)
    app.state.user_service = UserService(storage)
    app.state.search_service = SearchService(
        storage,
        cache_ttl_seconds=settings.search_cache_ttl_seconds,
        max_entries=settings.search_cache_max_entries,
        half_life_days=settings.hashtag_half_life_days,
    )
    app.state.analytics_service = AnalyticsService()

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(DEV_ORIGINS)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _install_error_handlers(app)

    app.include_router(posts_router.router)
    app.include_router(comments_router.router)
    app.include_router(reactions_router.router)
    app.include_router(search_router.router)
    app.include_router(users_router.router)
    app.include_router(analytics_router.router)
    app.include_router(health_router.router)

    logger.info("Bailanysta API ready (env=%s, data=%s)", settings.app_env, storage.data_file)
    return app


app = create_app()
