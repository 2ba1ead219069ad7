"""Service-level exceptions and the mapping from storage failures."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from bailanysta.repositories.json_storage import POST_NOT_FOUND, VALIDATION_FAILED, StorageError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[dict] = None, detail_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.detail_code = detail_code

    def to_dict(self) -> dict:
        body = {"ok": False, "error": self.code, "message": self.message}
        if self.detail_code:
            body["detailCode"] = self.detail_code
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(ServiceError):
    code = "BAD_REQUEST"
    status_code = 400


class ForbiddenError(ServiceError):
    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    status_code = 404


class InternalServerError(ServiceError):
    pass


def from_storage_error(exc: StorageError) -> ServiceError:
    if exc.code == POST_NOT_FOUND:
        return NotFoundError("Post not found")
    if exc.code == VALIDATION_FAILED:
        return BadRequestError(exc.message, details=exc.details)
    logger.error("Storage failure %s: %s", exc.code, exc.message)
    return InternalServerError(exc.message, detail_code=exc.code)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise storage failures as service errors; anything unexpected becomes a 500."""
    try:
        yield
    except ServiceError:
        raise
    except StorageError as exc:
        raise from_storage_error(exc) from exc
    except Exception as exc:
        logger.error("Unexpected error while trying to %s", action, exc_info=True)
        raise InternalServerError(f"Failed to {action}") from exc
