"""Domain exceptions raised by services and translated to HTTP by endpoints."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ContentValidationError(Exception):
    """Raised when a request is well-formed but violates a content rule."""


class EntityNotFoundError(Exception):
    """Raised when a requested or referenced entity does not exist."""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when a write would violate a uniqueness constraint."""

    def __init__(self, entity_type: str, field: str, value):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Answer unexpected storage failures with a generic message plus detail."""
    logger.error(
        f"Database error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Database error", "error": str(exc)},
    )
