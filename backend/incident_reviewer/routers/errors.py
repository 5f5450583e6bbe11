"""Translation of service errors into HTTP errors shared by all routers."""

import logging
from typing import List

from fastapi import HTTPException, status
from pydantic import BaseModel

from incident_reviewer.errors import (
    DuplicateBindingError,
    EntityValidationError,
    NotBoundError,
    NotFoundError,
    ReviewerError,
)

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Response model for error messages."""

    detail: str


class FieldErrorResponse(BaseModel):
    """A single failing field."""

    field: str
    message: str


class ValidationDetail(BaseModel):
    message: str
    errors: List[FieldErrorResponse]


class ValidationErrorResponse(BaseModel):
    """Response model for a record that failed validation."""

    detail: ValidationDetail


def to_http_exception(err: ReviewerError) -> HTTPException:
    """Map a service error to the HTTP error for its original kind."""
    validation = err.find(EntityValidationError)
    if validation is not None:
        return HTTPException(
            status_code=422,
            detail={
                "message": str(err),
                "errors": [
                    {"field": e.field, "message": e.message}
                    for e in validation.field_errors
                ],
            },
        )

    if err.is_kind(NotFoundError) or err.is_kind(NotBoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))

    if err.is_kind(DuplicateBindingError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err))

    logger.error(f"Unexpected service error: {err}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An internal error occurred. Please try again later.",
    )
