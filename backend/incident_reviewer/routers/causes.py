"""Contributing cause catalog API routes.

This module provides FastAPI endpoints for the contributing cause catalog:
- List all causes
- Create a cause
- Get cause details
"""

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from incident_reviewer.dependencies import get_cause_service
from incident_reviewer.entities import Cause
from incident_reviewer.errors import ReviewerError
from incident_reviewer.routers.errors import ErrorResponse, ValidationErrorResponse, to_http_exception
from incident_reviewer.services import CauseService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/causes", tags=["Causes"])


# Pydantic Models

class CauseResponse(BaseModel):
    """Response model for a contributing cause."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    category: str
    created_at: datetime
    updated_at: datetime


class CauseCreateRequest(BaseModel):
    """Request model for creating a contributing cause.

    Fields default to empty so that missing ones are reported together by
    the service's validation.
    """

    name: str = Field("", description="Short name of the cause")
    description: str = Field("", description="What the cause covers")
    category: str = Field("", description="Category the cause is grouped under")


# API Endpoints

@router.get(
    "",
    response_model=List[CauseResponse],
    summary="List all contributing causes",
    description="Retrieve every contributing cause, most recently created first.",
)
async def list_causes(
    service: CauseService = Depends(get_cause_service),
) -> List[CauseResponse]:
    try:
        causes = await service.all()
    except ReviewerError as e:
        raise to_http_exception(e)

    return [CauseResponse.model_validate(cause) for cause in causes]


@router.post(
    "",
    response_model=CauseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationErrorResponse, "description": "Missing required fields"},
    },
    summary="Create a contributing cause",
)
async def create_cause(
    data: CauseCreateRequest,
    service: CauseService = Depends(get_cause_service),
) -> CauseResponse:
    cause = Cause.new(
        name=data.name,
        description=data.description,
        category=data.category,
    )

    try:
        cause = await service.save(cause)
    except ReviewerError as e:
        raise to_http_exception(e)

    logger.info(f"Contributing cause '{cause.name}' created (ID: {cause.id})")
    return CauseResponse.model_validate(cause)


@router.get(
    "/{cause_id}",
    response_model=CauseResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Cause not found"},
    },
    summary="Get contributing cause details",
)
async def get_cause(
    cause_id: UUID,
    service: CauseService = Depends(get_cause_service),
) -> CauseResponse:
    try:
        cause = await service.get(cause_id)
    except ReviewerError as e:
        raise to_http_exception(e)

    return CauseResponse.model_validate(cause)
