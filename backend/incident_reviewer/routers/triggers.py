"""Trigger catalog API routes."""

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from incident_reviewer.dependencies import get_trigger_service
from incident_reviewer.entities import Trigger
from incident_reviewer.errors import ReviewerError
from incident_reviewer.routers.errors import ErrorResponse, ValidationErrorResponse, to_http_exception
from incident_reviewer.services import TriggerService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/triggers", tags=["Triggers"])


class TriggerResponse(BaseModel):
    """Response model for a trigger."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


class TriggerCreateRequest(BaseModel):
    """Request model for creating a trigger."""

    name: str = Field("", description="Short name of the trigger")
    description: str = Field("", description="What the trigger is")


@router.get(
    "",
    response_model=List[TriggerResponse],
    summary="List all triggers",
)
async def list_triggers(
    service: TriggerService = Depends(get_trigger_service),
) -> List[TriggerResponse]:
    try:
        triggers = await service.all()
    except ReviewerError as e:
        raise to_http_exception(e)

    return [TriggerResponse.model_validate(trigger) for trigger in triggers]


@router.post(
    "",
    response_model=TriggerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationErrorResponse, "description": "Missing required fields"},
    },
    summary="Create a trigger",
)
async def create_trigger(
    data: TriggerCreateRequest,
    service: TriggerService = Depends(get_trigger_service),
) -> TriggerResponse:
    trigger = Trigger.new(name=data.name, description=data.description)

    try:
        trigger = await service.save(trigger)
    except ReviewerError as e:
        raise to_http_exception(e)

    logger.info(f"Trigger '{trigger.name}' created (ID: {trigger.id})")
    return TriggerResponse.model_validate(trigger)


@router.get(
    "/{trigger_id}",
    response_model=TriggerResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Trigger not found"},
    },
    summary="Get trigger details",
)
async def get_trigger(
    trigger_id: UUID,
    service: TriggerService = Depends(get_trigger_service),
) -> TriggerResponse:
    try:
        trigger = await service.get(trigger_id)
    except ReviewerError as e:
        raise to_http_exception(e)

    return TriggerResponse.model_validate(trigger)
