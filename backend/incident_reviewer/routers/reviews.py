"""Incident review API routes.

This module provides FastAPI endpoints for reviews:
- List, create, show and update reviews
- Bind contributing causes to a review and update those bindings
- Bind triggers to a review
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from incident_reviewer.dependencies import get_cause_service, get_review_service, get_trigger_service
from incident_reviewer.entities import Review
from incident_reviewer.errors import ReviewerError
from incident_reviewer.routers.causes import CauseResponse
from incident_reviewer.routers.errors import ErrorResponse, ValidationErrorResponse, to_http_exception
from incident_reviewer.routers.triggers import TriggerResponse
from incident_reviewer.services import CauseService, ReviewService, TriggerService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


# Pydantic Models

class ReviewCauseResponse(BaseModel):
    """Response model for a contributing cause bound to a review."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cause: CauseResponse
    why: str
    is_proximal_cause: bool


class ReviewTriggerResponse(BaseModel):
    """Response model for a trigger bound to a review."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trigger: TriggerResponse
    why: str


class ReviewResponse(BaseModel):
    """Response model for a review."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    title: str
    description: str
    impact: str
    where: str
    report_proximal_cause: str
    report_trigger: str
    created_at: datetime
    updated_at: datetime
    bound_causes: List[ReviewCauseResponse] = Field(default_factory=list)
    bound_triggers: List[ReviewTriggerResponse] = Field(default_factory=list)


class ReviewDetailResponse(BaseModel):
    """Response model for a review with the catalog entries still available to bind."""

    review: ReviewResponse
    available_causes: List[CauseResponse] = Field(default_factory=list)
    available_triggers: List[TriggerResponse] = Field(default_factory=list)


class ReviewRequest(BaseModel):
    """Request model for creating or updating a review.

    On update, empty fields leave the stored value unchanged.
    """

    url: str = Field("", description="Absolute link to the incident report")
    title: str = Field("", description="Short title of the incident")
    description: str = Field("", description="What happened")
    impact: str = Field("", description="Who or what was affected")
    where: str = Field("", description="Where the incident happened")
    report_proximal_cause: str = Field("", description="Proximal cause as written in the report")
    report_trigger: str = Field("", description="Trigger as written in the report")

    def to_review(self) -> Review:
        return Review(**self.model_dump())


class BindCauseRequest(BaseModel):
    """Request model for binding a contributing cause to a review."""

    cause_id: UUID = Field(..., description="ID of the catalog cause to bind")
    why: str = Field("", description="Why the cause applied to this incident")
    is_proximal_cause: bool = Field(False, description="Whether this is the proximal cause")


class UpdateBoundCauseRequest(BaseModel):
    """Request model for updating a bound contributing cause."""

    why: str = Field("", description="Why the cause applied to this incident")
    is_proximal_cause: bool = Field(False, description="Whether this is the proximal cause")


class BindTriggerRequest(BaseModel):
    """Request model for binding a trigger to a review."""

    trigger_id: UUID = Field(..., description="ID of the catalog trigger to bind")
    why: str = Field("", description="Why the trigger applied to this incident")


# API Endpoints

@router.get(
    "",
    response_model=List[ReviewResponse],
    summary="List all reviews",
    description="Retrieve every review, most recently created first.",
)
async def list_reviews(
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewResponse]:
    try:
        reviews = await service.all()
    except ReviewerError as e:
        raise to_http_exception(e)

    return [ReviewResponse.model_validate(review) for review in reviews]


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationErrorResponse, "description": "Missing or invalid fields"},
    },
    summary="Create a review",
)
async def create_review(
    data: ReviewRequest,
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = Review.new(**data.model_dump())

    try:
        review = await service.save(review)
    except ReviewerError as e:
        raise to_http_exception(e)

    logger.info(f"Review '{review.title}' created (ID: {review.id})")
    return ReviewResponse.model_validate(review)


@router.get(
    "/{review_id}",
    response_model=ReviewDetailResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Review not found"},
    },
    summary="Get review details",
    description=(
        "Retrieve a review with its bindings and the catalog entries that "
        "aren't bound to it yet."
    ),
)
async def get_review(
    review_id: UUID,
    service: ReviewService = Depends(get_review_service),
    causes: CauseService = Depends(get_cause_service),
    triggers: TriggerService = Depends(get_trigger_service),
) -> ReviewDetailResponse:
    try:
        review = await service.get(review_id)
    except ReviewerError as e:
        raise to_http_exception(e)

    # The catalogs only help picking what to bind next; show the review without them
    try:
        all_causes = await causes.all()
    except ReviewerError as e:
        logger.warning(f"Failed to list contributing causes for review {review_id}: {e}")
        all_causes = []

    try:
        all_triggers = await triggers.all()
    except ReviewerError as e:
        logger.warning(f"Failed to list triggers for review {review_id}: {e}")
        all_triggers = []

    bound_cause_ids = {b.cause.id for b in review.bound_causes}
    bound_trigger_ids = {b.trigger.id for b in review.bound_triggers}

    return ReviewDetailResponse(
        review=ReviewResponse.model_validate(review),
        available_causes=[
            CauseResponse.model_validate(c) for c in all_causes if c.id not in bound_cause_ids
        ],
        available_triggers=[
            TriggerResponse.model_validate(t) for t in all_triggers if t.id not in bound_trigger_ids
        ],
    )


@router.patch(
    "/{review_id}",
    response_model=ReviewResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Review not found"},
        422: {"model": ValidationErrorResponse, "description": "Invalid fields"},
    },
    summary="Update a review",
    description="Update the non-empty fields of a review.",
)
async def update_review(
    review_id: UUID,
    data: ReviewRequest,
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await service.update(review_id, data.to_review())
    except ReviewerError as e:
        raise to_http_exception(e)

    logger.info(f"Review '{review.title}' (ID: {review_id}) updated")
    return ReviewResponse.model_validate(review)


@router.post(
    "/{review_id}/causes",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Review or cause not found"},
        409: {"model": ErrorResponse, "description": "Cause already bound"},
        422: {"model": ValidationErrorResponse, "description": "Missing reason"},
    },
    summary="Bind a contributing cause to a review",
)
async def bind_cause(
    review_id: UUID,
    data: BindCauseRequest,
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await service.add_contributing_cause(
            review_id,
            data.cause_id,
            data.why,
            is_proximal_cause=data.is_proximal_cause,
        )
    except ReviewerError as e:
        raise to_http_exception(e)

    return ReviewResponse.model_validate(review)


@router.get(
    "/{review_id}/causes/{binding_id}",
    response_model=ReviewCauseResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Review or binding not found"},
    },
    summary="Get a bound contributing cause",
)
async def get_bound_cause(
    review_id: UUID,
    binding_id: UUID,
    service: ReviewService = Depends(get_review_service),
) -> ReviewCauseResponse:
    try:
        binding = await service.get_bound_cause(review_id, binding_id)
    except ReviewerError as e:
        raise to_http_exception(e)

    return ReviewCauseResponse.model_validate(binding)


@router.put(
    "/{review_id}/causes/{binding_id}",
    response_model=ReviewCauseResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Review or binding not found"},
        422: {"model": ValidationErrorResponse, "description": "Missing reason"},
    },
    summary="Update a bound contributing cause",
)
async def update_bound_cause(
    review_id: UUID,
    binding_id: UUID,
    data: UpdateBoundCauseRequest,
    service: ReviewService = Depends(get_review_service),
) -> ReviewCauseResponse:
    try:
        existing = await service.get_bound_cause(review_id, binding_id)
        binding = await service.update_bound_contributing_cause(
            review_id,
            replace(existing, why=data.why, is_proximal_cause=data.is_proximal_cause),
        )
    except ReviewerError as e:
        raise to_http_exception(e)

    return ReviewCauseResponse.model_validate(binding)


@router.post(
    "/{review_id}/triggers",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Review or trigger not found"},
        409: {"model": ErrorResponse, "description": "Trigger already bound"},
        422: {"model": ValidationErrorResponse, "description": "Missing reason"},
    },
    summary="Bind a trigger to a review",
)
async def bind_trigger(
    review_id: UUID,
    data: BindTriggerRequest,
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await service.bind_trigger(review_id, data.trigger_id, data.why)
    except ReviewerError as e:
        raise to_http_exception(e)

    return ReviewResponse.model_validate(review)
