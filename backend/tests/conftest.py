"""Shared fixtures for the Incident Reviewer tests."""

from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID

import pytest

from incident_reviewer.entities import Cause, Review, Trigger
from incident_reviewer.services import CauseService, ReviewService, TriggerService
from incident_reviewer.storage import MemoryStore
from incident_reviewer.validation import Validator


SAVED_AT = datetime(2024, 12, 17, 18, 50, 2, 132300, tzinfo=timezone.utc)


@pytest.fixture
def validator():
    return Validator()


@pytest.fixture
def cause():
    """A catalog cause ready to be saved."""
    return Cause.new(
        name="Third party outage",
        description="A third party had an outage that led to an incident on our side",
        category="Design",
    )


@pytest.fixture
def other_cause():
    return Cause.new(
        name="Missing alert",
        description="Nobody was told the system was degrading",
        category="Observability",
    )


@pytest.fixture
def trigger():
    """A catalog trigger ready to be saved."""
    return Trigger.new(name="Traffic increase", description="More users than normal")


@pytest.fixture
def valid_review():
    """A review with every required field filled in, never saved."""
    return Review(
        id=UUID("0193dd86-b07e-7e73-a77e-724bee1fa176"),
        url="https://example.com/reviews/1",
        title="Something",
        description="At the bottom of the sea",
        impact="did a bunch of things",
        where="At land",
        report_proximal_cause="Broken",
        report_trigger="Special operation",
    )


@pytest.fixture
def saved_review(valid_review):
    """The valid review as it looks after its first save."""
    return replace(valid_review, created_at=SAVED_AT, updated_at=SAVED_AT)


@pytest.fixture
def memory_services(validator):
    """Catalog and review services over fresh in-memory stores."""
    cause_service = CauseService(MemoryStore[Cause](Cause.KIND), validator)
    trigger_service = TriggerService(MemoryStore[Trigger](Trigger.KIND), validator)
    review_service = ReviewService(
        MemoryStore[Review](Review.KIND),
        cause_service,
        trigger_service,
        validator,
    )
    return cause_service, trigger_service, review_service
