"""Services package for the Incident Reviewer business logic."""

from incident_reviewer.services.catalog import CauseService, EntityService, TriggerService
from incident_reviewer.services.reviewing import ReviewActions, ReviewService

__all__ = [
    "EntityService",
    "CauseService",
    "TriggerService",
    "ReviewActions",
    "ReviewService",
]
