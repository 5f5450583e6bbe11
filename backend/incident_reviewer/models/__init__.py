"""Database models package for SQLAlchemy ORM.

This module exports all SQLAlchemy models used by the relational storage
backend of the Incident Reviewer.
"""

from incident_reviewer.models.cause import CauseRow
from incident_reviewer.models.review import ReviewCauseRow, ReviewRow, ReviewTriggerRow
from incident_reviewer.models.trigger import TriggerRow

__all__ = [
    "CauseRow",
    "TriggerRow",
    "ReviewRow",
    "ReviewCauseRow",
    "ReviewTriggerRow",
]
