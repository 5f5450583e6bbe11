"""Entity records for the Incident Reviewer.

This module exports the records persisted by the services and the
timestamp helpers shared by them.
"""

from incident_reviewer.entities.base import stamp, utcnow
from incident_reviewer.entities.cause import Cause
from incident_reviewer.entities.review import Review, ReviewCause, ReviewTrigger
from incident_reviewer.entities.trigger import Trigger

__all__ = [
    # Records
    "Cause",
    "Trigger",
    "Review",
    "ReviewCause",
    "ReviewTrigger",
    # Lifecycle
    "stamp",
    "utcnow",
]
