"""Contributing cause catalog entry."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional

from incident_reviewer.ids import NIL_ID, uuid7
from incident_reviewer.validation import RequiredCategory, RequiredID, RequiredName, RequiredStr


@dataclass(frozen=True)
class Cause:
    """A reusable category of root cause that can be bound to reviews.

    Attributes:
        id: Time-ordered identifier, nil until created with :meth:`new`.
        name: Short name shown when picking a cause.
        description: What the cause covers and when it applies.
        category: Grouping used when listing causes.
        created_at: Set on first save.
        updated_at: Advanced on every save.
    """
    KIND: ClassVar[str] = "contributing cause"

    id: RequiredID = NIL_ID
    name: RequiredName = ""
    description: RequiredStr = ""
    category: RequiredCategory = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, **fields) -> "Cause":
        """Create an unsaved cause with a fresh identifier."""
        return cls(id=uuid7(), **fields)
