"""Trigger catalog entry."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional

from incident_reviewer.ids import NIL_ID, uuid7
from incident_reviewer.validation import RequiredID, RequiredName, RequiredStr


@dataclass(frozen=True)
class Trigger:
    """What kicked off an incident, e.g. a traffic increase or a deploy."""
    KIND: ClassVar[str] = "trigger"

    id: RequiredID = NIL_ID
    name: RequiredName = ""
    description: RequiredStr = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, **fields) -> "Trigger":
        return cls(id=uuid7(), **fields)
