"""Review aggregate and its cause/trigger bindings.

A Review owns its bindings. Each binding holds a copy of the Cause or
Trigger taken when it was bound, not a live reference to the catalog.
All methods return a new Review; the receiver is never modified.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import ClassVar, Optional, Tuple
from uuid import UUID

from incident_reviewer.entities.cause import Cause
from incident_reviewer.entities.trigger import Trigger
from incident_reviewer.errors import DuplicateBindingError, NotBoundError
from incident_reviewer.ids import NIL_ID, is_nil, uuid7
from incident_reviewer.validation import AbsoluteURL, RequiredID, RequiredName, RequiredStr


@dataclass(frozen=True)
class ReviewCause:
    """A Cause bound to a Review with the reason it applied."""
    KIND: ClassVar[str] = "bound contributing cause"

    id: RequiredID = NIL_ID
    cause: Cause = field(default_factory=Cause)
    why: RequiredStr = ""
    is_proximal_cause: bool = False


@dataclass(frozen=True)
class ReviewTrigger:
    """A Trigger bound to a Review with the reason it applied."""
    KIND: ClassVar[str] = "bound trigger"

    id: RequiredID = NIL_ID
    trigger: Trigger = field(default_factory=Trigger)
    why: RequiredStr = ""


@dataclass(frozen=True)
class Review:
    """An incident review.

    Attributes:
        id: Time-ordered identifier, nil until created with :meth:`new`.
        url: Absolute link to the incident report.
        title: Short title of the incident.
        description: What happened.
        impact: Who or what was affected.
        where: Where the incident happened.
        report_proximal_cause: Proximal cause as written in the report.
        report_trigger: Trigger as written in the report.
        created_at: Set on first save.
        updated_at: Advanced on every save.
        bound_causes: Contributing causes, in the order they were bound.
        bound_triggers: Triggers, in the order they were bound.
    """
    KIND: ClassVar[str] = "review"
    EDITABLE_FIELDS: ClassVar[Tuple[str, ...]] = (
        "url",
        "title",
        "description",
        "impact",
        "where",
        "report_proximal_cause",
        "report_trigger",
    )

    id: RequiredID = NIL_ID
    url: AbsoluteURL = ""
    title: RequiredName = ""
    description: RequiredStr = ""
    impact: RequiredStr = ""
    where: RequiredStr = ""
    report_proximal_cause: RequiredStr = ""
    report_trigger: RequiredStr = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    bound_causes: Tuple[ReviewCause, ...] = ()
    bound_triggers: Tuple[ReviewTrigger, ...] = ()

    @classmethod
    def new(cls, **fields) -> "Review":
        """Create an unsaved review with a fresh identifier."""
        return cls(id=uuid7(), **fields)

    def update(self, changes: "Review") -> "Review":
        """Copy every non-empty editable field from ``changes``.

        Identity, timestamps and bindings are never taken from ``changes``.
        """
        updates = {}
        for name in self.EDITABLE_FIELDS:
            value = getattr(changes, name)
            if value:
                updates[name] = value
        return replace(self, **updates)

    def bound_cause_for(self, cause_id: UUID) -> Optional[ReviewCause]:
        for binding in self.bound_causes:
            if binding.cause.id == cause_id:
                return binding
        return None

    def bound_cause(self, binding_id: UUID) -> ReviewCause:
        """Return the binding with the given binding id.

        Raises:
            NotBoundError: if no binding on this review has that id.
        """
        for binding in self.bound_causes:
            if binding.id == binding_id:
                return binding
        raise NotBoundError(ReviewCause.KIND, binding_id, self.id)

    def bind_cause(self, binding: ReviewCause) -> "Review":
        """Append a cause binding.

        A binding without an id gets a fresh one. Binding a proximal cause
        unmarks every other binding as proximal.

        Raises:
            DuplicateBindingError: if the cause is already bound.
        """
        if self.bound_cause_for(binding.cause.id) is not None:
            raise DuplicateBindingError(Cause.KIND, binding.cause.id, self.id)

        if is_nil(binding.id):
            binding = replace(binding, id=uuid7())

        bindings = self.bound_causes + (binding,)
        if binding.is_proximal_cause:
            bindings = _single_proximal(bindings, len(bindings) - 1)

        return replace(self, bound_causes=bindings)

    def update_bound_cause(self, binding: ReviewCause) -> "Review":
        """Replace the binding for the same cause, keeping its list position.

        The existing binding id is kept when ``binding`` has none.

        Raises:
            NotBoundError: if the cause isn't bound to this review.
        """
        for index, existing in enumerate(self.bound_causes):
            if existing.cause.id == binding.cause.id:
                break
        else:
            raise NotBoundError(Cause.KIND, binding.cause.id, self.id)

        if is_nil(binding.id):
            binding = replace(binding, id=existing.id)

        bindings = list(self.bound_causes)
        bindings[index] = binding
        if binding.is_proximal_cause:
            bindings = _single_proximal(tuple(bindings), index)

        return replace(self, bound_causes=tuple(bindings))

    def bind_trigger(self, binding: ReviewTrigger) -> "Review":
        """Append a trigger binding.

        Raises:
            DuplicateBindingError: if the trigger is already bound.
        """
        for existing in self.bound_triggers:
            if existing.trigger.id == binding.trigger.id:
                raise DuplicateBindingError(Trigger.KIND, binding.trigger.id, self.id)

        if is_nil(binding.id):
            binding = replace(binding, id=uuid7())

        return replace(self, bound_triggers=self.bound_triggers + (binding,))


def _single_proximal(bindings: Tuple[ReviewCause, ...], keep: int) -> Tuple[ReviewCause, ...]:
    return tuple(
        b if i == keep or not b.is_proximal_cause else replace(b, is_proximal_cause=False)
        for i, b in enumerate(bindings)
    )
