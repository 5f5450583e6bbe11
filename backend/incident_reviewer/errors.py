"""Error taxonomy for the Incident Reviewer.

Every layer adds context by raising a new exception ``from`` the one it
caught. The original kind stays reachable through the ``__cause__`` chain,
so callers test for it with :func:`find` (or :meth:`ReviewerError.find`)
instead of matching message text.
"""

from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar
from uuid import UUID

ErrT = TypeVar("ErrT", bound=BaseException)


def find(err: BaseException, kind: Type[ErrT]) -> Optional[ErrT]:
    """Walk ``err`` and its ``__cause__`` chain and return the first ``kind``."""
    current: Optional[BaseException] = err
    seen = set()
    while current is not None and id(current) not in seen:
        if isinstance(current, kind):
            return current
        seen.add(id(current))
        current = current.__cause__
    return None


class ReviewerError(Exception):
    """Base exception for every error raised by the Incident Reviewer."""

    def find(self, kind: Type[ErrT]) -> Optional[ErrT]:
        return find(self, kind)

    def is_kind(self, kind: Type[BaseException]) -> bool:
        return find(self, kind) is not None


@dataclass(frozen=True)
class FieldError:
    """A single failing field from validation."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class EntityValidationError(ReviewerError):
    """Raised when an entity fails its required-field rules.

    Validation is all-or-nothing: nothing has been stored when this is raised.
    """

    def __init__(self, kind: str, field_errors: List[FieldError]):
        self.kind = kind
        self.field_errors = list(field_errors)
        details = "; ".join(str(e) for e in self.field_errors)
        super().__init__(f"{kind} has {len(self.field_errors)} invalid field(s): {details}")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.field_errors]


class NotFoundError(ReviewerError):
    """Raised when the requested identifier isn't in the store."""

    def __init__(self, kind: str, entity_id: UUID):
        self.kind = kind
        self.id = entity_id
        super().__init__(f"{kind} not found by id: {entity_id}")


class MissingIdentifierError(ReviewerError):
    """Raised when saving an entity whose identifier is the nil UUID."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"can't store {kind} because ID is not set")


class DuplicateBindingError(ReviewerError):
    """Raised when binding a cause or trigger that is already bound to a review."""

    def __init__(self, kind: str, entity_id: UUID, review_id: UUID):
        self.kind = kind
        self.id = entity_id
        self.review_id = review_id
        super().__init__(f"{kind} {entity_id} is already bound to review {review_id}")


class NotBoundError(ReviewerError):
    """Raised when a binding expected on a review doesn't exist."""

    def __init__(self, kind: str, entity_id: UUID, review_id: UUID):
        self.kind = kind
        self.id = entity_id
        self.review_id = review_id
        super().__init__(f"{kind} {entity_id} isn't bound to review {review_id}")


class StorageError(ReviewerError):
    """Raised when the storage backend fails for a reason other than not-found."""
    pass


class ServiceError(ReviewerError):
    """Raised by the service layer to add operation context to a lower error."""
    pass
