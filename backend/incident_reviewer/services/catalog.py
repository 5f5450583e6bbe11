"""Catalog services for contributing causes and triggers.

Both catalogs follow the same pattern: validate, set timestamps, store.
:class:`EntityService` implements it once; the concrete services only name
the entity kind.
"""

import logging
from typing import Generic, List, TypeVar
from uuid import UUID

from incident_reviewer.entities import Cause, Trigger, stamp
from incident_reviewer.errors import EntityValidationError, ReviewerError, ServiceError
from incident_reviewer.storage.base import EntityStore
from incident_reviewer.validation import Validator

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EntityService(Generic[E]):
    """Business rules around a store for one entity type.

    Errors are raised as :class:`ServiceError` from the underlying error, so
    the original kind (validation, not found, missing id, storage) can be
    recovered with ``err.find(kind)``.
    """

    kind: str = "entity"

    def __init__(self, store: EntityStore[E], validator: Validator):
        self._store = store
        self._validator = validator

    async def save(self, entity: E) -> E:
        """Validate, timestamp and store the entity.

        Returns:
            The entity as stored, with ``created_at``/``updated_at`` set.

        Raises:
            ServiceError: from EntityValidationError when a required field
                is missing, or from the store's error when saving fails.
        """
        try:
            self._validator.validate(entity)
        except EntityValidationError as e:
            raise ServiceError(f"failed to validate {self.kind}: {e}") from e

        entity = stamp(entity)

        try:
            saved = await self._store.save(entity)
        except ReviewerError as e:
            raise ServiceError(f"failed to store {self.kind}: {e}") from e

        logger.info(f"Saved {self.kind} {saved.id}")
        return saved

    async def get(self, entity_id: UUID) -> E:
        try:
            return await self._store.get(entity_id)
        except ReviewerError as e:
            raise ServiceError(f"failed to get {self.kind}: {e}") from e

    async def all(self) -> List[E]:
        try:
            return await self._store.all()
        except ReviewerError as e:
            raise ServiceError(f"unable to get all {self.kind}s from storage: {e}") from e


class CauseService(EntityService[Cause]):
    """Service for the contributing cause catalog."""
    kind = Cause.KIND


class TriggerService(EntityService[Trigger]):
    """Service for the trigger catalog."""
    kind = Trigger.KIND
