"""Review service: persistence of reviews and binding of causes and triggers.

The service only collaborates: it loads what it needs, hands the business
logic to a :class:`ReviewActions` strategy, and stores the result. Swapping
the strategy lets tests check the collaboration without the logic.
"""

import logging
from dataclasses import replace
from typing import Optional, Protocol
from uuid import UUID

from incident_reviewer.entities import Cause, Review, ReviewCause, ReviewTrigger, Trigger, stamp
from incident_reviewer.errors import EntityValidationError, ReviewerError, ServiceError
from incident_reviewer.services.catalog import EntityService
from incident_reviewer.storage.base import EntityStore
from incident_reviewer.validation import Validator

logger = logging.getLogger(__name__)


class CauseLookup(Protocol):
    async def get(self, cause_id: UUID) -> Cause:
        ...


class TriggerLookup(Protocol):
    async def get(self, trigger_id: UUID) -> Trigger:
        ...


class ReviewActions:
    """Business steps the ReviewService runs on the Review aggregate.

    Each step takes the loaded objects and returns a new Review, raising a
    ReviewerError when the step isn't allowed.
    """

    def __init__(self, validator: Validator):
        self._validator = validator

    def prepare_save(self, review: Review) -> Review:
        """Validate the review and set its timestamps for saving."""
        self._validator.validate(review)
        return stamp(review)

    def bind_cause(self, review: Review, cause: Cause, binding: ReviewCause) -> Review:
        """Attach ``cause`` to ``binding`` and add it to the review."""
        return review.bind_cause(replace(binding, cause=cause))

    def update_bound_cause(self, review: Review, cause: Cause, binding: ReviewCause) -> Review:
        """Replace the existing binding for ``cause`` with ``binding``."""
        return review.update_bound_cause(replace(binding, cause=cause))

    def bind_trigger(self, review: Review, trigger: Trigger, binding: ReviewTrigger) -> Review:
        """Attach ``trigger`` to ``binding`` and add it to the review."""
        return review.bind_trigger(replace(binding, trigger=trigger))


class ReviewService(EntityService[Review]):
    """Service orchestrating reviews and their association with the catalogs.

    Binding a cause touches two stores without a transaction across them:
    the catalog is only read, and the review is changed on an immutable copy
    that is written in a single save at the end. If that save fails nothing
    has changed and the caller can retry.

    Usage:
        service = ReviewService(review_store, cause_service, trigger_service, Validator())
        review = await service.save(Review.new(url=..., title=..., ...))
        review = await service.add_contributing_cause(review.id, cause.id, "why it applied")
    """

    kind = Review.KIND

    def __init__(
        self,
        store: EntityStore[Review],
        causes: CauseLookup,
        triggers: TriggerLookup,
        validator: Validator,
        actions: Optional[ReviewActions] = None,
    ):
        super().__init__(store, validator)
        self._causes = causes
        self._triggers = triggers
        self._actions = actions if actions is not None else ReviewActions(validator)

    async def save(self, review: Review) -> Review:
        try:
            review = self._actions.prepare_save(review)
        except EntityValidationError as e:
            raise ServiceError(f"failed to validate review: {e}") from e

        try:
            saved = await self._store.save(review)
        except ReviewerError as e:
            raise ServiceError(f"failed to store review: {e}") from e

        logger.info(f"Saved review {saved.id}")
        return saved

    async def update(self, review_id: UUID, changes: Review) -> Review:
        """Merge the non-empty editable fields of ``changes`` into the stored review."""
        review = await self._load(review_id, "to update")
        return await self.save(review.update(changes))

    async def add_contributing_cause(
        self,
        review_id: UUID,
        cause_id: UUID,
        why: str,
        is_proximal_cause: bool = False,
    ) -> Review:
        """Bind a catalog cause to a review.

        The cause is copied into the binding as it is right now.

        Returns:
            The saved review with the new binding last.

        Raises:
            ServiceError: from NotFoundError when either the review or the
                cause doesn't exist, from DuplicateBindingError when the
                cause is already bound, or from the save.
        """
        review = await self._load(review_id, "to bind contributing cause")

        try:
            cause = await self._causes.get(cause_id)
        except ReviewerError as e:
            raise ServiceError(f"failed to get contributing cause: {e}") from e

        binding = ReviewCause(why=why, is_proximal_cause=is_proximal_cause)
        try:
            review = self._actions.bind_cause(review, cause, binding)
        except ReviewerError as e:
            raise ServiceError(f"action to bind contributing cause failed: {e}") from e

        saved = await self.save(review)
        logger.info(f"Bound contributing cause {cause.id} to review {review_id}")
        return saved

    async def get_bound_cause(self, review_id: UUID, binding_id: UUID) -> ReviewCause:
        review = await self._load(review_id, "to relate bound contributing cause")

        try:
            return review.bound_cause(binding_id)
        except ReviewerError as e:
            raise ServiceError(f"review doesn't have that contributing cause bound: {e}") from e

    async def update_bound_contributing_cause(self, review_id: UUID, binding: ReviewCause) -> ReviewCause:
        """Update an existing binding, matched by its cause, in place.

        The cause is fetched again from the catalog, so the binding's copy
        is refreshed with its current details.

        Raises:
            ServiceError: from NotFoundError when the review or cause doesn't
                exist, or from NotBoundError when the cause isn't bound.
        """
        review = await self._load(review_id, "to update bound contributing cause")

        try:
            cause = await self._causes.get(binding.cause.id)
        except ReviewerError as e:
            raise ServiceError(f"failed to get contributing cause: {e}") from e

        try:
            review = self._actions.update_bound_cause(review, cause, binding)
        except ReviewerError as e:
            raise ServiceError(f"action to update bound contributing cause failed: {e}") from e

        saved = await self.save(review)
        updated = saved.bound_cause_for(cause.id)
        if updated is None:
            raise ServiceError(f"saved review {review_id} lost the binding for contributing cause {cause.id}")

        logger.info(f"Updated contributing cause {cause.id} bound to review {review_id}")
        return updated

    async def bind_trigger(self, review_id: UUID, trigger_id: UUID, why: str) -> Review:
        """Bind a catalog trigger to a review."""
        review = await self._load(review_id, "to bind trigger")

        try:
            trigger = await self._triggers.get(trigger_id)
        except ReviewerError as e:
            raise ServiceError(f"failed to get trigger: {e}") from e

        try:
            review = self._actions.bind_trigger(review, trigger, ReviewTrigger(why=why))
        except ReviewerError as e:
            raise ServiceError(f"action to bind trigger failed: {e}") from e

        saved = await self.save(review)
        logger.info(f"Bound trigger {trigger.id} to review {review_id}")
        return saved

    async def _load(self, review_id: UUID, purpose: str) -> Review:
        try:
            return await self._store.get(review_id)
        except ReviewerError as e:
            raise ServiceError(f"failed to get review {purpose}: {e}") from e
