"""Relational entity storage backed by SQLAlchemy.

Each operation opens its own session and, for writes, its own transaction.
Rows are converted to and from the immutable entity records at the edge so
nothing outside this module sees an ORM object.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Type, TypeVar
from uuid import UUID

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incident_reviewer.entities import Cause, Review, ReviewCause, ReviewTrigger, Trigger
from incident_reviewer.errors import MissingIdentifierError, NotFoundError, StorageError
from incident_reviewer.ids import Identified, is_nil, newest_first
from incident_reviewer.models import CauseRow, ReviewCauseRow, ReviewRow, ReviewTriggerRow, TriggerRow

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Identified)
R = TypeVar("R")

_cause_snapshot = TypeAdapter(Cause)
_trigger_snapshot = TypeAdapter(Trigger)


class SqlStore(Generic[E, R]):
    """Store for one entity type in a relational database.

    Args:
        kind: Entity kind used in error messages.
        row_type: The ORM model the entity is persisted as.
        to_row: Converts an entity to a new (detached) row.
        from_row: Converts a loaded row back to an entity.
        session_maker: Session factory bound to the application's engine.
    """

    def __init__(
        self,
        kind: str,
        row_type: Type[R],
        to_row: Callable[[E], R],
        from_row: Callable[[R], E],
        session_maker: async_sessionmaker[AsyncSession],
    ):
        self._kind = kind
        self._row_type = row_type
        self._to_row = to_row
        self._from_row = from_row
        self._session_maker = session_maker

    @property
    def kind(self) -> str:
        return self._kind

    async def save(self, entity: E) -> E:
        if is_nil(entity.id):
            raise MissingIdentifierError(self._kind)

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    # merge upserts by primary key, children included
                    await session.merge(self._to_row(entity))
        except SQLAlchemyError as e:
            raise StorageError(f"failed to save {self._kind} {entity.id}: {e}") from e

        logger.debug(f"Stored {self._kind} {entity.id}")
        return entity

    async def get(self, entity_id: UUID) -> E:
        try:
            async with self._session_maker() as session:
                row = await session.get(self._row_type, entity_id)
                if row is not None:
                    return self._from_row(row)
        except SQLAlchemyError as e:
            raise StorageError(f"failed to get {self._kind} {entity_id}: {e}") from e

        raise NotFoundError(self._kind, entity_id)

    async def all(self) -> List[E]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(self._row_type))
                entities = [self._from_row(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageError(f"failed to list {self._kind}: {e}") from e

        return newest_first(entities)


# Row conversions

def cause_to_row(cause: Cause) -> CauseRow:
    return CauseRow(
        id=cause.id,
        name=cause.name,
        description=cause.description,
        category=cause.category,
        created_at=cause.created_at,
        updated_at=cause.updated_at,
    )


def cause_from_row(row: CauseRow) -> Cause:
    return Cause(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def trigger_to_row(trigger: Trigger) -> TriggerRow:
    return TriggerRow(
        id=trigger.id,
        name=trigger.name,
        description=trigger.description,
        created_at=trigger.created_at,
        updated_at=trigger.updated_at,
    )


def trigger_from_row(row: TriggerRow) -> Trigger:
    return Trigger(
        id=row.id,
        name=row.name,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _snapshot(adapter: TypeAdapter, record: Any) -> Dict[str, Any]:
    return adapter.dump_python(record, mode="json")


def review_to_row(review: Review) -> ReviewRow:
    return ReviewRow(
        id=review.id,
        url=review.url,
        title=review.title,
        description=review.description,
        impact=review.impact,
        where=review.where,
        report_proximal_cause=review.report_proximal_cause,
        report_trigger=review.report_trigger,
        created_at=review.created_at,
        updated_at=review.updated_at,
        causes=[
            ReviewCauseRow(
                id=binding.id,
                review_id=review.id,
                position=position,
                cause_id=binding.cause.id,
                cause=_snapshot(_cause_snapshot, binding.cause),
                why=binding.why,
                is_proximal_cause=binding.is_proximal_cause,
            )
            for position, binding in enumerate(review.bound_causes)
        ],
        triggers=[
            ReviewTriggerRow(
                id=binding.id,
                review_id=review.id,
                position=position,
                trigger_id=binding.trigger.id,
                trigger=_snapshot(_trigger_snapshot, binding.trigger),
                why=binding.why,
            )
            for position, binding in enumerate(review.bound_triggers)
        ],
    )


def review_from_row(row: ReviewRow) -> Review:
    return Review(
        id=row.id,
        url=row.url,
        title=row.title,
        description=row.description,
        impact=row.impact,
        where=row.where,
        report_proximal_cause=row.report_proximal_cause,
        report_trigger=row.report_trigger,
        created_at=row.created_at,
        updated_at=row.updated_at,
        bound_causes=tuple(
            ReviewCause(
                id=c.id,
                cause=_cause_snapshot.validate_python(c.cause),
                why=c.why,
                is_proximal_cause=c.is_proximal_cause,
            )
            for c in row.causes
        ),
        bound_triggers=tuple(
            ReviewTrigger(
                id=t.id,
                trigger=_trigger_snapshot.validate_python(t.trigger),
                why=t.why,
            )
            for t in row.triggers
        ),
    )


def cause_store(session_maker: async_sessionmaker[AsyncSession]) -> SqlStore[Cause, CauseRow]:
    return SqlStore(Cause.KIND, CauseRow, cause_to_row, cause_from_row, session_maker)


def trigger_store(session_maker: async_sessionmaker[AsyncSession]) -> SqlStore[Trigger, TriggerRow]:
    return SqlStore(Trigger.KIND, TriggerRow, trigger_to_row, trigger_from_row, session_maker)


def review_store(session_maker: async_sessionmaker[AsyncSession]) -> SqlStore[Review, ReviewRow]:
    return SqlStore(Review.KIND, ReviewRow, review_to_row, review_from_row, session_maker)
