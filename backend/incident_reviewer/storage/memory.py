"""In-memory entity storage."""

import asyncio
import logging
from typing import Dict, Generic, List, TypeVar
from uuid import UUID

from incident_reviewer.errors import MissingIdentifierError, NotFoundError
from incident_reviewer.ids import Identified, is_nil, newest_first

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Identified)


class MemoryStore(Generic[E]):
    """Map-backed store for one entity type.

    Entities are immutable records, so the stored value is handed out as is.
    Writes are serialized with a lock; reads see a consistent snapshot.

    Usage:
        store = MemoryStore[Cause](Cause.KIND)
        await store.save(cause)
        cause = await store.get(cause.id)
    """

    def __init__(self, kind: str):
        self._kind = kind
        self._data: Dict[UUID, E] = {}
        self._lock = asyncio.Lock()

    @property
    def kind(self) -> str:
        return self._kind

    async def save(self, entity: E) -> E:
        if is_nil(entity.id):
            raise MissingIdentifierError(self._kind)

        async with self._lock:
            self._data[entity.id] = entity

        logger.debug(f"Stored {self._kind} {entity.id}")
        return entity

    async def get(self, entity_id: UUID) -> E:
        try:
            return self._data[entity_id]
        except KeyError:
            raise NotFoundError(self._kind, entity_id) from None

    async def all(self) -> List[E]:
        # dict order is insertion order, not creation order; always sort
        return newest_first(list(self._data.values()))
