"""Storage contract shared by every backend."""

from typing import List, Protocol, TypeVar
from uuid import UUID

E = TypeVar("E")


class EntityStore(Protocol[E]):
    """Keyed storage for one entity type.

    Every backend must behave identically so services can swap them freely:

    - ``save`` raises ``MissingIdentifierError`` for a nil id, otherwise
      upserts by id and returns the entity unchanged.
    - ``get`` raises ``NotFoundError`` when the id isn't stored.
    - ``all`` returns every entity, most recently created first, and an
      empty list when nothing is stored.
    """

    async def save(self, entity: E) -> E:
        ...

    async def get(self, entity_id: UUID) -> E:
        ...

    async def all(self) -> List[E]:
        ...
