"""Entity storage backends.

The in-memory backend has no dependencies beyond the entities. The
relational backend lives in :mod:`incident_reviewer.storage.sql` and is only
imported when it is configured.
"""

from incident_reviewer.storage.base import EntityStore
from incident_reviewer.storage.memory import MemoryStore

__all__ = [
    "EntityStore",
    "MemoryStore",
]
