"""Time-ordered identifiers for persisted entities.

Every entity is keyed by a UUIDv7: the leading 48 bits hold the Unix epoch
milliseconds at creation, so sorting by identifier sorts by creation time.
Identifiers created within the same millisecond carry an increasing 12-bit
counter in the ``rand_a`` field, keeping them strictly ordered per process.
"""

import secrets
import threading
import time
from datetime import datetime, timezone
from typing import Iterable, List, Protocol, TypeVar
from uuid import UUID

NIL_ID = UUID(int=0)

_MAX_COUNTER = 0xFFF

_lock = threading.Lock()
_last_ms = 0
_counter = 0


class Identified(Protocol):
    id: UUID


E = TypeVar("E", bound=Identified)


def uuid7() -> UUID:
    """Generate a new UUIDv7 that sorts after every one generated before it."""
    global _last_ms, _counter

    with _lock:
        now_ms = time.time_ns() // 1_000_000
        if now_ms > _last_ms:
            _last_ms = now_ms
            # Start low enough that a burst in one millisecond has room to count
            _counter = secrets.randbits(10)
        else:
            _counter += 1
            if _counter > _MAX_COUNTER:
                _last_ms += 1
                _counter = 0
        unix_ms = _last_ms
        counter = _counter

    value = (unix_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= counter << 64
    value |= 0b10 << 62
    value |= secrets.randbits(62)
    return UUID(int=value)


def timestamp_ms(identifier: UUID) -> int:
    """Return the Unix epoch milliseconds embedded in a UUIDv7."""
    return identifier.int >> 80


def created_at(identifier: UUID) -> datetime:
    """Return the creation time embedded in a UUIDv7 as an aware datetime."""
    return datetime.fromtimestamp(timestamp_ms(identifier) / 1000, tz=timezone.utc)


def is_nil(identifier: UUID) -> bool:
    return identifier == NIL_ID


def newest_first(entities: Iterable[E]) -> List[E]:
    """Order entities by the creation time in their identifier, most recent first.

    The millisecond timestamp occupies the leading bits, so it is the primary
    key of the sort; the remaining bits (sub-millisecond counter, then random)
    only break ties.
    """
    return sorted(entities, key=lambda e: e.id.int, reverse=True)
