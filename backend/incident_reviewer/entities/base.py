"""Shared lifecycle helpers for entity records."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, TypeVar

# Smallest step a datetime can take; keeps UpdatedAt strictly increasing
_TICK = timedelta(microseconds=1)


class Timestamped(Protocol):
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


T = TypeVar("T", bound=Timestamped)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stamp(record: T, now: Optional[datetime] = None) -> T:
    """Return a copy of ``record`` with its timestamps set for a save.

    A record that was never saved gets ``created_at == updated_at == now``.
    A previously saved record keeps ``created_at`` and gets an ``updated_at``
    strictly later than both ``created_at`` and its previous ``updated_at``.
    """
    if now is None:
        now = utcnow()

    if record.created_at is None:
        return replace(record, created_at=now, updated_at=now)

    latest = record.created_at
    if record.updated_at is not None and record.updated_at > latest:
        latest = record.updated_at

    return replace(record, updated_at=max(now, latest + _TICK))
