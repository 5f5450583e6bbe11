"""Unit tests for the contributing cause and trigger catalog services."""

from dataclasses import replace
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from incident_reviewer.entities import Cause, Trigger
from incident_reviewer.errors import (
    EntityValidationError,
    MissingIdentifierError,
    NotFoundError,
    ServiceError,
    StorageError,
)
from incident_reviewer.services import CauseService, TriggerService


UNKNOWN_ID = UUID("0193dd86-b07e-7e73-a77e-0000000000ff")


@pytest.fixture
def mock_store():
    """Create a mock store that hands back whatever it is asked to save."""
    store = AsyncMock()
    store.save.side_effect = lambda entity: entity
    return store


class TestSave:
    """Tests for saving catalog entries."""

    @pytest.mark.asyncio
    async def test_save_stamps_and_stores(self, mock_store, validator, cause):
        service = CauseService(mock_store, validator)

        saved = await service.save(cause)

        assert saved.id == cause.id
        assert saved.created_at is not None
        assert saved.updated_at == saved.created_at
        mock_store.save.assert_awaited_once_with(saved)

    @pytest.mark.asyncio
    async def test_resave_advances_updated_at(self, mock_store, validator, cause):
        service = CauseService(mock_store, validator)

        first = await service.save(cause)
        second = await service.save(replace(first, name="Vendor outage"))

        assert second.created_at == first.created_at
        assert second.updated_at > first.updated_at

    @pytest.mark.asyncio
    async def test_invalid_entry_is_not_stored(self, mock_store, validator):
        service = CauseService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.save(Cause.new(name="Only a name"))

        err = exc_info.value
        assert str(err).startswith("failed to validate contributing cause:")
        assert set(err.find(EntityValidationError).fields) == {"description", "category"}
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_id_is_reported_by_validation(self, mock_store, validator):
        service = TriggerService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.save(Trigger(name="Deploy", description="A release went out"))

        assert exc_info.value.find(EntityValidationError).fields == ["id"]

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_kind(self, mock_store, validator, trigger):
        mock_store.save.side_effect = StorageError("connection refused")
        service = TriggerService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.save(trigger)

        assert str(exc_info.value).startswith("failed to store trigger:")
        assert exc_info.value.is_kind(StorageError)

    @pytest.mark.asyncio
    async def test_store_rejecting_id_keeps_kind(self, mock_store, validator, trigger):
        mock_store.save.side_effect = MissingIdentifierError("trigger")
        service = TriggerService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.save(trigger)

        assert exc_info.value.is_kind(MissingIdentifierError)


class TestGet:

    @pytest.mark.asyncio
    async def test_get_returns_stored(self, mock_store, validator, cause):
        mock_store.get.return_value = cause
        service = CauseService(mock_store, validator)

        assert await service.get(cause.id) == cause
        mock_store.get.assert_awaited_once_with(cause.id)

    @pytest.mark.asyncio
    async def test_get_unknown(self, mock_store, validator):
        mock_store.get.side_effect = NotFoundError("contributing cause", UNKNOWN_ID)
        service = CauseService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.get(UNKNOWN_ID)

        assert str(exc_info.value).startswith("failed to get contributing cause:")
        assert exc_info.value.find(NotFoundError).id == UNKNOWN_ID


class TestAll:

    @pytest.mark.asyncio
    async def test_all_passes_through(self, mock_store, validator, trigger):
        mock_store.all.return_value = [trigger]
        service = TriggerService(mock_store, validator)

        assert await service.all() == [trigger]

    @pytest.mark.asyncio
    async def test_all_failure(self, mock_store, validator):
        mock_store.all.side_effect = StorageError("timeout")
        service = TriggerService(mock_store, validator)

        with pytest.raises(ServiceError) as exc_info:
            await service.all()

        assert str(exc_info.value).startswith("unable to get all triggers from storage:")
        assert exc_info.value.is_kind(StorageError)

    def test_kinds(self, mock_store, validator):
        assert CauseService(mock_store, validator).kind == "contributing cause"
        assert TriggerService(mock_store, validator).kind == "trigger"
