import asyncio

from database.migrations import (
    get_current_schema_version,
    migration_utils,
    run_migrations,
)
from services import sync_service


def test_run_migrations_reports_success_without_changes():
    result = asyncio.run(run_migrations())

    assert result.success is True
    assert result.applied == 0
    assert result.errors == []


def test_schema_version_is_one():
    assert get_current_schema_version() == 1
    assert migration_utils.get_current_schema_version() == 1


def test_sync_functions_are_noops():
    assert asyncio.run(sync_service.perform_sync()) == sync_service.SyncResult(success=True, errors=[])
    assert asyncio.run(sync_service.full_sync("U")) == sync_service.SyncResult(success=True, errors=[])

    pulled = asyncio.run(sync_service.pull_from_server("U"))
    assert pulled.success is True
    assert pulled.error is None

    assert sync_service.trigger_background_sync() is None
    assert asyncio.run(sync_service.get_settings("U")) is None
    assert asyncio.run(sync_service.save_settings("U", {"theme": "dark"})) is None
