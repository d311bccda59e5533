"""
Tests for the schema management script.
"""

import pytest

from migrate import SchemaManager


class TestSchemaManager:

    @pytest.mark.asyncio
    async def test_tables_lists_every_model(self, database):
        manager = SchemaManager(database, allow_destructive=True)

        names = await manager.tables()

        for table in ("properties", "reviews", "blogs", "comments", "users", "admins", "sell_submissions"):
            assert table in names

    @pytest.mark.asyncio
    async def test_check_passes_for_reachable_database(self, database):
        await SchemaManager(database, allow_destructive=False).check()

    @pytest.mark.asyncio
    async def test_reset_recreates_schema(self, database):
        manager = SchemaManager(database, allow_destructive=True)

        await manager.reset()

        assert "properties" in await manager.tables()

    @pytest.mark.asyncio
    async def test_destructive_commands_refused_without_permission(self, database):
        manager = SchemaManager(database, allow_destructive=False)

        with pytest.raises(RuntimeError, match="--force"):
            await manager.drop()

        with pytest.raises(RuntimeError):
            await manager.reset()
