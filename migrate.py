#!/usr/bin/env python3
"""
Database schema management script.
Creates, drops and inspects the dashboard tables for the configured database.
"""

import asyncio
import sys
import argparse
import logging
from typing import List

from sqlalchemy import inspect

from estate_dashboard.config import get_settings
from estate_dashboard.database import Database
import estate_dashboard.models  # noqa: F401  registers every table on Base.metadata

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class SchemaManager:
    """Runs schema commands against the database described by the settings."""

    def __init__(self, database: Database, allow_destructive: bool):
        self.database = database
        self.allow_destructive = allow_destructive

    def _guard_destructive(self, action: str) -> None:
        if not self.allow_destructive:
            raise RuntimeError(
                f"Refusing to {action} outside development or testing; pass --force to override"
            )

    async def check(self) -> None:
        if not await self.database.check_connection():
            raise RuntimeError("Database is not reachable")

    async def create(self) -> None:
        logger.info("Creating tables")
        await self.database.create_tables()

    async def drop(self) -> None:
        self._guard_destructive("drop tables")
        logger.warning("Dropping all tables - all data will be lost!")
        await self.database.drop_tables()

    async def reset(self) -> None:
        self._guard_destructive("reset the database")
        logger.warning("Resetting database - all data will be lost!")
        await self.database.drop_tables()
        await self.database.create_tables()
        logger.info("Database reset completed")

    async def tables(self) -> List[str]:
        async with self.database.engine.connect() as conn:
            names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        for name in sorted(names):
            logger.info(f"  {name}")
        logger.info(f"{len(names)} tables found")
        return names


async def run(command: str, manager: SchemaManager) -> None:
    try:
        await getattr(manager, command)()
    finally:
        await manager.database.dispose()


def main():
    """Main CLI interface for schema management."""
    parser = argparse.ArgumentParser(description="Estate dashboard database schema management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("check", help="Check database connectivity")
    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("tables", help="List existing tables")

    for name, help_text in (("drop", "Drop all tables"), ("reset", "Drop and recreate all tables")):
        destructive = subparsers.add_parser(name, help=help_text)
        destructive.add_argument("--confirm", action="store_true", help="Confirm the destructive operation")
        destructive.add_argument("--force", action="store_true", help="Allow outside development or testing")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command in ("drop", "reset") and not args.confirm:
        print(f"Database {args.command} requires --confirm flag")
        return

    settings = get_settings()
    manager = SchemaManager(
        Database.from_settings(settings),
        allow_destructive=(
            settings.is_development or settings.is_testing or getattr(args, "force", False)
        ),
    )

    try:
        asyncio.run(run(args.command, manager))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
