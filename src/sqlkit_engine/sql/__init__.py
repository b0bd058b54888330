# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Async execution layer: database handle and backend adapters.

The record layer never talks to drivers directly. It builds SQLAlchemy
Core statements and hands them to a SqlDb, which runs them on the
connection bound to the current task.

Components:
    SqlDb: Database handle with per-task connection and transaction context manager.
    DbAdapter: Abstract base for SQLite/PostgreSQL adapters.
    get_adapter: Connection string to adapter factory.

Transaction Model:
    - connection(): Acquires connection and begins transaction
    - exit without error: COMMIT and release
    - exit with error: ROLLBACK, release, re-raise
    - shutdown(): Disposes the engine (application shutdown only)

Example:
    ::

        from sqlkit_engine.sql import SqlDb

        db = SqlDb("/data/app.db")
        async with db.connection():
            rows = await db.fetch_all("SELECT * FROM todos")
        await db.shutdown()
"""

from .adapters import DbAdapter, get_adapter
from .sqldb import SqlDb

__all__ = ["SqlDb", "DbAdapter", "get_adapter"]
