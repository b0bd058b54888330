# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base adapter class binding a database backend to SQLAlchemy's asyncio engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import create_async_engine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
    from sqlalchemy.sql.dml import Insert
    from sqlalchemy.sql.expression import TableClause


class DbAdapter(ABC):
    """Abstract base class for async database adapters.

    An adapter knows how to reach one backend through SQLAlchemy:
    - URL and engine options (driver, pool settings)
    - Connection management (acquire, release, shutdown)
    - Transaction control (commit, rollback on connection)
    - Dialect-aware statement factories (insert with ON CONFLICT support)

    The engine is created lazily on first use. SqlDb manages the
    connection lifecycle via contextvars for per-task isolation.
    """

    def __init__(self, echo: bool = False):
        self.echo = echo
        self._engine: AsyncEngine | None = None

    @property
    @abstractmethod
    def url(self) -> str:
        """SQLAlchemy URL including the async driver."""
        ...

    def engine_options(self) -> dict[str, Any]:
        """Extra keyword arguments for create_async_engine()."""
        return {}

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url, echo=self.echo, **self.engine_options())
        return self._engine

    def insert(self, table: TableClause) -> Insert:
        """Return an INSERT builder for this backend.

        Dialect adapters return their dialect's Insert so that statement
        modifiers can add ``on_conflict_do_update()`` and friends.
        """
        return insert(table)

    # -------------------------------------------------------------------------
    # Connection management
    # -------------------------------------------------------------------------

    async def acquire(self) -> AsyncConnection:
        """Acquire a new connection (from the engine's pool) with an open transaction."""
        conn = self.engine.connect()
        await conn.start()
        return conn

    async def release(self, conn: AsyncConnection) -> None:
        """Return the connection to the pool."""
        await conn.close()

    async def commit(self, conn: AsyncConnection) -> None:
        """Commit transaction on connection."""
        await conn.commit()

    async def rollback(self, conn: AsyncConnection) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def shutdown(self) -> None:
        """Dispose the engine and its pool (application shutdown)."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
