# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite async adapter using aiosqlite."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from .base import DbAdapter

if TYPE_CHECKING:
    from sqlalchemy.dialects.sqlite import Insert
    from sqlalchemy.sql.expression import TableClause


class SqliteAdapter(DbAdapter):
    """SQLite adapter on the ``sqlite+aiosqlite`` driver.

    RETURNING requires SQLite 3.35 or newer, which every supported Python
    ships with.
    """

    def __init__(self, db_path: str, echo: bool = False):
        super().__init__(echo=echo)
        self.db_path = db_path or ":memory:"

    @property
    def url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db_path}"

    def insert(self, table: TableClause) -> Insert:
        """SQLite INSERT supporting on_conflict_do_update/do_nothing."""
        return sqlite_insert(table)
