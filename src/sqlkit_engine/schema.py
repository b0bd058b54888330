# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Namespaced table identifier used to address a model's relation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import table as table_clause
from sqlalchemy.engine.default import DefaultDialect

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.sql.expression import ColumnClause, TableClause

_DEFAULT_DIALECT = DefaultDialect()


@dataclass(frozen=True)
class SchemaIdentifier:
    """Table name plus optional schema (namespace).

    A blank or whitespace-only schema means the table is not namespaced.

    Usage:
        SchemaIdentifier("todos")                  # "todos"
        SchemaIdentifier("todos", schema="app")    # "app"."todos"
        SchemaIdentifier.coerce("todos")           # same as the first form
    """

    table: str
    schema: str = ""

    @classmethod
    def coerce(cls, value: SchemaIdentifier | str) -> SchemaIdentifier:
        """Return value as a SchemaIdentifier; plain strings name the table."""
        if isinstance(value, SchemaIdentifier):
            return value
        if isinstance(value, str):
            return cls(value)
        raise TypeError(f"Expected SchemaIdentifier or str, got {type(value).__name__}")

    @property
    def has_schema(self) -> bool:
        return bool(self.schema.strip())

    def serialize(self, dialect: Dialect | None = None) -> str:
        """Return the quoted identifier, ``"schema"."table"`` or ``"table"``.

        Quoting always applies and uses the dialect's identifier quote
        character (``"`` when no dialect is given).
        """
        preparer = (dialect or _DEFAULT_DIALECT).identifier_preparer
        quoted = preparer.quote_identifier(self.table)
        if self.has_schema:
            return f"{preparer.quote_identifier(self.schema)}.{quoted}"
        return quoted

    def table_clause(self, *columns: ColumnClause) -> TableClause:
        """Return a SQLAlchemy table clause for statement building."""
        return table_clause(self.table, *columns, schema=self.schema if self.has_schema else None)

    def __str__(self) -> str:
        return self.serialize()


__all__ = ["SchemaIdentifier"]
