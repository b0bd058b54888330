# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Typed columns derived from model fields.

Statements are built against lightweight table clauses whose columns carry
SQLAlchemy types inferred from the pydantic annotations, so the dialect
handles bind and result conversion (datetimes and booleans on SQLite in
particular).
"""

from __future__ import annotations

import types
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin
from uuid import UUID

from pydantic.alias_generators import to_snake
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    TypeDecorator,
    Uuid,
    column,
)
from sqlalchemy.types import NullType

if TYPE_CHECKING:
    from pydantic import BaseModel
    from sqlalchemy.engine import Dialect
    from sqlalchemy.sql.expression import ColumnClause
    from sqlalchemy.types import TypeEngine


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. Used for every stamp."""
    return datetime.now(timezone.utc)


class UtcDateTime(TypeDecorator):
    """DateTime that always comes back as an aware UTC datetime.

    SQLite stores datetimes without offset, so values are normalized to UTC
    on the way in and re-tagged as UTC on the way out.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(timezone=True)

    @property
    def python_type(self) -> type:
        return datetime

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# Order matters: bool before int, datetime before date.
_TYPE_MAP: list[tuple[type, type[TypeEngine[Any]]]] = [
    (bool, Boolean),
    (int, Integer),
    (float, Float),
    (Decimal, Numeric),
    (str, String),
    (datetime, UtcDateTime),
    (date, Date),
    (UUID, Uuid),
    (dict, JSON),
    (list, JSON),
]


def _unwrap(annotation: Any) -> Any:
    """Strip Optional/Annotated wrappers and generic parameters."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return _unwrap(get_args(annotation)[0])
    if origin in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return _unwrap(args[0])
        return annotation
    if origin is not None:
        return origin
    return annotation


def column_type(annotation: Any) -> TypeEngine[Any]:
    """Return the SQLAlchemy type for a field annotation (NullType if unknown)."""
    python_type = _unwrap(annotation)
    if isinstance(python_type, type):
        for candidate, sql_type in _TYPE_MAP:
            if issubclass(python_type, candidate):
                return sql_type()
    return NullType()


def build_columns(model_cls: type[BaseModel]) -> list[ColumnClause[Any]]:
    """One typed column per model field, named by the snake_case convention."""
    return [
        column(to_snake(name), column_type(field.annotation))
        for name, field in model_cls.model_fields.items()
    ]


__all__ = ["UtcDateTime", "build_columns", "column_type", "utc_now"]
