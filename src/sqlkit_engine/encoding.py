# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Key casing and null encoding between models and SQL rows.

The engine always writes with ``CONVERT_TO_SNAKE_CASE`` + ``AS_NULL`` and
reads with ``CONVERT_FROM_SNAKE_CASE``. The strategies stay pluggable for
callers that encode or decode rows by hand.

Decoding matches column names back to field names through the model's own
field list, so both ``unique_value`` and ``uniqueValue`` fields map to the
``unique_value`` column and round-trip unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.sql.expression import TableClause

M = TypeVar("M", bound=BaseModel)


class KeyEncodingStrategy(Enum):
    """How field names become column names on write."""

    USE_DEFAULT_KEYS = "use_default_keys"
    CONVERT_TO_SNAKE_CASE = "convert_to_snake_case"


class KeyDecodingStrategy(Enum):
    """How column names become field names on read."""

    USE_DEFAULT_KEYS = "use_default_keys"
    CONVERT_FROM_SNAKE_CASE = "convert_from_snake_case"


class NilEncodingStrategy(Enum):
    """What happens to None values on write."""

    DEFAULT = "default"  # omitted from the statement
    AS_NULL = "as_null"  # sent as explicit SQL NULL


def encode_key(name: str, strategy: KeyEncodingStrategy) -> str:
    if strategy is KeyEncodingStrategy.CONVERT_TO_SNAKE_CASE:
        return to_snake(name)
    return name


def encode_model(
    model: BaseModel,
    key_strategy: KeyEncodingStrategy = KeyEncodingStrategy.CONVERT_TO_SNAKE_CASE,
    nil_strategy: NilEncodingStrategy = NilEncodingStrategy.AS_NULL,
    exclude: Iterable[str] = (),
) -> dict[str, Any]:
    """Encode a model as a column -> value mapping.

    Args:
        model: Model instance to encode.
        key_strategy: Field name to column name conversion.
        nil_strategy: Keep None values as NULL or drop them.
        exclude: Field names to leave out.

    Returns:
        Dict keyed by column name, in field declaration order.
    """
    excluded = set(exclude)
    values: dict[str, Any] = {}
    for name in type(model).model_fields:
        if name in excluded:
            continue
        value = getattr(model, name)
        if value is None and nil_strategy is NilEncodingStrategy.DEFAULT:
            continue
        values[encode_key(name, key_strategy)] = value
    return values


def field_names_by_column(model_cls: type[BaseModel]) -> dict[str, str]:
    """Map snake_case column names back to the model's field names."""
    return {to_snake(name): name for name in model_cls.model_fields}


def _row_processors(
    table: TableClause, dialect: Dialect
) -> dict[str, tuple[Callable[[Any], Any], type | None]]:
    """Result processors of the table's typed columns for one dialect."""
    processors: dict[str, tuple[Callable[[Any], Any], type | None]] = {}
    for col in table.columns:
        processor = col.type.dialect_impl(dialect).result_processor(dialect, None)
        if processor is None:
            continue
        try:
            python_type: type | None = col.type.python_type
        except NotImplementedError:
            python_type = None
        processors[col.name] = (processor, python_type)
    return processors


def decode_row(
    model_cls: type[M],
    row: Mapping[str, Any],
    key_strategy: KeyDecodingStrategy = KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE,
    table: TableClause | None = None,
    dialect: Dialect | None = None,
) -> M:
    """Decode a result row into a model instance.

    When ``table`` and ``dialect`` are given, raw driver values (as returned
    by ``SELECT *``) go through the typed columns' result processors first,
    e.g. SQLite datetime strings become aware datetimes and 0/1 become
    booleans. Values already of the column's Python type are left alone.

    Columns with no matching field are ignored.
    """
    processors = _row_processors(table, dialect) if table is not None and dialect else {}
    names = (
        field_names_by_column(model_cls)
        if key_strategy is KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE
        else {}
    )
    data: dict[str, Any] = {}
    for key, value in row.items():
        entry = processors.get(key)
        if entry is not None and value is not None:
            processor, python_type = entry
            if python_type is None or not isinstance(value, python_type):
                value = processor(value)
        data[names.get(key, key)] = value
    return model_cls.model_validate(data)


__all__ = [
    "KeyDecodingStrategy",
    "KeyEncodingStrategy",
    "NilEncodingStrategy",
    "decode_row",
    "encode_key",
    "encode_model",
    "field_names_by_column",
]
