# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Single-statement writes over collections of models.

Each call issues exactly one statement for the whole collection:

- insert_all(): multi-row ``INSERT ... VALUES (...), (...) RETURNING id``
- delete_all(): ``DELETE ... WHERE id IN (...) RETURNING id`` (an UPDATE
  for soft-deletable models)

Every model in the collection must be an instance of the same model class.
Empty collections return ``[]`` without touching the database.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .column import utc_now
from .encoding import encode_model

if TYPE_CHECKING:
    from sqlalchemy.sql.dml import Insert

    from .model import Model, StatementModifier
    from .sql import SqlDb

logger = logging.getLogger(__name__)


def _model_class(models: list[Model], model_cls: type[Model] | None) -> type[Model]:
    """Return the common class of the batch, or raise TypeError."""
    cls = model_cls or type(models[0])
    for model in models:
        if type(model) is not cls:
            raise TypeError(
                f"Batch of {cls.__name__} contains a {type(model).__name__}; "
                "all models must share one class"
            )
    return cls


async def insert_all(
    db: SqlDb,
    models: Iterable[Model],
    builder: StatementModifier[Insert] | None = None,
    model_cls: type[Model] | None = None,
) -> list[Any]:
    """Insert every model with one multi-row INSERT.

    Triggers run once for the whole batch with a shared ``now``, so all
    timestamped models carry the same stamps. Returned ids are not written
    back onto the models.

    Args:
        db: Database handle with an active connection.
        models: Models to insert.
        builder: Optional modifier applied before ``RETURNING id``.
        model_cls: Expected class of the models (defaults to the first one's).

    Returns:
        Ids returned by the database, in the order the database reports them.

    Raises:
        TypeError: If the models do not all share one class.
        ValueError: If some models carry an id and others do not.
    """
    batch = list(models)
    if not batch:
        return []
    cls = _model_class(batch, model_cls)
    table = cls.table()

    # Either every row writes its id or none does: a NULL id is never sent.
    with_id = sum(1 for model in batch if model.id is not None)
    if 0 < with_id < len(batch):
        raise ValueError(
            f"Batch insert of {cls.__name__} mixes models with and without id "
            f"({with_id} of {len(batch)} set)"
        )
    include_id = with_id > 0

    cls.trigger_on_inserting(batch, utc_now())
    rows = [encode_model(model, exclude=() if include_id else ("id",)) for model in batch]

    stmt = db.insert(table).values(rows)
    if builder is not None:
        stmt = builder(stmt)
    logger.debug("Batch insert of %d %s into %s", len(rows), cls.__name__, cls.__schema__)
    return await db.fetch_scalars(stmt.returning(table.c.id))


async def delete_all(
    db: SqlDb,
    models: Iterable[Model],
    model_cls: type[Model] | None = None,
) -> list[Any]:
    """Delete every model with one statement keyed on their ids.

    Raises:
        IdRequiredError: If any model has no id. Checked before any trigger
            runs, so no model is mutated.
        TypeError: If the models do not all share one class.
    """
    batch = list(models)
    if not batch:
        return []
    cls = _model_class(batch, model_cls)
    ids = [model.require_id() for model in batch]

    now = utc_now()
    cls.trigger_on_deleting(batch, now)

    table = cls.table()
    stmt = cls.delete_statement(now).where(table.c.id.in_(ids))
    logger.debug("Batch delete of %d %s from %s", len(ids), cls.__name__, cls.__schema__)
    return await db.fetch_scalars(stmt.returning(table.c.id))


__all__ = ["delete_all", "insert_all"]
