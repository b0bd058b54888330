# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Model base class: identity contract plus generated CRUD statements.

A model is a pydantic model bound to one table through ``__schema__``.
Every operation builds exactly one SQLAlchemy Core statement, optionally
passes it through a caller-supplied modifier, and runs it on the given
SqlDb.

Lifecycle triggers:
    Capabilities (Timestampable, SoftDeletable) and applications hook into
    writes by overriding class-level triggers and calling ``super()``. The
    chain is the class MRO, fixed when the concrete model class is defined,
    so mixing several capabilities composes all of their mutations.

    - trigger_on_inserting(models, now): before INSERT
    - trigger_on_updating(models, now): before UPDATE of bound models
    - trigger_on_deleting(models, now): before DELETE of bound models
    - update_statement(now): base statement for update_where()
    - delete_statement(now): base statement for delete(), delete_where()
      and batch deletes (a DELETE, or an UPDATE for soft-deletable models)

Example:
    ::

        class Todo(Model):
            __schema__ = SchemaIdentifier("todos")

            id: int | None = None
            title: str
            done: bool = False

        async with db.connection():
            todo = Todo(title="write docs")
            await todo.insert(db)                      # todo.id assigned
            todo.done = True
            await todo.update(db)
            pending = await Todo.count(db, lambda q: q.where(Todo.column("done").is_(False)))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_snake
from sqlalchemy import delete, func, literal_column, select, update
from sqlalchemy.sql.expression import TableClause

from .column import build_columns, utc_now
from .encoding import decode_row, encode_model
from .errors import IdRequiredError
from .schema import SchemaIdentifier

if TYPE_CHECKING:
    from sqlalchemy.sql.dml import Delete, Insert, Update
    from sqlalchemy.sql.expression import ColumnClause, Select

    from .sql import SqlDb

logger = logging.getLogger(__name__)

S = TypeVar("S")
StatementModifier = Callable[[S], S]
"""Caller-supplied function that takes a statement and returns it augmented."""


class Capability(Enum):
    """Optional behaviours a model class can declare through mixins."""

    TIMESTAMPS = "timestamps"
    SOFT_DELETE = "soft_delete"


class Model(BaseModel):
    """Base class for persistable models.

    Subclasses set ``__schema__`` to a SchemaIdentifier (or a table name)
    and declare their fields; ``id`` should be narrowed to the table's key
    type, e.g. ``id: int | None = None``. Classes without ``__schema__``
    are abstract (mixins, shared bases).

    Class attributes resolved at class creation:
        __schema__: SchemaIdentifier of the table.
        __table__: SQLAlchemy table clause with one typed column per field.
        __capabilities__: Capabilities contributed by the class's mixins.
    """

    __schema__: ClassVar[SchemaIdentifier | str | None] = None
    __table__: ClassVar[TableClause | None] = None
    __capability__: ClassVar[Capability | None] = None
    __capabilities__: ClassVar[frozenset[Capability]] = frozenset()

    id: Any = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.__capabilities__ = frozenset(
            klass.__dict__["__capability__"]
            for klass in cls.__mro__
            if klass.__dict__.get("__capability__") is not None
        )
        if cls.__schema__ is None:
            cls.__table__ = None
            return
        cls.__schema__ = SchemaIdentifier.coerce(cls.__schema__)
        cls.__table__ = cls.__schema__.table_clause(*build_columns(cls))

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def require_id(self) -> Any:
        """Return the id, or raise IdRequiredError if the model was never inserted."""
        if self.id is None:
            schema = type(self).__schema__
            raise IdRequiredError(type(self).__name__, str(schema) if schema else None)
        return self.id

    @classmethod
    def capabilities(cls) -> frozenset[Capability]:
        return cls.__capabilities__

    @classmethod
    def table(cls) -> TableClause:
        """Typed table clause the statements are built against."""
        if cls.__table__ is None:
            raise TypeError(f"{cls.__name__} does not define __schema__")
        return cls.__table__

    @classmethod
    def column(cls, name: str) -> ColumnClause[Any]:
        """Typed column for a field name (or its snake_case column name)."""
        return cls.table().c[to_snake(name)]

    # -------------------------------------------------------------------------
    # Trigger Hooks
    # -------------------------------------------------------------------------

    @classmethod
    def trigger_on_inserting(cls, models: Sequence[Self], now: datetime) -> None:
        """Called before INSERT with every model about to be written."""
        pass

    @classmethod
    def trigger_on_updating(cls, models: Sequence[Self], now: datetime) -> None:
        """Called before UPDATE of bound models."""
        pass

    @classmethod
    def trigger_on_deleting(cls, models: Sequence[Self], now: datetime) -> None:
        """Called before delete of bound models (ids already checked)."""
        pass

    @classmethod
    def update_statement(cls, now: datetime) -> Update:
        """Base UPDATE handed to update_where() modifiers."""
        return update(cls.table())

    @classmethod
    def delete_statement(cls, now: datetime) -> Delete | Update:
        """Base statement for every delete path."""
        return delete(cls.table())

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @classmethod
    def _select(cls) -> Select[Any]:
        return select(literal_column("*")).select_from(cls.table())

    @classmethod
    async def all(
        cls, db: SqlDb, builder: StatementModifier[Select[Any]] | None = None
    ) -> list[Self]:
        """``SELECT * FROM <schema>``, decoded into models. Empty list if no row."""
        stmt = cls._select()
        if builder is not None:
            stmt = builder(stmt)
        rows = await db.fetch_all(stmt)
        return [decode_row(cls, row, table=cls.table(), dialect=db.dialect) for row in rows]

    @classmethod
    async def first(
        cls, db: SqlDb, builder: StatementModifier[Select[Any]] | None = None
    ) -> Self | None:
        """First matching row as a model, or None."""
        stmt = cls._select()
        if builder is not None:
            stmt = builder(stmt)
        row = await db.fetch_one(stmt.limit(1))
        if row is None:
            return None
        return decode_row(cls, row, table=cls.table(), dialect=db.dialect)

    @classmethod
    async def count(
        cls, db: SqlDb, builder: StatementModifier[Select[Any]] | None = None
    ) -> int:
        """``SELECT count(*) FROM <schema>``. Returns 0 when no row comes back."""
        stmt = select(func.count()).select_from(cls.table())
        if builder is not None:
            stmt = builder(stmt)
        value = await db.fetch_scalar(stmt)
        return int(value) if value is not None else 0

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _encode_for_insert(self, include_id: bool) -> dict[str, Any]:
        # An unset id is left to the database; NULL would break SERIAL keys.
        return encode_model(self, exclude=() if include_id else ("id",))

    async def insert(self, db: SqlDb, builder: StatementModifier[Insert] | None = None) -> None:
        """``INSERT ... RETURNING id`` and assign the returned id.

        The modifier receives the dialect's Insert, so upserts are written as
        ``lambda q: q.on_conflict_do_update(index_elements=[...], set_={...})``.
        If the statement returns no row (``ON CONFLICT DO NOTHING``), id is None.
        """
        cls = type(self)
        table = cls.table()
        cls.trigger_on_inserting([self], utc_now())

        stmt = db.insert(table).values(self._encode_for_insert(self.id is not None))
        if builder is not None:
            stmt = builder(stmt)
        logger.debug("Inserting %s into %s", cls.__name__, cls.__schema__)
        self.id = await db.fetch_scalar(stmt.returning(table.c.id))

    async def update(self, db: SqlDb) -> None:
        """``UPDATE <schema> SET <all fields> WHERE id = <id>``.

        Raises:
            IdRequiredError: If the model has no id. Nothing is mutated.
        """
        cls = type(self)
        table = cls.table()
        pk = self.require_id()
        cls.trigger_on_updating([self], utc_now())

        stmt = update(table).values(encode_model(self, exclude=("id",))).where(table.c.id == pk)
        logger.debug("Updating %s id=%r", cls.__name__, pk)
        await db.execute(stmt)

    async def delete(self, db: SqlDb) -> None:
        """Delete this model's row (soft-deletable models are flagged instead).

        Raises:
            IdRequiredError: If the model has no id. Nothing is mutated.
        """
        cls = type(self)
        pk = self.require_id()
        now = utc_now()
        cls.trigger_on_deleting([self], now)

        stmt = cls.delete_statement(now).where(cls.table().c.id == pk)
        logger.debug("Deleting %s id=%r", cls.__name__, pk)
        await db.execute(stmt)

    @classmethod
    async def update_where(cls, db: SqlDb, builder: StatementModifier[Update]) -> list[Any]:
        """Bulk UPDATE shaped by the modifier; returns the ids of affected rows.

        Example:
            ids = await Todo.update_where(
                db,
                lambda q: q.values(done=True).where(Todo.column("title") == "docs"),
            )
        """
        stmt = builder(cls.update_statement(utc_now()))
        return await db.fetch_scalars(stmt.returning(cls.table().c.id))

    @classmethod
    async def delete_where(
        cls, db: SqlDb, builder: StatementModifier[Delete | Update]
    ) -> list[Any]:
        """Bulk delete shaped by the modifier; returns the ids of affected rows."""
        stmt = builder(cls.delete_statement(utc_now()))
        return await db.fetch_scalars(stmt.returning(cls.table().c.id))

    # -------------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------------

    @classmethod
    async def insert_many(
        cls,
        db: SqlDb,
        models: Iterable[Self],
        builder: StatementModifier[Insert] | None = None,
    ) -> list[Any]:
        """Multi-row insert of models of this class. See batch.insert_all()."""
        from .batch import insert_all

        return await insert_all(db, models, builder, model_cls=cls)

    @classmethod
    async def delete_many(cls, db: SqlDb, models: Iterable[Self]) -> list[Any]:
        """Single-statement delete of models of this class. See batch.delete_all()."""
        from .batch import delete_all

        return await delete_all(db, models, model_cls=cls)


__all__ = ["Capability", "Model", "StatementModifier"]
