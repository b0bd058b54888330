# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for model module - identity contract and generated CRUD."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from sample_models import ArchivedItem, Item, StampedItem, Task
from sqlkit_engine import Capability, IdRequiredError, Model, SchemaIdentifier


def uid() -> str:
    return str(uuid.uuid4())


async def insert_values(db, *values: str) -> None:
    """Insert raw rows, bypassing the model layer."""
    for value in values:
        await db.execute(
            "INSERT INTO items (id, value, unique_value) VALUES (NULL, :value, :unique)",
            {"value": value, "unique": uid()},
        )


class TestModelClass:
    """Tests for class-level resolution of schema, table and capabilities."""

    def test_schema_coerced_from_string(self):
        """A plain string __schema__ becomes a SchemaIdentifier."""
        assert ArchivedItem.__schema__ == SchemaIdentifier("archived_items")

    def test_table_has_one_column_per_field(self):
        """The table clause carries every field as a snake_case column."""
        assert Item.table().name == "items"
        assert [c.name for c in Item.table().columns] == ["id", "value", "unique_value"]

    def test_table_with_schema(self):
        """A namespaced identifier puts the schema on the table clause."""

        class Scoped(Model):
            __schema__ = SchemaIdentifier("things", schema="app")
            id: int | None = None

        assert Scoped.table().schema == "app"

    def test_column_accepts_field_or_column_name(self):
        """column() converts camelCase names to the snake_case column."""
        assert Item.column("unique_value") is Item.column("uniqueValue")

    def test_abstract_model_has_no_table(self):
        """Classes without __schema__ refuse to build statements."""

        class Abstract(Model):
            id: int | None = None

        with pytest.raises(TypeError, match="does not define __schema__"):
            Abstract.table()

    def test_capabilities(self):
        """Capabilities come from the mixins in the class hierarchy."""
        assert Item.capabilities() == frozenset()
        assert StampedItem.capabilities() == {Capability.TIMESTAMPS}
        assert ArchivedItem.capabilities() == {Capability.SOFT_DELETE}
        assert Task.capabilities() == {Capability.TIMESTAMPS, Capability.SOFT_DELETE}

    def test_capabilities_inherited_by_subclass(self):
        """A subclass of a concrete model keeps its capabilities."""

        class SpecialTask(Task):
            __schema__ = "special_tasks"

        assert SpecialTask.capabilities() == Task.capabilities()


class TestRequireId:
    """Tests for require_id()."""

    def test_raises_when_not_inserted(self):
        """require_id() raises IdRequiredError on a fresh model."""
        model = Item(value="test", unique_value=uid())
        with pytest.raises(IdRequiredError) as exc_info:
            model.require_id()
        assert exc_info.value.model == "Item"
        assert exc_info.value.schema == '"items"'

    def test_returns_id(self):
        """require_id() returns the assigned id."""
        assert Item(id=7, value="test", unique_value=uid()).require_id() == 7


class TestQueries:
    """Tests for all(), first() and count()."""

    async def test_all(self, sqlite_db):
        """all() returns every row in insertion order."""
        await insert_values(sqlite_db, "test", "test")

        models = await Item.all(sqlite_db)

        assert len(models) == 2
        assert [m.id for m in models] == [1, 2]
        assert all(isinstance(m, Item) for m in models)

    async def test_all_empty(self, sqlite_db):
        """all() on an empty table returns an empty list."""
        assert await Item.all(sqlite_db) == []

    async def test_all_with_where(self, sqlite_db):
        """The modifier filters the SELECT."""
        await insert_values(sqlite_db, "foo", "test", "test", "bar")

        models = await Item.all(sqlite_db, lambda q: q.where(Item.column("value") == "test"))

        assert [m.id for m in models] == [2, 3]

    async def test_all_with_order_and_limit(self, sqlite_db):
        """The modifier may also order and limit."""
        await insert_values(sqlite_db, "a", "b", "c")

        models = await Item.all(
            sqlite_db, lambda q: q.order_by(Item.column("id").desc()).limit(2)
        )

        assert [m.value for m in models] == ["c", "b"]

    async def test_first(self, sqlite_db):
        """first() returns the first row."""
        await insert_values(sqlite_db, "foo", "bar")

        model = await Item.first(sqlite_db)

        assert model is not None
        assert model.id == 1

    async def test_first_with_where(self, sqlite_db):
        """first() honours the modifier."""
        await insert_values(sqlite_db, "foo", "test")

        model = await Item.first(sqlite_db, lambda q: q.where(Item.column("value") == "test"))

        assert model is not None
        assert model.id == 2

    async def test_first_returns_none(self, sqlite_db):
        """first() returns None when nothing matches."""
        assert await Item.first(sqlite_db) is None

    async def test_count(self, sqlite_db):
        """count() counts all rows or the filtered ones."""
        for value in ("foo", "test", "foo"):
            await Item(value=value, unique_value=uid()).insert(sqlite_db)

        assert await Item.count(sqlite_db) == 3
        assert await Item.count(sqlite_db, lambda q: q.where(Item.column("value") == "foo")) == 2

    async def test_count_empty(self, sqlite_db):
        """count() of an empty table is 0."""
        assert await Item.count(sqlite_db) == 0


class TestInsert:
    """Tests for insert()."""

    async def test_insert_assigns_id(self, sqlite_db):
        """insert() stores the generated id on the model."""
        model = Item(value="test", unique_value=uid())

        await model.insert(sqlite_db)

        assert model.require_id() == 1
        assert await Item.first(sqlite_db) == model

    async def test_insert_with_client_id(self, sqlite_db):
        """A client-assigned id is written as-is."""
        model = Item(id=42, value="test", unique_value=uid())

        await model.insert(sqlite_db)

        assert model.id == 42
        assert (await Item.first(sqlite_db)).id == 42

    async def test_upsert(self, sqlite_db):
        """An ON CONFLICT modifier turns insert into an upsert."""
        unique = uid()
        model = Item(value="test", unique_value=unique)
        await model.insert(sqlite_db)
        assert model.id == 1

        other = Item(value="foo", unique_value=unique)
        await other.insert(
            sqlite_db,
            lambda q: q.on_conflict_do_update(
                index_elements=["unique_value"], set_={"value": q.excluded["value"]}
            ),
        )

        assert other.id == 1
        upserted = await Item.first(sqlite_db, lambda q: q.where(Item.column("id") == 1))
        assert upserted.value == "foo"
        assert upserted.unique_value == unique
        assert await Item.count(sqlite_db) == 1

    async def test_insert_do_nothing_leaves_id_unset(self, sqlite_db):
        """When the statement returns no row the id stays None."""
        unique = uid()
        await Item(value="test", unique_value=unique).insert(sqlite_db)

        duplicate = Item(value="foo", unique_value=unique)
        await duplicate.insert(sqlite_db, lambda q: q.on_conflict_do_nothing())

        assert duplicate.id is None

    async def test_constraint_violation_propagates(self, sqlite_db):
        """Database errors reach the caller unchanged."""
        unique = uid()
        await Item(value="test", unique_value=unique).insert(sqlite_db)

        with pytest.raises(IntegrityError):
            await Item(value="test", unique_value=unique).insert(sqlite_db)


class TestUpdate:
    """Tests for update() and update_where()."""

    async def test_update(self, sqlite_db):
        """update() rewrites the row addressed by id."""
        unique = uid()
        model = Item(value="test", unique_value=unique)
        await model.insert(sqlite_db)

        model.value = "foo"
        await model.update(sqlite_db)

        updated = await Item.first(sqlite_db)
        assert updated.id == 1
        assert updated.value == "foo"
        assert updated.unique_value == unique

    async def test_update_without_id_raises(self, sqlite_db):
        """update() on an uninserted model raises before any statement."""
        with pytest.raises(IdRequiredError):
            await Item(value="test", unique_value=uid()).update(sqlite_db)

    async def test_update_where(self, sqlite_db):
        """update_where() returns the ids of the affected rows."""
        for value in ("foo", "test", "foo"):
            await Item(value=value, unique_value=uid()).insert(sqlite_db)

        updated_ids = await Item.update_where(
            sqlite_db,
            lambda q: q.values(value="bar").where(Item.column("value") == "foo"),
        )

        assert sorted(updated_ids) == [1, 3]
        models = await Item.all(sqlite_db, lambda q: q.where(Item.column("value") == "bar"))
        assert [m.id for m in models] == [1, 3]

    async def test_update_where_no_match(self, sqlite_db):
        """No matching row gives an empty id list."""
        await Item(value="foo", unique_value=uid()).insert(sqlite_db)

        updated_ids = await Item.update_where(
            sqlite_db,
            lambda q: q.values(value="bar").where(Item.column("value") == "missing"),
        )

        assert updated_ids == []


class TestDelete:
    """Tests for delete() and delete_where()."""

    async def test_delete(self, sqlite_db):
        """delete() removes the row."""
        await Item(value="test", unique_value=uid()).insert(sqlite_db)

        model = await Item.first(sqlite_db)
        assert model is not None
        await model.delete(sqlite_db)

        assert await Item.first(sqlite_db) is None

    async def test_delete_without_id_raises(self, sqlite_db):
        """delete() on an uninserted model raises IdRequiredError."""
        with pytest.raises(IdRequiredError):
            await Item(value="test", unique_value=uid()).delete(sqlite_db)

    async def test_delete_where(self, sqlite_db):
        """delete_where() returns the ids of deleted rows."""
        await Item(value="foo", unique_value=uid()).insert(sqlite_db)
        await Item(value="test", unique_value=uid()).insert(sqlite_db)
        assert len(await Item.all(sqlite_db)) == 2

        deleted_ids = await Item.delete_where(
            sqlite_db, lambda q: q.where(Item.column("value") == "foo")
        )

        assert deleted_ids == [1]
        assert len(await Item.all(sqlite_db)) == 1


class TestTriggers:
    """Tests for application-defined trigger overrides."""

    async def test_custom_trigger_runs_before_insert(self, sqlite_db):
        """An override calling super() mutates the model before encoding."""

        class Normalized(Item):
            __schema__ = "items"

            @classmethod
            def trigger_on_inserting(cls, models, now):
                super().trigger_on_inserting(models, now)
                for model in models:
                    model.value = model.value.strip().lower()

        model = Normalized(value="  MiXeD ", unique_value=uid())
        await model.insert(sqlite_db)

        assert (await Item.first(sqlite_db)).value == "mixed"
