# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""sqlkit-engine: active-record models over SQLAlchemy Core.

Models are pydantic classes bound to a table; each operation generates one
statement and runs it on a SqlDb handle.

Example:
    ::

        from sqlkit_engine import Model, SchemaIdentifier, SqlDb, Timestampable

        class Todo(Timestampable):
            __schema__ = SchemaIdentifier("todos")

            id: int | None = None
            title: str

        db = SqlDb("/data/app.db")
        async with db.connection():
            todo = Todo(title="docs")
            await todo.insert(db)
            todos = await Todo.all(db)
"""

from .batch import delete_all, insert_all
from .column import UtcDateTime, utc_now
from .config import EngineConfig, config_from_env
from .encoding import (
    KeyDecodingStrategy,
    KeyEncodingStrategy,
    NilEncodingStrategy,
    decode_row,
    encode_model,
)
from .errors import IdRequiredError, SqlKitEngineError
from .model import Capability, Model, StatementModifier
from .schema import SchemaIdentifier
from .soft_deletable import SoftDeletable
from .sql import SqlDb
from .timestampable import Timestampable

__version__ = "0.1.0"

__all__ = [
    "Capability",
    "EngineConfig",
    "IdRequiredError",
    "KeyDecodingStrategy",
    "KeyEncodingStrategy",
    "Model",
    "NilEncodingStrategy",
    "SchemaIdentifier",
    "SoftDeletable",
    "SqlDb",
    "SqlKitEngineError",
    "StatementModifier",
    "Timestampable",
    "UtcDateTime",
    "config_from_env",
    "decode_row",
    "delete_all",
    "encode_model",
    "insert_all",
    "utc_now",
]
