# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Soft deletion: delete paths flag rows instead of removing them.

Reads are not filtered. Callers that want live rows only add
``Model.column("is_deleted").is_(False)`` to their own modifiers.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import ClassVar, Self

from sqlalchemy import func, literal, update
from sqlalchemy.sql.dml import Update

from .model import Capability, Model


class SoftDeletable(Model):
    """Mixin adding ``is_deleted`` / ``deleted_at`` columns.

    delete(), delete_where() and batch deletes issue
    ``UPDATE ... SET is_deleted = true, deleted_at = coalesce(deleted_at, now)``
    on the same rows a hard delete would have removed, and return the same ids.
    Deleting an already deleted row keeps its first ``deleted_at``.
    """

    __capability__: ClassVar[Capability] = Capability.SOFT_DELETE

    is_deleted: bool = False
    deleted_at: datetime | None = None

    @classmethod
    def trigger_on_deleting(cls, models: Sequence[Self], now: datetime) -> None:
        super().trigger_on_deleting(models, now)
        for model in models:
            model.is_deleted = True
            if model.deleted_at is None:
                model.deleted_at = now

    @classmethod
    def delete_statement(cls, now: datetime) -> Update:
        # Replaces the DELETE entirely: the chain stops here.
        deleted_at = cls.column("deleted_at")
        return update(cls.table()).values(
            is_deleted=True,
            deleted_at=func.coalesce(deleted_at, literal(now, deleted_at.type)),
        )


__all__ = ["SoftDeletable"]
