# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Creation and modification stamps maintained by the engine."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import Field

from .column import utc_now
from .model import Capability, Model

if TYPE_CHECKING:
    from sqlalchemy.sql.dml import Update


class Timestampable(Model):
    """Mixin adding ``created_at`` / ``updated_at`` columns.

    - insert: both stamps set to the same ``now``
    - update: ``updated_at`` set to ``now``, ``created_at`` untouched
    - update_where: ``SET updated_at = now`` added before the caller's modifier

    Values assigned by the caller before a write are overwritten.
    """

    __capability__: ClassVar[Capability] = Capability.TIMESTAMPS

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def trigger_on_inserting(cls, models: Sequence[Self], now: datetime) -> None:
        super().trigger_on_inserting(models, now)
        for model in models:
            model.created_at = now
            model.updated_at = now

    @classmethod
    def trigger_on_updating(cls, models: Sequence[Self], now: datetime) -> None:
        super().trigger_on_updating(models, now)
        for model in models:
            model.updated_at = now

    @classmethod
    def update_statement(cls, now: datetime) -> Update:
        return super().update_statement(now).values(updated_at=now)


__all__ = ["Timestampable"]
