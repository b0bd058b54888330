# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""First-party exceptions of the record layer.

Everything else (constraint violations, connection failures, statement
compile errors, decode errors) is raised by SQLAlchemy, the driver or
pydantic and reaches the caller unchanged.
"""

from __future__ import annotations


class SqlKitEngineError(Exception):
    """Base class for errors raised by sqlkit_engine itself."""


class IdRequiredError(SqlKitEngineError):
    """Raised when an operation needs a persisted row but the model has no id.

    Single-model update/delete and every batch delete go through
    ``Model.require_id()``, so the error surfaces before any statement is
    built or any in-memory state is touched.
    """

    def __init__(self, model: str, schema: str | None = None):
        self.model = model
        self.schema = schema
        if schema:
            msg = f"{model} in {schema} has no id; insert it before addressing its row"
        else:
            msg = f"{model} has no id; insert it before addressing its row"
        super().__init__(msg)


__all__ = ["SqlKitEngineError", "IdRequiredError"]
