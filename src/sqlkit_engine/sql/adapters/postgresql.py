# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""PostgreSQL async adapter using psycopg3 with connection pooling.

Pooling is SQLAlchemy's: acquire() checks a connection out of the engine's
pool, release() returns it. Each connection runs its own transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import make_url

from .base import DbAdapter

if TYPE_CHECKING:
    from sqlalchemy.dialects.postgresql import Insert
    from sqlalchemy.sql.expression import TableClause


class PostgresAdapter(DbAdapter):
    """PostgreSQL adapter on the ``postgresql+psycopg`` driver.

    Pool is created lazily with the engine on first acquire().
    """

    def __init__(
        self,
        dsn: str,
        pool_size: int = 10,
        connect_timeout: float = 10.0,
        echo: bool = False,
    ):
        super().__init__(echo=echo)
        self.dsn = dsn
        self.pool_size = pool_size
        self.connect_timeout = connect_timeout

        # Verify psycopg is available at init time
        try:
            import psycopg  # noqa: F401
        except ImportError as e:
            raise ImportError(
                "PostgreSQL support requires psycopg. "
                "Install with: pip install sqlkit-engine[postgresql]"
            ) from e

    @property
    def url(self) -> str:
        url = make_url(self.dsn).set(drivername="postgresql+psycopg")
        return url.render_as_string(hide_password=False)

    def engine_options(self) -> dict[str, Any]:
        return {
            "pool_size": self.pool_size,
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": max(1, int(self.connect_timeout))},
        }

    def insert(self, table: TableClause) -> Insert:
        """PostgreSQL INSERT supporting on_conflict_do_update/do_nothing."""
        return pg_insert(table)
