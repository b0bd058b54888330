# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Engine configuration.

Configuration via environment variables:
    SQLKIT_ENGINE_DB: SQLite path or PostgreSQL URL (default: ./sqlkit_engine.db)
    SQLKIT_ENGINE_ECHO: Log every SQL statement through SQLAlchemy (default: false)
    SQLKIT_ENGINE_POOL_SIZE: PostgreSQL pool size (default: 10)
    SQLKIT_ENGINE_CONNECT_TIMEOUT: PostgreSQL connect timeout in seconds (default: 10)

Usage:
    # From environment (Docker/production):
    db = SqlDb.from_config(config_from_env())

    # Explicit configuration:
    db = SqlDb.from_config(EngineConfig(db_path="/data/app.db", echo=True))
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Settings used to build a SqlDb.

    Attributes:
        db_path: SQLite path or PostgreSQL URL.
        echo: Let SQLAlchemy log every statement.
        pool_size: Connection pool size (PostgreSQL only).
        connect_timeout: Connection timeout in seconds (PostgreSQL only).
    """

    db_path: str = "./sqlkit_engine.db"
    echo: bool = False
    pool_size: int = 10
    connect_timeout: float = 10.0


def config_from_env() -> EngineConfig:
    """Build EngineConfig from SQLKIT_ENGINE_* environment variables."""
    return EngineConfig(
        db_path=os.environ.get("SQLKIT_ENGINE_DB", "./sqlkit_engine.db"),
        echo=os.environ.get("SQLKIT_ENGINE_ECHO", "").lower() in ("1", "true", "yes"),
        pool_size=int(os.environ.get("SQLKIT_ENGINE_POOL_SIZE", "10")),
        connect_timeout=float(os.environ.get("SQLKIT_ENGINE_CONNECT_TIMEOUT", "10")),
    )


__all__ = ["EngineConfig", "config_from_env"]
