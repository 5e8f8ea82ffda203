"""Shared database helpers."""

from __future__ import annotations

from functools import lru_cache

import sqlalchemy as sa
from sqlalchemy.engine import Engine

from .dependencies import get_settings


@lru_cache
def get_engine() -> Engine:
    """Return a cached SQLAlchemy engine."""

    settings = get_settings()
    return sa.create_engine(settings.database_url, pool_pre_ping=True)


def create_schema(engine: Engine | None = None) -> None:
    """Create the results tables straight from metadata (dev and tests)."""

    from .repos.tables import metadata

    metadata.create_all(engine or get_engine())


__all__ = ["create_schema", "get_engine"]
