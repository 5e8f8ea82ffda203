"""SQLAlchemy implementation of the catalog repository."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence, Tuple, Type, TypeVar

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

from . import EpisodeRecord, PodcastRecord, ResultKind
from .tables import podcast_episodes, podcasts

R = TypeVar("R", PodcastRecord, EpisodeRecord)

_TABLES = {"podcast": podcasts, "episode": podcast_episodes}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlCatalogRepo:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] | None = None) -> None:
        self._engine = engine
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def existing_track_ids(self, kind: ResultKind, track_ids: Iterable[int]) -> set[int]:
        ids = list(track_ids)
        if not ids:
            return set()
        table = _TABLES[kind]
        sql = sa.select(table.c.track_id).where(table.c.track_id.in_(ids))
        with self._engine.connect() as conn:
            return {int(t) for t in conn.execute(sql).scalars()}

    def insert_podcasts(self, rows: Sequence[PodcastRecord]) -> None:
        self._insert(podcasts, rows)

    def insert_episodes(self, rows: Sequence[EpisodeRecord]) -> None:
        self._insert(podcast_episodes, rows)

    def find_podcasts(self, term: str, offset: int, limit: int) -> Tuple[list[PodcastRecord], int]:
        cols = (podcasts.c.search_term, podcasts.c.track_name, podcasts.c.artist_name)
        return self._find(podcasts, cols, PodcastRecord, term, offset, limit)

    def find_episodes(self, term: str, offset: int, limit: int) -> Tuple[list[EpisodeRecord], int]:
        cols = (
            podcast_episodes.c.search_term,
            podcast_episodes.c.track_name,
            podcast_episodes.c.artist_name,
            podcast_episodes.c.collection_name,
        )
        return self._find(podcast_episodes, cols, EpisodeRecord, term, offset, limit)

    # Internal helpers ------------------------------------------------------
    def _insert_stmt(self, table: sa.Table):
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            return pg_insert(table).on_conflict_do_nothing(index_elements=["track_id"])
        if dialect == "sqlite":
            return sqlite_insert(table).on_conflict_do_nothing(index_elements=["track_id"])
        return sa.insert(table)

    def _insert(self, table: sa.Table, rows: Sequence[PodcastRecord] | Sequence[EpisodeRecord]) -> None:
        if not rows:
            return
        now = self._clock()
        params = []
        for row in rows:
            values = dataclasses.asdict(row)
            if values.get("created_at") is None:
                values["created_at"] = now
            params.append(values)
        # Rows already present stay untouched: first-seen data is never rewritten
        with self._engine.begin() as conn:
            conn.execute(self._insert_stmt(table), params)

    def _find(
        self,
        table: sa.Table,
        columns: Sequence[sa.Column],
        record_type: Type[R],
        term: str,
        offset: int,
        limit: int,
    ) -> Tuple[list[R], int]:
        pattern = _like_pattern(term)
        cond = sa.or_(*(col.ilike(pattern, escape="\\") for col in columns))
        count_sql = sa.select(sa.func.count()).select_from(table).where(cond)
        fields = [f.name for f in dataclasses.fields(record_type)]
        rows_sql = (
            sa.select(*(table.c[name] for name in fields))
            .where(cond)
            .order_by(table.c.created_at.desc(), table.c.id.asc())
            .offset(offset)
            .limit(limit)
        )
        with self._engine.connect() as conn:
            total = int(conn.execute(count_sql).scalar_one())
            records = [record_type(**dict(row)) for row in conn.execute(rows_sql).mappings()]
        return records, total


__all__ = ["SqlCatalogRepo"]
