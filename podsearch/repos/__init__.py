"""Repository interfaces for the results store (testable via fakes).

The SQLAlchemy implementation lives in ``podsearch.repos.sql_catalog``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal, Protocol, Sequence, Tuple


ResultKind = Literal["podcast", "episode"]


@dataclass(frozen=True)
class PodcastRecord:
    track_id: int
    search_term: str
    track_name: str | None = None
    artist_name: str | None = None
    artwork_url_100: str | None = None
    artwork_url_60: str | None = None
    view_url: str | None = None
    feed_url: str | None = None
    primary_genre: str | None = None
    explicit: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class EpisodeRecord:
    track_id: int
    search_term: str
    track_name: str | None = None
    artist_name: str | None = None
    collection_id: int | None = None
    collection_name: str | None = None
    artwork_url_100: str | None = None
    artwork_url_60: str | None = None
    view_url: str | None = None
    episode_url: str | None = None
    description: str | None = None
    track_time_millis: int | None = None
    release_date: str | None = None
    created_at: datetime | None = None


class CatalogRepo(Protocol):
    def existing_track_ids(self, kind: ResultKind, track_ids: Iterable[int]) -> set[int]: ...
    def insert_podcasts(self, rows: Sequence[PodcastRecord]) -> None: ...
    def insert_episodes(self, rows: Sequence[EpisodeRecord]) -> None: ...
    def find_podcasts(self, term: str, offset: int, limit: int) -> Tuple[list[PodcastRecord], int]: ...
    def find_episodes(self, term: str, offset: int, limit: int) -> Tuple[list[EpisodeRecord], int]: ...


__all__ = ["CatalogRepo", "EpisodeRecord", "PodcastRecord", "ResultKind"]
