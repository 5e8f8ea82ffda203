from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from podsearch.db import get_engine
from podsearch.dependencies import get_settings
from podsearch.errors import require_term
from podsearch.repos import CatalogRepo, EpisodeRecord, PodcastRecord
from podsearch.repos.sql_catalog import SqlCatalogRepo
from podsearch.schemas import (
    EpisodePodcast,
    EpisodeView,
    Highlight,
    Highlights,
    Pagination,
    PodcastView,
    ResultsPage,
)

DEFAULT_HUE = "39.31034482758622"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _get_engine():
    return get_engine()


def slugify(text: Optional[str]) -> str:
    return _NON_ALNUM.sub("-", (text or "").lower()).strip("-")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


def _parse_release_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def _image(record: PodcastRecord | EpisodeRecord) -> str:
    return record.artwork_url_100 or record.artwork_url_60 or ""


def format_podcast(record: PodcastRecord) -> PodcastView:
    title = record.track_name or "Unknown Title"
    return PodcastView(
        id=str(record.track_id),
        explicit=record.explicit,
        title=title,
        author=record.artist_name or "Unknown Author",
        image=_image(record),
        slug=slugify(record.track_name),
        feed_url=record.feed_url or record.view_url or "",
    )


def format_episode(record: EpisodeRecord) -> EpisodeView:
    show_id = str(record.collection_id) if record.collection_id else (record.collection_name or "unknown")
    released = _parse_release_date(record.release_date)
    if released is None:
        released = _as_utc(record.created_at or datetime.now(timezone.utc))
    title = record.track_name or "Unknown Episode"
    return EpisodeView(
        id=str(record.track_id),
        podcast_id=show_id,
        description=record.description or "Episode description not available",
        duration=str(record.track_time_millis or 0),
        image=_image(record),
        published=released.isoformat(),
        timestamp=int(released.timestamp()),
        title=title,
        podcast=EpisodePodcast(
            id=show_id,
            title=record.collection_name or "Unknown Show",
            image=_image(record),
            hue=DEFAULT_HUE,
            slug=slugify(record.collection_name),
        ),
        mediaURL=record.episode_url or record.view_url or "",
        highlights=Highlights(title=[Highlight(value=record.track_name or "Unknown")]),
    )


def query_results(
    term: str | None,
    offset: int = 0,
    limit: int | None = None,
    repo: CatalogRepo | None = None,
) -> ResultsPage:
    """Return one page of stored podcasts and episodes matching ``term``.

    Both lists are windowed with the same offset/limit; ``total`` is the larger
    of the two match counts so paging continues while either list has more.
    """

    search_term = require_term(term)
    settings = get_settings()
    limit = min(limit or settings.results_page_size, settings.results_max_page_size)
    offset = max(0, offset)

    repo = repo or SqlCatalogRepo(_get_engine())
    podcasts, podcast_total = repo.find_podcasts(search_term, offset, limit)
    episodes, episode_total = repo.find_episodes(search_term, offset, limit)
    total = max(podcast_total, episode_total)

    return ResultsPage(
        podcasts=[format_podcast(p) for p in podcasts],
        episodes=[format_episode(e) for e in episodes],
        pagination=Pagination(offset=offset, limit=limit, total=total, hasMore=offset + limit < total),
    )


__all__ = ["DEFAULT_HUE", "format_episode", "format_podcast", "query_results", "slugify"]
