"""Fetch-and-store: query the catalog API and persist results not seen before.

A search term goes through three steps:

1. Resolve the upstream payload. A fresh Redis copy wins; otherwise the
   iTunes API is called. When the API fails, the last-good copy (if any) is
   used instead and the summary is flagged ``stale``.
2. Keep results that carry a track id, split them into podcasts and
   episodes, and drop duplicates inside the batch.
3. Ask the store which track ids it already has and insert only the rest.
   Existing rows are left exactly as first written, including the search
   term that first produced them.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Tuple

import httpx
import redis
from pydantic import ValidationError

from podsearch.cache import CacheClient, CachePolicy
from podsearch.db import get_engine
from podsearch.dependencies import get_settings
from podsearch.errors import UpstreamError, require_term
from podsearch.providers.base import CircuitBreakerOpen
from podsearch.providers.factory import make_itunes_client
from podsearch.providers.itunes import (
    EPISODE_KIND,
    PODCAST_KIND,
    ITunesClient,
    ITunesResult,
    ITunesSearchResponse,
    parse_search_payload,
)
from podsearch.repos import CatalogRepo, EpisodeRecord, PodcastRecord
from podsearch.repos.sql_catalog import SqlCatalogRepo
from podsearch.schemas import SearchSummary

logger = logging.getLogger(__name__)

# pydantic ValidationError is a ValueError
_UPSTREAM_FAILURES = (httpx.HTTPError, CircuitBreakerOpen, ValueError)


def _get_engine():
    return get_engine()


@lru_cache
def _get_client() -> ITunesClient:
    return make_itunes_client(get_settings())


def _get_cache() -> CacheClient | None:
    settings = get_settings()
    if not settings.cache_enabled:
        return None
    policy = CachePolicy(search_ttl=settings.upstream_ttl, last_good_ttl=settings.last_good_ttl)
    return CacheClient(redis.from_url(settings.redis_url, decode_responses=True), policy=policy)


def _unique(results: Iterable[ITunesResult]) -> List[ITunesResult]:
    seen: set[int] = set()
    out: List[ITunesResult] = []
    for r in results:
        if r.trackId in seen:
            continue
        seen.add(r.trackId)
        out.append(r)
    return out


def _podcast_record(term: str, r: ITunesResult) -> PodcastRecord:
    return PodcastRecord(
        track_id=int(r.trackId),
        search_term=term,
        track_name=r.trackName or r.collectionName,
        artist_name=r.artistName,
        artwork_url_100=r.artworkUrl100,
        artwork_url_60=r.artworkUrl60,
        view_url=r.view_url,
        feed_url=r.feedUrl,
        primary_genre=r.primaryGenreName,
        explicit=(r.collectionExplicitness or r.trackExplicitness) == "explicit",
    )


def _episode_record(term: str, r: ITunesResult) -> EpisodeRecord:
    return EpisodeRecord(
        track_id=int(r.trackId),
        search_term=term,
        track_name=r.trackName,
        artist_name=r.artistName,
        collection_id=r.collectionId,
        collection_name=r.collectionName,
        artwork_url_100=r.artworkUrl100,
        artwork_url_60=r.artworkUrl60,
        view_url=r.view_url,
        episode_url=r.episodeUrl,
        description=r.description or r.shortDescription,
        track_time_millis=r.trackTimeMillis,
        release_date=r.releaseDate,
    )


def fetch_payload(
    term: str,
    client: ITunesClient,
    cache: CacheClient | None,
) -> Tuple[ITunesSearchResponse, bool, bool]:
    """Return ``(response, from_cache, stale)`` for ``term``.

    Only payloads that validate are written to the cache, so a malformed
    upstream body never replaces the last-good copy.
    """

    if cache is not None:
        try:
            record = cache.get_search(term)
        except redis.RedisError as exc:
            logger.warning("Search cache unavailable, calling upstream directly: %s", exc)
            cache = None
        else:
            if record is not None and not record.stale:
                logger.debug("Upstream payload for %r served from cache (age=%ss)", term, record.age_seconds)
                return parse_search_payload(record.value), True, False

    try:
        payload = client.search_raw(term)
        response = parse_search_payload(payload)
    except _UPSTREAM_FAILURES as exc:
        fallback = None
        if cache is not None:
            try:
                fallback = cache.get_search(term, allow_stale=True)
            except redis.RedisError:
                fallback = None
        if fallback is None:
            if isinstance(exc, ValidationError):
                raise UpstreamError("Unexpected response from iTunes API") from exc
            raise UpstreamError() from exc
        logger.warning(
            "iTunes search for %r failed (%s); using last-good payload aged %ss",
            term,
            exc,
            fallback.age_seconds,
        )
        return parse_search_payload(fallback.value), True, True

    if cache is not None:
        try:
            cache.set_search(term, payload)
        except redis.RedisError as exc:
            logger.warning("Could not cache upstream payload for %r: %s", term, exc)
    return response, False, False


def store_new_results(term: str, results: Iterable[ITunesResult], repo: CatalogRepo) -> Tuple[int, int]:
    """Insert podcasts and episodes whose track ids the store has not seen yet.

    Returns the number of new podcasts and new episodes.
    """

    with_ids = [r for r in results if r.trackId]
    if not with_ids:
        return 0, 0

    podcasts = _unique(r for r in with_ids if r.kind == PODCAST_KIND)
    episodes = _unique(r for r in with_ids if r.kind == EPISODE_KIND)

    existing_podcasts = repo.existing_track_ids("podcast", [r.trackId for r in podcasts])
    existing_episodes = repo.existing_track_ids("episode", [r.trackId for r in episodes])

    new_podcasts = [r for r in podcasts if r.trackId not in existing_podcasts]
    new_episodes = [r for r in episodes if r.trackId not in existing_episodes]

    repo.insert_podcasts([_podcast_record(term, r) for r in new_podcasts])
    repo.insert_episodes([_episode_record(term, r) for r in new_episodes])
    return len(new_podcasts), len(new_episodes)


def search_and_store(
    term: str | None,
    client: ITunesClient | None = None,
    repo: CatalogRepo | None = None,
    cache: CacheClient | None = None,
    use_cache: bool = True,
) -> SearchSummary:
    search_term = require_term(term)
    client = client or _get_client()
    if cache is None and use_cache:
        cache = _get_cache()

    response, from_cache, stale = fetch_payload(search_term, client, cache)

    if not any(r.trackId for r in response.results):
        return SearchSummary(
            message="No results with a track id",
            searchTerm=search_term,
            resultCount=response.resultCount,
            fromCache=from_cache,
            stale=stale,
        )

    repo = repo or SqlCatalogRepo(_get_engine())
    new_podcasts, new_episodes = store_new_results(search_term, response.results, repo)
    logger.info(
        "Search %r: %d upstream results, %d new podcasts, %d new episodes",
        search_term,
        response.resultCount,
        new_podcasts,
        new_episodes,
    )
    return SearchSummary(
        searchTerm=search_term,
        resultCount=response.resultCount,
        newPodcastsCount=new_podcasts,
        newEpisodesCount=new_episodes,
        totalNewResults=new_podcasts + new_episodes,
        fromCache=from_cache,
        stale=stale,
    )


__all__ = ["fetch_payload", "search_and_store", "store_new_results"]
