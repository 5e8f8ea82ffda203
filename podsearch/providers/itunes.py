"""iTunes Search API client with retry, validation, and circuit breaker."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from core.ratelimiter import RateLimiter
from .base import CircuitBreaker, execute_with_retry

logger = logging.getLogger(__name__)

PODCAST_KIND = "podcast"
EPISODE_KIND = "podcast-episode"


class ITunesResult(BaseModel):
    """One entry of the ``results`` array; every field is optional upstream."""

    model_config = ConfigDict(extra="ignore")

    wrapperType: Optional[str] = None
    kind: Optional[str] = None
    artistId: Optional[int] = None
    collectionId: Optional[int] = None
    trackId: Optional[int] = None
    artistName: Optional[str] = None
    collectionName: Optional[str] = None
    trackName: Optional[str] = None
    artistViewUrl: Optional[str] = None
    collectionViewUrl: Optional[str] = None
    trackViewUrl: Optional[str] = None
    artworkUrl60: Optional[str] = None
    artworkUrl100: Optional[str] = None
    artworkUrl600: Optional[str] = None
    releaseDate: Optional[str] = None
    collectionExplicitness: Optional[str] = None
    trackExplicitness: Optional[str] = None
    trackTimeMillis: Optional[int] = None
    primaryGenreName: Optional[str] = None
    shortDescription: Optional[str] = None
    description: Optional[str] = None
    feedUrl: Optional[str] = None
    episodeUrl: Optional[str] = None

    @property
    def view_url(self) -> Optional[str]:
        return self.trackViewUrl or self.collectionViewUrl or self.artistViewUrl


class ITunesSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    resultCount: int = 0
    results: List[ITunesResult] = []


class ITunesClient:
    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        limit: int = 200,
        media: str = "podcast",
        entities: str = "podcastEpisode,podcast",
        breaker: CircuitBreaker | None = None,
        timeout: float = 10.0,
        rate_limiter: RateLimiter | None = None,
        max_attempts: int = 3,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._limit = limit
        self._media = media
        self._entities = entities
        self._breaker = breaker or CircuitBreaker()
        self._timeout = timeout
        self._rl = rate_limiter
        self._max_attempts = max_attempts

    def search_raw(self, term: str) -> Mapping[str, Any]:
        """Return the decoded JSON body for ``term``; raises on transport or HTTP errors."""

        self._breaker.check()
        params = {
            "term": term,
            "limit": str(self._limit),
            "media": self._media,
            "entity": self._entities,
        }

        def _call() -> Mapping[str, Any]:
            if self._rl:
                self._rl.block_until_allowed("itunes:/search")
            response = self._client.get(
                f"{self._base_url}/search",
                params=params,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("Unexpected payload type from iTunes")
            return payload

        try:
            payload = execute_with_retry(_call, max_attempts=self._max_attempts)
        except Exception:  # noqa: BLE001
            self._breaker.failure()
            logger.warning("iTunes search failed for %r (failures=%d)", term, self._breaker.failure_count)
            raise
        self._breaker.success()
        return payload

    def search(self, term: str) -> ITunesSearchResponse:
        return parse_search_payload(self.search_raw(term))


def parse_search_payload(payload: Mapping[str, Any]) -> ITunesSearchResponse:
    return ITunesSearchResponse.model_validate(payload)


__all__ = [
    "EPISODE_KIND",
    "ITunesClient",
    "ITunesResult",
    "ITunesSearchResponse",
    "PODCAST_KIND",
    "parse_search_payload",
]
