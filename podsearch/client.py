"""Paging client for the search API.

Each page is two calls: ``/api/search`` first, so the store picks up anything
new upstream, then ``/api/results`` for the stored window at the requested
offset. ``SearchPager`` accumulates pages for one term the way the browser
front-end does for infinite scrolling.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

import httpx

from .schemas import EpisodeView, PodcastView, ResultsPage

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
# Pages fetched even when the store reports nothing more (empty ones included),
# giving repeated upstream searches a chance to add rows
MAX_SEARCH_ROUNDS = 5
STALE_SECONDS = 300.0
# Relative URLs without a client base raise InvalidURL; bad JSON and failed validation are ValueErrors
_REQUEST_FAILURES = (httpx.HTTPError, httpx.InvalidURL, ValueError)


class SearchClientError(RuntimeError):
    """Raised when either half of a page fetch fails."""


def next_offset(
    last_page: ResultsPage,
    pages: List[ResultsPage],
    page_size: int = PAGE_SIZE,
    max_rounds: int = MAX_SEARCH_ROUNDS,
) -> Optional[int]:
    """Offset of the page after ``last_page``, or ``None`` when paging is done."""

    if last_page.pagination is not None and last_page.pagination.hasMore:
        return last_page.pagination.offset + last_page.pagination.limit
    if len(pages) < max_rounds:
        return len(pages) * page_size
    return None


class SearchClient:
    def __init__(
        self,
        client: httpx.Client,
        base_url: str = "",
        page_size: int = PAGE_SIZE,
        stale_seconds: float = STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._stale_seconds = stale_seconds
        self._clock = clock
        self._pagers: Dict[str, Tuple[float, SearchPager]] = {}

    def fetch_page(self, term: str, offset: int = 0) -> ResultsPage:
        params = {"q": term, "offset": offset, "limit": self.page_size}
        try:
            response = self._client.get(f"{self._base_url}/api/search", params=params)
            response.raise_for_status()
            # Only the side effect matters; the body is a summary
            response.json()
        except _REQUEST_FAILURES as exc:
            raise SearchClientError("Failed to search") from exc

        try:
            response = self._client.get(f"{self._base_url}/api/results", params=params)
            response.raise_for_status()
            return ResultsPage.model_validate(response.json())
        except _REQUEST_FAILURES as exc:
            raise SearchClientError("Failed to fetch results") from exc

    def pager(self, term: str) -> "SearchPager":
        """Return the pager for ``term``, reusing one created less than the stale time ago."""

        now = self._clock()
        cached = self._pagers.get(term)
        if cached is not None and now - cached[0] <= self._stale_seconds:
            return cached[1]
        pager = SearchPager(self, term)
        self._pagers[term] = (now, pager)
        return pager


class SearchPager:
    def __init__(self, client: SearchClient, term: str) -> None:
        self._client = client
        self.term = term.strip()
        self.pages: List[ResultsPage] = []

    @property
    def enabled(self) -> bool:
        return bool(self.term)

    @property
    def has_next_page(self) -> bool:
        if not self.enabled:
            return False
        if not self.pages:
            return True
        return next_offset(self.pages[-1], self.pages, page_size=self._client.page_size) is not None

    def fetch_next_page(self) -> Optional[ResultsPage]:
        if not self.has_next_page:
            return None
        offset = 0
        if self.pages:
            offset = next_offset(self.pages[-1], self.pages, page_size=self._client.page_size) or 0
        page = self._client.fetch_page(self.term, offset)
        self.pages.append(page)
        logger.debug("Fetched page %d for %r at offset %d", len(self.pages), self.term, offset)
        return page

    @property
    def podcasts(self) -> List[PodcastView]:
        return [p for page in self.pages for p in page.podcasts]

    @property
    def episodes(self) -> List[EpisodeView]:
        return [e for page in self.pages for e in page.episodes]

    @property
    def total_loaded(self) -> int:
        return len(self.podcasts) + len(self.episodes)


__all__ = ["SearchClient", "SearchClientError", "SearchPager", "next_offset"]
