"""Provider factory utilities.

Constructs the HTTP client, rate limiter, circuit breaker, and catalog client
using Settings.
"""

from __future__ import annotations

import httpx

from podsearch.config import Settings
from podsearch.rate_limit import limiter_for_provider
from .base import CircuitBreaker
from .itunes import ITunesClient

# Breaker state has to outlive a single request to ever open
_BREAKERS: dict[str, CircuitBreaker] = {}


def breaker_for_provider(provider: str, settings: Settings) -> CircuitBreaker:
    p = provider.lower()
    if p not in _BREAKERS:
        _BREAKERS[p] = CircuitBreaker(
            max_failures=settings.itunes_breaker_failures,
            reset_after=settings.itunes_breaker_reset,
        )
    return _BREAKERS[p]


def reset_breakers() -> None:
    _BREAKERS.clear()


def build_http_client(timeout: float = 10.0) -> httpx.Client:
    return httpx.Client(timeout=timeout, headers={"Accept": "application/json"})


def make_itunes_client(settings: Settings, client: httpx.Client | None = None) -> ITunesClient:
    return ITunesClient(
        client=client or build_http_client(timeout=settings.itunes_timeout),
        base_url=settings.itunes_base_url,
        limit=settings.itunes_search_limit,
        media=settings.itunes_media,
        entities=settings.itunes_entities,
        breaker=breaker_for_provider("itunes", settings),
        timeout=settings.itunes_timeout,
        rate_limiter=limiter_for_provider("itunes", settings),
    )


def breaker_metrics() -> dict:
    return {
        name: {"failures": b.failure_count, "open": b.is_open, "opened_at": b.opened_at}
        for name, b in _BREAKERS.items()
    }
