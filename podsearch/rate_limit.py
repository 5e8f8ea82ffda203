"""Provider rate limit factories based on Settings."""

from __future__ import annotations

import time
from typing import Callable

from core.ratelimiter import RateLimiter

from .config import Settings

# One limiter per provider name, shared by every client built in this process
_REGISTRY: dict[str, RateLimiter] = {}


def build_limiter(capacity: float, refill_rate: float, now: Callable[[], float] | None = None) -> RateLimiter:
    return RateLimiter(capacity=capacity, refill_rate_per_sec=refill_rate, now=now or time.monotonic)


def limiter_for_provider(provider: str, settings: Settings) -> RateLimiter:
    p = provider.lower()
    if p in _REGISTRY:
        return _REGISTRY[p]
    if p == "itunes":
        lim = build_limiter(settings.itunes_capacity, settings.itunes_refill_rate)
    else:
        # Default conservative limiter
        lim = build_limiter(1.0, 0.1)
    _REGISTRY[p] = lim
    return lim


def reset_limiters() -> None:
    _REGISTRY.clear()


def limiter_metrics() -> dict:
    return {name: lim.snapshot() for name, lim in _REGISTRY.items()}
