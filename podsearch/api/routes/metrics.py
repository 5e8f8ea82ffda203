from __future__ import annotations

from fastapi import APIRouter

from podsearch.providers.factory import breaker_metrics
from podsearch.rate_limit import limiter_metrics

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def get_metrics():
    """Upstream protection state: token buckets and circuit breakers per provider."""

    return {"rate_limiter": limiter_metrics(), "circuit_breaker": breaker_metrics()}
