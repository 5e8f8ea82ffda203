from __future__ import annotations

from celery import shared_task

from podsearch.dependencies import get_settings
from podsearch.services.search import search_and_store
from podsearch.workers import warm_terms


@shared_task(name="tasks.search_refresh")
def search_refresh() -> str:
    terms = get_settings().warm_terms()
    if not terms:
        return "No WARM_SEARCH_TERMS configured; skipping"
    # Bypass the payload cache so a refresh really asks upstream
    outcome = warm_terms(terms, lambda t: search_and_store(t, use_cache=False))
    stored = sum(n for n in outcome.values() if n > 0)
    failed = sum(1 for n in outcome.values() if n < 0)
    return f"Refreshed {len(terms)} terms: {stored} new results, {failed} failed"
