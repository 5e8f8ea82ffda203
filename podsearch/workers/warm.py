"""Search warming: run fetch-and-store for a fixed list of terms.

Keeps popular terms populated in the store ahead of user traffic. A failing
term is logged and skipped so one bad upstream response does not starve the
remaining terms. Store errors are handled the same way.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Sequence

from sqlalchemy.exc import SQLAlchemyError

from podsearch.errors import UpstreamError
from podsearch.schemas import SearchSummary

logger = logging.getLogger(__name__)


def warm_terms(terms: Sequence[str], search: Callable[[str], SearchSummary]) -> Dict[str, int]:
    """Return new-result counts per term; failed terms map to ``-1``."""

    outcome: Dict[str, int] = {}
    for term in terms:
        try:
            summary = search(term)
        except UpstreamError as exc:
            logger.warning("Warming %r failed: %s", term, exc)
            outcome[term] = -1
            continue
        except SQLAlchemyError:
            logger.exception("Warming %r failed to store results", term)
            outcome[term] = -1
            continue
        outcome[term] = summary.totalNewResults
    return outcome
