from __future__ import annotations

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from podsearch.errors import SearchTermRequired
from podsearch.schemas import ErrorBody, ResultsPage
from podsearch.services import results as results_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["results"])


@router.get("/results", response_model=ResultsPage, responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}})
def results(
    q: str | None = Query(default=None, description="Substring matched against stored results"),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1, le=100),
):
    try:
        return results_service.query_results(q, offset=offset, limit=limit)
    except SearchTermRequired as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except Exception:  # noqa: BLE001
        logger.exception("Results API error for %r", q)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"}
        )
