from __future__ import annotations

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from podsearch.errors import SearchTermRequired, UpstreamError
from podsearch.schemas import ErrorBody, SearchSummary
from podsearch.services import search as search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get(
    "/search",
    response_model=SearchSummary,
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}, 502: {"model": ErrorBody}},
)
def search(
    q: str | None = Query(default=None, description="Search term forwarded to iTunes"),
    offset: int = Query(default=0, ge=0, description="Accepted for client symmetry; upstream is not paged"),
    limit: int = Query(default=20, ge=1, le=200),
):
    try:
        return search_service.search_and_store(q)
    except SearchTermRequired as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except UpstreamError as exc:
        logger.error("Search API upstream error for %r: %s", q, exc)
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(exc)})
    except Exception:  # noqa: BLE001
        logger.exception("Search API error for %r", q)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"}
        )
