"""Application API routers."""

from fastapi import APIRouter

from .routes.metrics import router as metrics_router
from .routes.results import router as results_router
from .routes.search import router as search_router

router = APIRouter()
router.include_router(search_router)
router.include_router(results_router)
router.include_router(metrics_router)

__all__ = ["router"]
