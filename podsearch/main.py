"""FastAPI application entrypoint for PODSEARCH."""

from __future__ import annotations

import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from .api import router as api_router
from .dependencies import get_settings
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="PODSEARCH API", version="0.1.0")
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.on_event("startup")
def configure_app() -> None:
    """Prime configuration cache and logging during startup."""

    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("PODSEARCH starting (env=%s)", settings.app_env)


@app.get("/health/live", status_code=status.HTTP_200_OK, include_in_schema=False)
def health_live() -> dict[str, str]:
    """Return service liveness."""

    return {"status": "live"}


@app.get("/health/ready", status_code=status.HTTP_200_OK, include_in_schema=False)
def health_ready() -> dict[str, str]:
    """Return readiness information, including environment."""

    settings = get_settings()
    return {"status": "ready", "environment": settings.app_env}


@app.get("/health/startup", status_code=status.HTTP_200_OK, include_in_schema=False)
def health_startup() -> dict[str, str]:
    """Return startup probe information."""

    return {"status": "started"}


__all__ = ["app"]
