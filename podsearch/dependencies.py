"""Settings access shared by the routes, services, workers and scripts."""

from __future__ import annotations

from functools import lru_cache

from .config import Settings


@lru_cache
def get_settings() -> Settings:
    """Settings are read from the environment once per process."""

    return Settings()


__all__ = ["get_settings"]
