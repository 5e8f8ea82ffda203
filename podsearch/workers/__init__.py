"""Celery worker scaffolding and search warming workflows.

These functions are written to be testable by injecting the search callable.
"""

from __future__ import annotations

from .warm import warm_terms

__all__ = ["warm_terms"]
