"""Errors raised by the search services and mapped to HTTP status codes by the routes."""

from __future__ import annotations


class SearchTermRequired(ValueError):
    """The request carried no usable search term."""

    def __init__(self, message: str = "Search term is required") -> None:
        super().__init__(message)


class UpstreamError(RuntimeError):
    """The catalog API could not be reached and no cached payload was available."""

    def __init__(self, message: str = "Failed to fetch from iTunes API") -> None:
        super().__init__(message)


def require_term(term: str | None) -> str:
    cleaned = (term or "").strip()
    if not cleaned:
        raise SearchTermRequired()
    return cleaned


__all__ = ["SearchTermRequired", "UpstreamError", "require_term"]
