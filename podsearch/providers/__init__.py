"""External catalog provider interfaces."""

from .base import CircuitBreaker, CircuitBreakerOpen
from .itunes import ITunesClient, ITunesResult, ITunesSearchResponse

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerOpen",
    "ITunesClient",
    "ITunesResult",
    "ITunesSearchResponse",
]
