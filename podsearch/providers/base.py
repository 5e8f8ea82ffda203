"""Shared provider utilities: circuit breaker and retry wrapper."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from tenacity import Retrying, stop_after_attempt, wait_random_exponential

T = TypeVar("T")


class CircuitBreakerOpen(RuntimeError):
    """Raised when the provider circuit is open and calls should be skipped."""


@dataclass
class CircuitBreaker:
    """Consecutive-failure breaker with a cool-down.

    After ``max_failures`` failures calls are refused for ``reset_after``
    seconds. Then a single trial call is let through: success closes the
    circuit, failure opens it for another cool-down.
    """

    max_failures: int = 3
    failure_count: int = 0
    reset_after: float = 30.0
    opened_at: Optional[float] = None
    clock: Callable[[], float] = field(default_factory=lambda: time.monotonic, repr=False)

    @property
    def is_open(self) -> bool:
        return self.failure_count >= self.max_failures

    def check(self) -> None:
        if not self.is_open:
            return
        now = self.clock()
        if self.opened_at is None or now - self.opened_at >= self.reset_after:
            # Half-open: restart the cool-down so only this call goes through
            self.opened_at = now
            return
        raise CircuitBreakerOpen("catalog provider circuit open; skip call")

    def success(self) -> None:
        self.failure_count = 0
        self.opened_at = None

    def failure(self) -> None:
        self.failure_count += 1
        if self.is_open:
            self.opened_at = self.clock()


def execute_with_retry(
    callable_: Callable[[], T],
    max_attempts: int = 3,
    wait_min: float = 0.5,
    wait_max: float = 4.0,
) -> T:
    retry = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_random_exponential(min=wait_min, max=wait_max),
        reraise=True,
    )
    for attempt in retry:
        with attempt:
            return callable_()
    raise RuntimeError("Retry loop exhausted")


__all__ = ["CircuitBreaker", "CircuitBreakerOpen", "execute_with_retry"]
