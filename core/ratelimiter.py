"""Token-bucket rate limiter for outbound catalog calls.

Usage:
    rl = RateLimiter(capacity=5, refill_rate_per_sec=0.33, now=time.monotonic)
    rl.block_until_allowed("itunes:/search")

The clock and sleep functions are injectable so tests can drive time by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from time import sleep as _sleep
from typing import Callable, Dict


NowFunc = Callable[[], float]
SleepFunc = Callable[[float], None]


@dataclass
class Bucket:
    capacity: float
    tokens: float
    refill_rate_per_sec: float
    last_refill_ts: float
    allowed: int = 0
    denied: int = 0
    delayed: int = 0

    def refill(self, now_ts: float) -> None:
        if now_ts <= self.last_refill_ts:
            return
        delta = now_ts - self.last_refill_ts
        self.tokens = min(self.capacity, self.tokens + delta * self.refill_rate_per_sec)
        self.last_refill_ts = now_ts

    def take(self) -> bool:
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            self.allowed += 1
            return True
        return False

    def seconds_until_token(self) -> float:
        if self.refill_rate_per_sec <= 0:
            raise ValueError("bucket never refills; refill_rate_per_sec must be positive")
        return max(0.0, (1.0 - self.tokens) / self.refill_rate_per_sec)

    def counters(self) -> dict:
        return {"allowed": self.allowed, "denied": self.denied, "delayed": self.delayed}


@dataclass
class RateLimiter:
    capacity: float
    refill_rate_per_sec: float
    now: NowFunc
    sleep: SleepFunc = _sleep
    buckets: Dict[str, Bucket] = field(default_factory=dict)

    def _bucket(self, key: str) -> Bucket:
        bucket = self.buckets.get(key)
        if bucket is None:
            bucket = Bucket(
                capacity=self.capacity,
                tokens=self.capacity,
                refill_rate_per_sec=self.refill_rate_per_sec,
                last_refill_ts=self.now(),
            )
            self.buckets[key] = bucket
        return bucket

    def try_acquire(self, key: str) -> bool:
        bucket = self._bucket(key)
        bucket.refill(self.now())
        if bucket.take():
            return True
        bucket.denied += 1
        return False

    def block_until_allowed(self, key: str) -> None:
        bucket = self._bucket(key)
        while True:
            bucket.refill(self.now())
            if bucket.take():
                return
            bucket.delayed += 1
            self.sleep(bucket.seconds_until_token())

    def metrics(self, key: str) -> dict:
        bucket = self.buckets.get(key)
        if bucket is None:
            return {"allowed": 0, "denied": 0, "delayed": 0}
        return bucket.counters()

    def snapshot(self) -> Dict[str, dict]:
        return {key: bucket.counters() for key, bucket in self.buckets.items()}
