"""Redis-backed upstream payload cache with last-good fallback."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from redis import Redis


@dataclass(frozen=True)
class CachePolicy:
    search_ttl: int = 900
    last_good_ttl: int = 86_400


@dataclass(frozen=True)
class CacheRecord:
    value: Mapping[str, Any]
    stale: bool
    age_seconds: int


def normalize_term(term: str) -> str:
    return " ".join(term.split()).lower()


class CacheClient:
    def __init__(
        self,
        redis_client: Redis,
        policy: CachePolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._redis = redis_client
        self._policy = policy or CachePolicy()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def search_key(term: str) -> str:
        return f"itunes:search:{normalize_term(term)}"

    def set_search(self, term: str, payload: Mapping[str, Any]) -> None:
        self._set_value(self.search_key(term), payload, self._policy.search_ttl)

    def get_search(self, term: str, allow_stale: bool = False) -> CacheRecord | None:
        """Return the fresh payload, or the last-good copy when ``allow_stale``."""

        return self._get_value(self.search_key(term), allow_stale=allow_stale)

    # Internal helpers ------------------------------------------------------
    def _set_value(self, key: str, payload: Mapping[str, Any], ttl: int) -> None:
        envelope = {
            "stored_at": self._clock().isoformat(),
            "ttl": ttl,
            "value": payload,
        }
        serialized = json.dumps(envelope, default=str)
        self._redis.setex(name=key, time=ttl, value=serialized)
        self._redis.setex(name=f"{key}:last_good", time=self._policy.last_good_ttl, value=serialized)

    def _get_value(self, key: str, allow_stale: bool) -> CacheRecord | None:
        raw = self._redis.get(key)
        from_last_good = False
        if raw is None:
            if not allow_stale:
                return None
            raw = self._redis.get(f"{key}:last_good")
            from_last_good = True
            if raw is None:
                return None
        envelope = json.loads(raw)
        stored_at = datetime.fromisoformat(envelope["stored_at"])
        age = int((self._clock() - stored_at).total_seconds())
        stale = from_last_good or age > envelope["ttl"]
        return CacheRecord(value=envelope["value"], stale=stale, age_seconds=age)


__all__ = ["CacheClient", "CachePolicy", "CacheRecord", "normalize_term"]
