from __future__ import annotations

import httpx
import pytest

from podsearch.providers import CircuitBreakerOpen, ITunesClient
from podsearch.providers.base import CircuitBreaker
from podsearch.providers.itunes import EPISODE_KIND, PODCAST_KIND

from samples import EPISODE_ONE, PODCAST, search_payload


def build_mock_client(handler: httpx.MockTransport) -> httpx.Client:
    return httpx.Client(transport=handler)


class TestLimiter:
    __test__ = False

    def __init__(self) -> None:
        self.keys: list[str] = []

    def block_until_allowed(self, key: str) -> None:
        self.keys.append(key)


def test_search_sends_podcast_query_and_parses_results() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=search_payload(PODCAST, EPISODE_ONE))

    limiter = TestLimiter()
    client = ITunesClient(
        client=build_mock_client(httpx.MockTransport(handler)),
        base_url="https://itunes.test/",
        rate_limiter=limiter,
    )
    response = client.search("the daily")

    assert seen["path"] == "/search"
    assert seen["params"] == {
        "term": "the daily",
        "limit": "200",
        "media": "podcast",
        "entity": "podcastEpisode,podcast",
    }
    assert limiter.keys == ["itunes:/search"]
    assert response.resultCount == 2
    podcast, episode = response.results
    assert podcast.kind == PODCAST_KIND
    assert podcast.view_url == PODCAST["trackViewUrl"]
    assert episode.kind == EPISODE_KIND
    assert episode.trackTimeMillis == 1_845_000


def test_view_url_falls_back_to_collection_then_artist() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=search_payload(
                {"trackId": 1, "kind": "podcast", "collectionViewUrl": "c", "artistViewUrl": "a"},
                {"trackId": 2, "kind": "podcast", "artistViewUrl": "a"},
                {"trackId": 3, "kind": "podcast"},
            ),
        )

    client = ITunesClient(client=build_mock_client(httpx.MockTransport(handler)), base_url="https://itunes.test")
    results = client.search("x").results
    assert [r.view_url for r in results] == ["c", "a", None]


def test_search_circuit_breaks_after_failures() -> None:
    call_count = {"value": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        call_count["value"] += 1
        return httpx.Response(503, json={"error": "unavailable"})

    breaker = CircuitBreaker(max_failures=1)
    client = ITunesClient(
        client=build_mock_client(httpx.MockTransport(handler)),
        base_url="https://itunes.test",
        breaker=breaker,
        max_attempts=1,
    )

    with pytest.raises(httpx.HTTPStatusError):
        client.search("daily")
    assert breaker.failure_count == 1

    with pytest.raises(CircuitBreakerOpen):
        client.search("daily")
    assert call_count["value"] == 1


def test_success_resets_breaker() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=search_payload())

    breaker = CircuitBreaker(max_failures=3, failure_count=2)
    client = ITunesClient(
        client=build_mock_client(httpx.MockTransport(handler)), base_url="https://itunes.test", breaker=breaker
    )
    assert client.search("daily").results == []
    assert breaker.failure_count == 0


def test_non_object_payload_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "object"])

    client = ITunesClient(
        client=build_mock_client(httpx.MockTransport(handler)), base_url="https://itunes.test", max_attempts=1
    )
    with pytest.raises(ValueError):
        client.search_raw("daily")


def test_breaker_lets_a_trial_call_through_after_cool_down() -> None:
    now = {"t": 0.0}
    status = {"code": 503}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status["code"], json={"resultCount": 0, "results": []})

    breaker = CircuitBreaker(max_failures=2, reset_after=30.0, clock=lambda: now["t"])
    client = ITunesClient(
        client=build_mock_client(httpx.MockTransport(handler)),
        base_url="https://itunes.test",
        breaker=breaker,
        max_attempts=1,
    )

    for _ in range(2):
        with pytest.raises(httpx.HTTPStatusError):
            client.search_raw("daily")
    assert breaker.is_open

    now["t"] = 29.0
    with pytest.raises(CircuitBreakerOpen):
        client.search_raw("daily")

    # trial call fails: open for another full cool-down
    now["t"] = 30.0
    with pytest.raises(httpx.HTTPStatusError):
        client.search_raw("daily")
    now["t"] = 45.0
    with pytest.raises(CircuitBreakerOpen):
        client.search_raw("daily")

    status["code"] = 200
    now["t"] = 61.0
    assert client.search_raw("daily") == {"resultCount": 0, "results": []}
    assert breaker.is_open is False
    assert breaker.opened_at is None
