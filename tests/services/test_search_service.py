from __future__ import annotations

import httpx
import pytest

from podsearch.errors import SearchTermRequired, UpstreamError
from podsearch.providers import ITunesClient
from podsearch.providers.itunes import ITunesResult, parse_search_payload
from podsearch.services import search as svc

from samples import EPISODE_ONE, NO_TRACK_ID, PODCAST, search_payload


def itunes_client(handler) -> ITunesClient:
    return ITunesClient(
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        base_url="https://itunes.test",
        max_attempts=1,
    )


def serving(payload, calls: dict | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls["n"] = calls.get("n", 0) + 1
        return httpx.Response(200, json=payload)

    return itunes_client(handler)


def failing(calls: dict | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls["n"] = calls.get("n", 0) + 1
        return httpx.Response(500, json={})

    return itunes_client(handler)


class ExplodingRepo:
    def __getattr__(self, name):  # noqa: ANN001
        raise AssertionError(f"repository should not be touched ({name})")


def test_store_new_results_inserts_unique_new_items(itunes_payload, catalog_repo) -> None:
    results = parse_search_payload(itunes_payload).results

    assert svc.store_new_results("coffee", results, catalog_repo) == (1, 2)
    assert svc.store_new_results("coffee", results, catalog_repo) == (0, 0)

    podcasts, _ = catalog_repo.find_podcasts("daily", 0, 10)
    assert podcasts[0].feed_url == PODCAST["feedUrl"]
    assert podcasts[0].search_term == "coffee"
    assert podcasts[0].explicit is False


def test_store_keeps_first_search_term(catalog_repo) -> None:
    svc.store_new_results("coffee", parse_search_payload(search_payload(EPISODE_ONE)).results, catalog_repo)
    svc.store_new_results("sunday", parse_search_payload(search_payload(EPISODE_ONE)).results, catalog_repo)

    episodes, total = catalog_repo.find_episodes("Sunday Read", 0, 10)
    assert total == 1
    assert episodes[0].search_term == "coffee"
    assert episodes[0].description == EPISODE_ONE["description"]
    assert episodes[0].episode_url == EPISODE_ONE["episodeUrl"]


def test_search_and_store_reports_counts(itunes_payload, catalog_repo) -> None:
    summary = svc.search_and_store("  coffee ", client=serving(itunes_payload), repo=catalog_repo, use_cache=False)

    assert summary.searchTerm == "coffee"
    assert summary.resultCount == 5
    assert summary.newPodcastsCount == 1
    assert summary.newEpisodesCount == 2
    assert summary.totalNewResults == 3
    assert summary.fromCache is False


def test_search_without_track_ids_skips_the_store() -> None:
    payload = search_payload(NO_TRACK_ID)
    summary = svc.search_and_store("someone", client=serving(payload), repo=ExplodingRepo(), use_cache=False)

    assert summary.resultCount == 1
    assert summary.totalNewResults == 0


@pytest.mark.parametrize("term", [None, "", "   "])
def test_blank_term_is_rejected(term) -> None:
    with pytest.raises(SearchTermRequired):
        svc.search_and_store(term, client=failing(), repo=ExplodingRepo(), use_cache=False)


def test_cached_payload_avoids_upstream(itunes_payload, catalog_repo, search_cache) -> None:
    calls: dict = {}
    client = serving(itunes_payload, calls)

    first = svc.search_and_store("coffee", client=client, repo=catalog_repo, cache=search_cache)
    second = svc.search_and_store("Coffee", client=client, repo=catalog_repo, cache=search_cache)

    assert calls["n"] == 1
    assert first.fromCache is False and first.totalNewResults == 3
    assert second.fromCache is True and second.totalNewResults == 0


def test_upstream_failure_falls_back_to_last_good(itunes_payload, catalog_repo, search_cache, redis_client) -> None:
    search_cache.set_search("coffee", itunes_payload)
    redis_client.delete(search_cache.search_key("coffee"))
    calls: dict = {}

    summary = svc.search_and_store("coffee", client=failing(calls), repo=catalog_repo, cache=search_cache)

    assert calls["n"] == 1
    assert summary.stale is True
    assert summary.totalNewResults == 3


def test_upstream_failure_without_cache_raises() -> None:
    with pytest.raises(UpstreamError):
        svc.search_and_store("coffee", client=failing(), repo=ExplodingRepo(), use_cache=False)


def test_malformed_upstream_payload_raises(catalog_repo) -> None:
    payload = {"resultCount": 1, "results": [{"trackId": "not-a-number"}]}
    with pytest.raises(UpstreamError):
        svc.search_and_store("coffee", client=serving(payload), repo=catalog_repo, use_cache=False)


def test_malformed_payload_keeps_last_good_copy(itunes_payload, catalog_repo, search_cache, redis_client) -> None:
    search_cache.set_search("coffee", itunes_payload)
    redis_client.delete(search_cache.search_key("coffee"))

    summary = svc.search_and_store(
        "coffee", client=serving({"resultCount": 1, "results": "oops"}), repo=catalog_repo, cache=search_cache
    )

    assert summary.stale is True
    assert summary.totalNewResults == 3
    assert search_cache.get_search("coffee") is None
    assert search_cache.get_search("coffee", allow_stale=True).value == itunes_payload


def test_broken_redis_degrades_to_upstream(itunes_payload, catalog_repo, monkeypatch) -> None:
    import redis

    from podsearch.cache import CacheClient

    class DownRedis:
        def get(self, *_args, **_kwargs):
            raise redis.ConnectionError("down")

        def setex(self, *_args, **_kwargs):
            raise redis.ConnectionError("down")

    summary = svc.search_and_store(
        "coffee", client=serving(itunes_payload), repo=catalog_repo, cache=CacheClient(DownRedis())
    )
    assert summary.totalNewResults == 3


def test_default_wiring_uses_settings(itunes_payload, catalog_engine, monkeypatch) -> None:
    monkeypatch.setattr(svc, "_get_engine", lambda: catalog_engine)
    monkeypatch.setattr(svc, "_get_client", lambda: serving(itunes_payload))
    monkeypatch.setattr(svc, "_get_cache", lambda: None)

    summary = svc.search_and_store("coffee")
    assert summary.totalNewResults == 3


def test_podcast_title_falls_back_to_collection_name() -> None:
    result = ITunesResult.model_validate(
        {"wrapperType": "track", "kind": "podcast", "trackId": 7, "collectionName": "Hard Fork"}
    )
    assert svc._podcast_record("fork", result).track_name == "Hard Fork"
