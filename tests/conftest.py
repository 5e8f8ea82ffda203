import sys
from pathlib import Path

import fakeredis
import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool

from samples import EPISODE_ONE, EPISODE_TWO, NO_TRACK_ID, PODCAST, search_payload

ROOT = Path(__file__).resolve().parent.parent
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


@pytest.fixture()
def itunes_payload():
    """Upstream body with one podcast, two episodes, a duplicate and an entry without track id."""

    return search_payload(PODCAST, EPISODE_ONE, EPISODE_TWO, dict(EPISODE_ONE), NO_TRACK_ID)


@pytest.fixture()
def catalog_engine():
    """Provide an in-memory SQLite engine with the results tables created."""

    from podsearch.db import create_schema

    engine = sa.create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def catalog_repo(catalog_engine):
    from podsearch.repos.sql_catalog import SqlCatalogRepo

    return SqlCatalogRepo(catalog_engine)


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def search_cache(redis_client):
    from podsearch.cache import CacheClient

    return CacheClient(redis_client)
