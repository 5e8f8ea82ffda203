"""SQLAlchemy Core table definitions for the results store."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()

podcasts = sa.Table(
    "podcasts",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("track_id", sa.BigInteger(), nullable=False, unique=True),
    sa.Column("search_term", sa.Text(), nullable=False),
    sa.Column("track_name", sa.Text(), nullable=True),
    sa.Column("artist_name", sa.Text(), nullable=True),
    sa.Column("artwork_url_100", sa.Text(), nullable=True),
    sa.Column("artwork_url_60", sa.Text(), nullable=True),
    sa.Column("view_url", sa.Text(), nullable=True),
    sa.Column("feed_url", sa.Text(), nullable=True),
    sa.Column("primary_genre", sa.Text(), nullable=True),
    sa.Column("explicit", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
)

podcast_episodes = sa.Table(
    "podcast_episodes",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("track_id", sa.BigInteger(), nullable=False, unique=True),
    sa.Column("search_term", sa.Text(), nullable=False),
    sa.Column("track_name", sa.Text(), nullable=True),
    sa.Column("artist_name", sa.Text(), nullable=True),
    sa.Column("collection_id", sa.BigInteger(), nullable=True),
    sa.Column("collection_name", sa.Text(), nullable=True),
    sa.Column("artwork_url_100", sa.Text(), nullable=True),
    sa.Column("artwork_url_60", sa.Text(), nullable=True),
    sa.Column("view_url", sa.Text(), nullable=True),
    sa.Column("episode_url", sa.Text(), nullable=True),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("track_time_millis", sa.BigInteger(), nullable=True),
    sa.Column("release_date", sa.Text(), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
)

sa.Index("ix_podcasts_created_at", podcasts.c.created_at)
sa.Index("ix_podcast_episodes_created_at", podcast_episodes.c.created_at)

__all__ = ["metadata", "podcast_episodes", "podcasts"]
