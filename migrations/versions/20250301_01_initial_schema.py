"""Initial schema for PODSEARCH: podcasts and podcast_episodes."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20250301_01"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("timezone('utc', now())"),
    )


def upgrade() -> None:
    op.create_table(
        "podcasts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("track_id", sa.BigInteger(), nullable=False),
        sa.Column("search_term", sa.Text(), nullable=False),
        sa.Column("track_name", sa.Text(), nullable=True),
        sa.Column("artist_name", sa.Text(), nullable=True),
        sa.Column("artwork_url_100", sa.Text(), nullable=True),
        sa.Column("artwork_url_60", sa.Text(), nullable=True),
        sa.Column("view_url", sa.Text(), nullable=True),
        sa.Column("feed_url", sa.Text(), nullable=True),
        sa.Column("primary_genre", sa.Text(), nullable=True),
        sa.Column("explicit", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.UniqueConstraint("track_id", name="podcasts_track_id_key"),
    )
    op.create_index("ix_podcasts_created_at", "podcasts", ["created_at"])

    op.create_table(
        "podcast_episodes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("track_id", sa.BigInteger(), nullable=False),
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
        _created_at(),
        sa.UniqueConstraint("track_id", name="podcast_episodes_track_id_key"),
    )
    op.create_index("ix_podcast_episodes_created_at", "podcast_episodes", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_podcast_episodes_created_at", table_name="podcast_episodes")
    op.drop_table("podcast_episodes")
    op.drop_index("ix_podcasts_created_at", table_name="podcasts")
    op.drop_table("podcasts")
