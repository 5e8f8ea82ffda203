"""
Pydantic schema definitions shared by the API and the paging client.

Field names follow the JSON the browser front-end already consumes, which is
why they mix ``camelCase`` and ``snake_case`` and why identifiers are exposed
as ``_id``. Track identifiers are always serialized as strings: they exceed
the integer range JavaScript can represent exactly.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PodcastView(_Model):
    id: str = Field(alias="_id")
    explicit: bool = False
    private: bool = False
    topResultFor: List[str] = Field(default_factory=list)
    title: str
    author: str
    image: str = ""
    slug: str = ""
    feed_url: str = ""


class EpisodePodcast(_Model):
    id: str = Field(alias="_id")
    explicit: bool = False
    title: str
    image: str = ""
    hue: str
    slug: str = ""


class Highlight(_Model):
    value: str
    type: str = "hit"


class Highlights(_Model):
    title: List[Highlight] = Field(default_factory=list)


class EpisodeView(_Model):
    id: str = Field(alias="_id")
    podcast_id: str
    description: str
    duration: str
    image: str = ""
    published: str
    timestamp: int
    title: str
    podcast: EpisodePodcast
    mediaURL: str = ""
    hasVideo: bool = False
    highlights: Highlights = Field(default_factory=Highlights)


class Pagination(_Model):
    offset: int
    limit: int
    total: int
    hasMore: bool


class ResultsPage(_Model):
    """One page of stored results; podcasts and episodes share the window."""

    podcasts: List[PodcastView] = Field(default_factory=list)
    episodes: List[EpisodeView] = Field(default_factory=list)
    pagination: Pagination | None = None


class SearchSummary(_Model):
    """What a fetch-and-store pass did for one search term."""

    message: str = "Search completed and results saved"
    searchTerm: str
    resultCount: int = 0
    newPodcastsCount: int = 0
    newEpisodesCount: int = 0
    totalNewResults: int = 0
    fromCache: bool = False
    stale: bool = False


class ErrorBody(_Model):
    error: str
