# imdb_tv/models.py

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any

SEASON_NR = "seasonNr"
EPISODE_NR = "episodeNr"
UNKNOWN_NUMBER = -1


class MediaType(str, Enum):
    TV_SHOW = "tv_show"
    TV_EPISODE = "tv_episode"
    MOVIE = "movie"


class CastType(str, Enum):
    ACTOR = "actor"
    DIRECTOR = "director"
    WRITER = "writer"


@dataclass
class CastMember:
    """A person credited on a show or episode page."""

    name: str = ""
    character: str = ""
    type: CastType = CastType.ACTOR
    image_url: str = ""
    profile_url: str = ""


@dataclass
class MediaRating:
    provider_id: str
    rating: float
    votes: int = 0
    max_value: int = 10


@dataclass(frozen=True)
class FieldResult:
    """
    Outcome of extracting one optional field.

    A result either carries a value or the reason the field was skipped, so
    callers never need to catch anything to learn why a field is missing.
    """

    field: str
    value: Any = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, field_name: str, value: Any) -> FieldResult:
        return cls(field=field_name, value=value)

    @classmethod
    def skipped(cls, field_name: str, reason: str) -> FieldResult:
        return cls(field=field_name, reason=reason)


@dataclass
class MediaMetadata:
    """
    Mutable accumulator filled in by the page parsers.

    A record with nothing but its provider id set is the placeholder returned
    whenever there is nothing to scrape.
    """

    provider_id: str
    media_type: MediaType | None = None
    ids: dict[str, str] = field(default_factory=dict)
    title: str = ""
    original_title: str = ""
    year: int = 0
    plot: str = ""
    tagline: str = ""
    release_date: date | None = None
    season_number: int = UNKNOWN_NUMBER
    episode_number: int = UNKNOWN_NUMBER
    runtime: int = 0
    certification: str = ""
    poster_url: str = ""
    genres: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    spoken_languages: list[str] = field(default_factory=list)
    cast_members: list[CastMember] = field(default_factory=list)
    ratings: list[MediaRating] = field(default_factory=list)
    skipped_fields: list[FieldResult] = field(default_factory=list)

    def set_id(self, provider_id: str, value: str | None) -> None:
        if value:
            self.ids[provider_id] = value

    def get_id(self, provider_id: str) -> str:
        return self.ids.get(provider_id, "")

    def add_cast_member(self, member: CastMember) -> None:
        self.cast_members.append(member)

    def add_rating(self, rating: MediaRating) -> None:
        self.ratings.append(rating)

    def record_skip(self, result: FieldResult) -> None:
        if not result.ok:
            self.skipped_fields.append(result)

    def get_cast_by_type(self, cast_type: CastType) -> list[CastMember]:
        return [member for member in self.cast_members if member.type == cast_type]

    def is_placeholder(self) -> bool:
        return (
            not self.ids
            and not self.title
            and self.season_number == UNKNOWN_NUMBER
            and self.episode_number == UNKNOWN_NUMBER
            and not self.cast_members
            and not self.ratings
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["media_type"] = self.media_type.value if self.media_type else None
        data["release_date"] = (
            self.release_date.isoformat() if self.release_date else None
        )
        data["cast_members"] = [
            {**member, "type": member["type"].value} for member in data["cast_members"]
        ]
        data.pop("skipped_fields")
        return data


@dataclass
class SearchResult:
    """A hit from an earlier search; only its identifier is used here."""

    imdb_id: str
    title: str = ""
    year: int = 0


@dataclass
class MediaScrapeOptions:
    type: MediaType
    language: str = "en"
    country: str = "US"
    result: SearchResult | None = None
    imdb_id: str = ""
    ids: dict[str, Any] = field(default_factory=dict)

    def get_id_as_int_or_default(self, key: str, default: int) -> int:
        value = self.ids.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default
