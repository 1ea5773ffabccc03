from .models import (
    CastMember,
    CastType,
    FieldResult,
    MediaMetadata,
    MediaRating,
    MediaScrapeOptions,
    MediaType,
    SearchResult,
)
from .services.tv_show_parser import ImdbTvShowParser, ParserConfig, build_parser

__all__ = [
    "CastMember",
    "CastType",
    "FieldResult",
    "MediaMetadata",
    "MediaRating",
    "MediaScrapeOptions",
    "MediaType",
    "SearchResult",
    "ImdbTvShowParser",
    "ParserConfig",
    "build_parser",
]
