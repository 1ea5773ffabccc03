# imdb_tv/services/tv_show_parser.py

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..config import PROVIDER_ID, get_configuration, logger
from ..models import MediaMetadata, MediaScrapeOptions, MediaType
from .document_service import DocumentCache, DocumentService
from .scrapers import get_episode_metadata, get_tv_show_metadata
from .site_definitions import ImdbSiteDefinition, get_site_definition

CATEGORY_TV = "tv"
UNWANTED_SEARCH_RESULTS = re.compile(
    r".*\((TV Movies|TV Episode|Short|Video Game)\).*"
)


@dataclass(frozen=True)
class ParserConfig:
    """Everything that differs between parser flavours, in one place."""

    site: ImdbSiteDefinition
    category: str = CATEGORY_TV
    unwanted_pattern: re.Pattern[str] | None = None

    def is_unwanted(self, result_label: str) -> bool:
        """True when a search-result label names a category this parser skips."""
        if self.unwanted_pattern is None or not result_label:
            return False
        return bool(self.unwanted_pattern.match(result_label))


class ImdbTvShowParser:
    """
    Entry point for TV metadata: dispatches show and episode requests to
    their assemblers and returns a record for every request.
    """

    def __init__(
        self, config: ParserConfig, documents: DocumentService | None = None
    ) -> None:
        self.config = config
        self.documents = documents or DocumentService(charset=config.site.charset)

    async def get_metadata(self, options: MediaScrapeOptions) -> MediaMetadata:
        if options.type == MediaType.TV_SHOW:
            md = await get_tv_show_metadata(options, self.documents, self.config.site)
        elif options.type == MediaType.TV_EPISODE:
            md = await get_episode_metadata(options, self.documents, self.config.site)
        else:
            logger.info(f"[IMDB] Unsupported media type for TV parser: {options.type}")
            md = MediaMetadata(provider_id=PROVIDER_ID)

        md.provider_id = PROVIDER_ID
        return md


def build_parser(settings: dict[str, Any] | None = None) -> ImdbTvShowParser:
    """Creates a parser from the [imdb] settings (read from config.ini if omitted)."""
    if settings is None:
        settings = get_configuration()

    site = get_site_definition(settings["site"])
    config = ParserConfig(
        site=site,
        category=CATEGORY_TV,
        unwanted_pattern=(
            UNWANTED_SEARCH_RESULTS if settings["filter_unwanted_categories"] else None
        ),
    )
    documents = DocumentService(
        charset=site.charset,
        timeout=settings["request_timeout_seconds"],
        cache=DocumentCache(ttl=settings["cache_ttl_seconds"]),
    )
    return ImdbTvShowParser(config, documents)
