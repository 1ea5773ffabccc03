from __future__ import annotations

from ...config import PROVIDER_ID, logger
from ...models import MediaMetadata, MediaScrapeOptions, MediaType
from ...utils import build_accept_language, is_valid_imdb_id
from ..document_service import DocumentService
from ..site_definitions import ImdbSiteDefinition
from .combined_page import parse_combined_page, parse_plotsummary_page


def resolve_show_id(options: MediaScrapeOptions) -> str | None:
    """Prefers the id of a previous search result over the one passed directly."""
    if options.result is not None and is_valid_imdb_id(options.result.imdb_id):
        return options.result.imdb_id.strip()
    if is_valid_imdb_id(options.imdb_id):
        return options.imdb_id.strip()
    return None


async def get_tv_show_metadata(
    options: MediaScrapeOptions,
    documents: DocumentService,
    site: ImdbSiteDefinition,
) -> MediaMetadata:
    md = MediaMetadata(provider_id=PROVIDER_ID)

    imdb_id = resolve_show_id(options)
    if imdb_id is None:
        return md

    logger.debug(f"[IMDB] Fetching show metadata for {imdb_id}")
    accept_language = build_accept_language(options.language, options.country)
    md.media_type = MediaType.TV_SHOW

    soup = await documents.fetch(site.url(f"/title/{imdb_id}/combined"), accept_language)
    parse_combined_page(soup, options, md, site.site)

    soup = await documents.fetch(site.url(f"/title/{imdb_id}/plotsummary"), accept_language)
    parse_plotsummary_page(soup, md)

    md.set_id(PROVIDER_ID, imdb_id)
    return md
