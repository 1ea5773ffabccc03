from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from ...config import PROVIDER_ID, logger
from ...models import MediaMetadata, MediaScrapeOptions, MediaType
from ...utils import build_accept_language, clean_string, own_text
from ..document_service import DocumentService
from ..site_definitions import ImdbSiteDefinition
from .identifiers import TITLE_LINK_PREFIX, extract_imdb_id
from .ratings import parse_rating

# season.episode as printed in the first column, e.g. "3.12"
_SEASON_EPISODE_PATTERN = re.compile(r"(\d+)\.(\d+)")


def _parse_row(row: Tag, provider_id: str) -> MediaMetadata | None:
    row_text = clean_string(row.get_text(" "))
    match = _SEASON_EPISODE_PATTERN.search(row_text)
    if not match:
        return None

    try:
        season = int(match.group(1))
        episode = int(match.group(2))
    except ValueError as e:
        logger.warning(f"[IMDB] failed parsing: {row_text} for ep data; {e}")
        return None

    anchor = row.find("a", href=lambda href: bool(href) and href.startswith(TITLE_LINK_PREFIX))
    if not isinstance(anchor, Tag):
        logger.warning(f"[IMDB] failed parsing: {row_text} for ep data; no title link")
        return None

    entry = MediaMetadata(provider_id=provider_id, media_type=MediaType.TV_EPISODE)
    entry.season_number = season
    entry.episode_number = episode
    entry.title = clean_string(anchor.get_text())

    imdb_id = extract_imdb_id(str(anchor.get("href", "")))
    if imdb_id:
        entry.set_id(provider_id, imdb_id)

    cols = row.find_all("td")
    if len(cols) >= 4:
        # rating is the third column, vote count the fourth
        result = parse_rating(own_text(cols[2]), own_text(cols[3]), provider_id)
        if result.ok:
            entry.add_rating(result.value)
        else:
            entry.record_skip(result)

    return entry


def parse_episode_list(
    soup: BeautifulSoup, provider_id: str = PROVIDER_ID
) -> list[MediaMetadata]:
    """
    Scans every table row of an episode date list for episodes.

    Rows that do not look like episodes are skipped; the result keeps the
    document order.
    """
    episodes: list[MediaMetadata] = []
    for table in soup.find_all("table"):
        if not isinstance(table, Tag):
            continue
        for row in table.find_all("tr"):
            if not isinstance(row, Tag):
                continue
            try:
                entry = _parse_row(row, provider_id)
            except Exception as e:
                logger.warning(
                    f"[IMDB] failed parsing: {clean_string(row.get_text(' '))} "
                    f"for ep data; {e}"
                )
                continue
            if entry is not None:
                episodes.append(entry)
    return episodes


async def get_episode_list(
    options: MediaScrapeOptions,
    documents: DocumentService,
    site: ImdbSiteDefinition,
) -> list[MediaMetadata]:
    """Fetches the episode date list of a show (e.g. /title/tt0491738/epdate)."""
    imdb_id = (options.imdb_id or "").strip()
    if not imdb_id:
        return []

    soup = await documents.fetch(
        site.url(f"/title/{imdb_id}/epdate"),
        build_accept_language(options.language, options.country),
    )
    episodes = parse_episode_list(soup)
    logger.info(f"[IMDB] Found {len(episodes)} episode(s) for {imdb_id}")
    return episodes
