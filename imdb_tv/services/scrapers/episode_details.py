from __future__ import annotations

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ...config import FORCED_DETAIL_LANGUAGE, PROVIDER_ID, logger
from ...models import (
    EPISODE_NR,
    SEASON_NR,
    UNKNOWN_NUMBER,
    CastMember,
    CastType,
    FieldResult,
    MediaMetadata,
    MediaScrapeOptions,
    MediaType,
)
from ...utils import build_accept_language, clean_string, own_text, parse_day_month_year
from ..document_service import DocumentService
from ..site_definitions import ImdbSiteDefinition
from .cast import parse_actor_rows
from .episode_list import get_episode_list
from .identifiers import TITLE_LINK_PREFIX

CONTENT_REGION_ID = "tn15content"
PERSON_ITEMTYPE = "http://schema.org/Person"
CREATED_BY_MARKER = "(created by)"


def _placeholder() -> MediaMetadata:
    return MediaMetadata(provider_id=PROVIDER_ID)


def _find_wanted_episode(
    episodes: list[MediaMetadata], season: int, episode: int
) -> MediaMetadata | None:
    for candidate in episodes:
        if candidate.season_number == season and candidate.episode_number == episode:
            return candidate
    return None


def _child_position(region: Tag, element: Tag | None) -> int | None:
    """Index of ``element`` among the direct children of ``region``."""
    if element is None or element.parent is not region:
        return None
    return sum(1 for _ in element.previous_siblings)


def _text_nodes_with_predecessors(region: Tag) -> list[tuple[int, str, int | None]]:
    """
    Flattens the direct text children of ``region`` into
    ``(position, text, position of the preceding element)`` triples.
    The preceding position is ``None`` when the node right before the text
    is not an element.
    """
    children = list(region.children)
    nodes: list[tuple[int, str, int | None]] = []
    for position, child in enumerate(children):
        if not isinstance(child, NavigableString) or isinstance(child, Comment):
            continue
        previous = position - 1
        preceding = previous if previous >= 0 and isinstance(children[previous], Tag) else None
        nodes.append((position, str(child), preceding))
    return nodes


def find_text_after(region: Tag, anchor: Tag | None) -> str:
    """
    Returns the bare text node that directly follows ``anchor`` inside
    ``region``, or "" when there is none.

    Episode plots on the cast page are not wrapped in any element:
    ``<b>7 July 2006</b><br>The police department ... hires someone.<br/>``
    """
    anchor_position = _child_position(region, anchor)
    if anchor_position is None:
        return ""
    for _, text, preceding in _text_nodes_with_predecessors(region):
        if preceding == anchor_position:
            return clean_string(text)
    return ""


def parse_release_date(element: Tag) -> FieldResult:
    raw = own_text(element)
    try:
        return FieldResult.success("release_date", parse_day_month_year(raw))
    except ValueError as e:
        return FieldResult.skipped("release_date", str(e))


def _find_episode_heading(region: Tag, episode_id: str) -> Tag | None:
    # every episode starts with an h4 containing the title
    for heading in region.find_all("h4"):
        if not isinstance(heading, Tag):
            continue
        anchors = heading.find_all(
            "a", href=lambda href: bool(href) and href.startswith(TITLE_LINK_PREFIX)
        )
        if not anchors:
            continue
        if str(anchors[0].get("href", "")).endswith(f"{episode_id}/"):
            return heading
    return None


def parse_episode_cast_page(
    soup: BeautifulSoup,
    wanted: MediaMetadata,
    md: MediaMetadata,
    site_root: str = "",
) -> None:
    """
    Reads release date, plot and actors of ``wanted`` from the episode cast
    page into ``md``. Only the first heading linking to the episode is used.
    """
    episode_id = wanted.get_id(PROVIDER_ID)
    region = soup.find(id=CONTENT_REGION_ID)
    if not isinstance(region, Tag):
        logger.warning("[IMDB] No content region on episode cast page.")
        md.record_skip(FieldResult.skipped("cast", "content region missing"))
        return

    heading = _find_episode_heading(region, episode_id) if episode_id else None
    if heading is None:
        logger.warning(
            f"[IMDB] Episode S{wanted.season_number:02d}E{wanted.episode_number:02d} "
            "not found on episode cast page."
        )
        md.record_skip(FieldResult.skipped("cast", "episode heading not found"))
        return

    release_element = heading.find_next_sibling()
    if isinstance(release_element, Tag) and release_element.name == "b":
        result = parse_release_date(release_element)
        if result.ok:
            md.release_date = result.value
        else:
            logger.warning(f"[IMDB] Could not parse release date: {result.reason}")
            md.record_skip(result)

        md.plot = find_text_after(region, release_element.find_next_sibling())
        if not md.plot:
            md.record_skip(FieldResult.skipped("plot", "no text after release date"))

    # the cast is the nearest <div> after the heading
    for sibling in heading.find_next_siblings():
        if not isinstance(sibling, Tag) or sibling.name != "div":
            continue
        rows = [row for row in sibling.find_all("tr") if isinstance(row, Tag)]
        for actor in parse_actor_rows(rows, site_root):
            md.add_cast_member(actor)
        break


def parse_episode_crew(soup: BeautifulSoup, md: MediaMetadata) -> None:
    """Adds directors and writers from the summary block of an episode page."""
    summary = soup.find(class_="plot_summary")
    if not isinstance(summary, Tag):
        md.record_skip(FieldResult.skipped("crew", "no plot_summary block"))
        return

    for director in summary.find_all(attrs={"itemprop": "director"}):
        if not isinstance(director, Tag):
            continue
        md.add_cast_member(
            CastMember(name=clean_string(director.get_text()), type=CastType.DIRECTOR)
        )

    for writer in summary.find_all(attrs={"itemprop": "creator"}):
        if not isinstance(writer, Tag):
            continue
        text = clean_string(writer.get_text())
        if CREATED_BY_MARKER in text:
            continue
        if writer.get("itemtype") != PERSON_ITEMTYPE:
            continue
        md.add_cast_member(CastMember(name=text, type=CastType.WRITER))


async def get_episode_metadata(
    options: MediaScrapeOptions,
    documents: DocumentService,
    site: ImdbSiteDefinition,
) -> MediaMetadata:
    md = _placeholder()

    # Only a blank show id short-circuits; any other id is looked up as given.
    imdb_id = (options.imdb_id or "").strip()
    if not imdb_id:
        return md

    season = options.get_id_as_int_or_default(SEASON_NR, UNKNOWN_NUMBER)
    episode = options.get_id_as_int_or_default(EPISODE_NR, UNKNOWN_NUMBER)
    if season == UNKNOWN_NUMBER or episode == UNKNOWN_NUMBER:
        return md

    # the base episode data comes from the episode list
    episodes = await get_episode_list(options, documents, site)
    wanted = _find_wanted_episode(episodes, season, episode)
    if wanted is None:
        logger.info(f"[IMDB] S{season:02d}E{episode:02d} not in episode list of {imdb_id}")
        return md

    episode_id = wanted.get_id(PROVIDER_ID)
    md.media_type = MediaType.TV_EPISODE
    md.set_id(PROVIDER_ID, episode_id)
    md.season_number = wanted.season_number
    md.episode_number = wanted.episode_number
    md.title = wanted.title
    md.ratings = list(wanted.ratings)

    soup = await documents.fetch(
        site.url(f"/title/{imdb_id}/epcast"),
        build_accept_language(options.language, options.country),
    )
    parse_episode_cast_page(soup, wanted, md, site.site)

    if episode_id:
        soup = await documents.fetch(
            site.url(f"/title/{episode_id}"), FORCED_DETAIL_LANGUAGE
        )
        parse_episode_crew(soup, md)

    logger.info(
        f"[IMDB] Episode S{md.season_number:02d}E{md.episode_number:02d} "
        f"'{md.title}' scraped with {len(md.cast_members)} cast member(s)"
    )
    return md
