from __future__ import annotations

import re
from typing import Any

from bs4 import BeautifulSoup, Tag

from ...config import PROVIDER_ID, logger
from ...models import CastMember, CastType, FieldResult, MediaMetadata, MediaScrapeOptions
from ...utils import clean_string, extract_first_int, own_text, parse_day_month_year
from .cast import parse_actor_rows
from .ratings import parse_rating

_YEAR_IN_TITLE_PATTERN = re.compile(r"\((\d{4})")
_PARENTHETICAL_PATTERN = re.compile(r"\([^)]*\)")
_POSTER_SIZE_PATTERN = re.compile(r"\._V1.*?\.jpg$")
_MORE_LINK_CLASS = "tn15more"
_GENRE_LINK_PREFIXES = ("/Sections/Genres/", "/genre/")

# Certification entries are printed with the country's display name.
_CERTIFICATION_COUNTRY_NAMES = {
    "US": ("USA", "United States"),
    "GB": ("UK", "United Kingdom"),
    "DE": ("Germany",),
    "AT": ("Austria",),
    "CH": ("Switzerland",),
    "FR": ("France",),
    "IT": ("Italy",),
    "ES": ("Spain",),
    "NL": ("Netherlands",),
    "CA": ("Canada",),
    "AU": ("Australia",),
}

_DIRECTOR_LABELS = ("director", "directors", "directed by")
_WRITER_LABELS = ("writer", "writers", "writing credits", "creator", "creators")


def _set_if_empty(md: MediaMetadata, attribute: str, value: Any) -> None:
    if value and not getattr(md, attribute):
        setattr(md, attribute, value)


def _collect_info_blocks(soup: BeautifulSoup) -> dict[str, Tag]:
    """Maps each lower-cased ``<h5>`` label (without the colon) to its content."""
    blocks: dict[str, Tag] = {}
    for info in soup.find_all("div", class_="info"):
        if not isinstance(info, Tag):
            continue
        label_tag = info.find("h5")
        if not isinstance(label_tag, Tag):
            continue
        label = clean_string(label_tag.get_text()).rstrip(":").strip().casefold()
        content = info.find("div", class_="info-content")
        if label and isinstance(content, Tag) and label not in blocks:
            blocks[label] = content
    return blocks


def _anchor_texts(content: Tag, href_prefixes: tuple[str, ...] = ()) -> list[str]:
    texts: list[str] = []
    for anchor in content.find_all("a"):
        if not isinstance(anchor, Tag):
            continue
        if _MORE_LINK_CLASS in (anchor.get("class") or []):
            continue
        if href_prefixes and not str(anchor.get("href", "")).startswith(href_prefixes):
            continue
        text = clean_string(anchor.get_text())
        if text and text not in texts:
            texts.append(text)
    return texts


def _parse_title(soup: BeautifulSoup, md: MediaMetadata) -> None:
    h1 = soup.find("h1")
    if not isinstance(h1, Tag):
        md.record_skip(FieldResult.skipped("title", "no <h1> on combined page"))
        return

    _set_if_empty(md, "title", own_text(h1).strip('"'))

    original = h1.find("span", class_="title-extra")
    if isinstance(original, Tag):
        _set_if_empty(md, "original_title", own_text(original).strip('"'))

    year_anchor = h1.find("a", href=re.compile(r"^/year/"))
    year = extract_first_int(year_anchor.get_text()) if isinstance(year_anchor, Tag) else None
    if year is None:
        match = _YEAR_IN_TITLE_PATTERN.search(h1.get_text())
        year = int(match.group(1)) if match else None
    _set_if_empty(md, "year", year)


def _parse_star_rating(soup: BeautifulSoup, md: MediaMetadata) -> None:
    starbar = soup.find("div", class_="starbar-meta")
    if not isinstance(starbar, Tag):
        return
    bold = starbar.find("b")
    votes_anchor = starbar.find("a", string=re.compile(r"votes", re.IGNORECASE))
    result = parse_rating(
        bold.get_text() if isinstance(bold, Tag) else "",
        votes_anchor.get_text() if isinstance(votes_anchor, Tag) else "",
        PROVIDER_ID,
    )
    if result.ok:
        if not md.ratings:
            md.add_rating(result.value)
    else:
        logger.debug(f"[IMDB] Combined page rating skipped: {result.reason}")
        md.record_skip(result)


def _parse_release_date(content: Tag, md: MediaMetadata) -> None:
    raw = _PARENTHETICAL_PATTERN.sub("", own_text(content)).strip()
    try:
        parsed = parse_day_month_year(raw)
    except ValueError as e:
        logger.warning(f"[IMDB] Could not parse release date '{raw}': {e}")
        md.record_skip(FieldResult.skipped("release_date", str(e)))
        return
    _set_if_empty(md, "release_date", parsed)
    _set_if_empty(md, "year", parsed.year)


def _parse_certification(content: Tag, country: str, md: MediaMetadata) -> None:
    names = _CERTIFICATION_COUNTRY_NAMES.get((country or "").upper(), ())
    for entry in _anchor_texts(content):
        country_name, _, certification = entry.partition(":")
        if certification and country_name.strip() in names:
            _set_if_empty(md, "certification", certification.strip())
            return


def _parse_crew(content: Tag, cast_type: CastType, md: MediaMetadata) -> None:
    known = {member.name for member in md.get_cast_by_type(cast_type)}
    for anchor in content.find_all("a", href=re.compile(r"^/name/")):
        if not isinstance(anchor, Tag):
            continue
        name = clean_string(anchor.get_text())
        if not name or name in known:
            continue
        known.add(name)
        md.add_cast_member(CastMember(name=name, type=cast_type))


def _parse_info_blocks(
    soup: BeautifulSoup, options: MediaScrapeOptions, md: MediaMetadata
) -> None:
    for label, content in _collect_info_blocks(soup).items():
        if label == "release date":
            _parse_release_date(content, md)
        elif label in ("genre", "genres"):
            if not md.genres:
                md.genres = _anchor_texts(content, _GENRE_LINK_PREFIXES)
        elif label == "runtime":
            _set_if_empty(md, "runtime", extract_first_int(content.get_text()))
        elif label in ("country", "countries"):
            if not md.countries:
                md.countries = _anchor_texts(content)
        elif label in ("language", "languages"):
            if not md.spoken_languages:
                md.spoken_languages = _anchor_texts(content)
        elif label == "certification":
            _parse_certification(content, options.country, md)
        elif label == "tagline" or label == "taglines":
            _set_if_empty(md, "tagline", own_text(content))
        elif label in ("plot", "plot outline"):
            _set_if_empty(md, "plot", own_text(content).rstrip("|").strip())
        elif label in _DIRECTOR_LABELS:
            _parse_crew(content, CastType.DIRECTOR, md)
        elif label in _WRITER_LABELS:
            _parse_crew(content, CastType.WRITER, md)


def _parse_poster(soup: BeautifulSoup, md: MediaMetadata) -> None:
    poster_anchor = soup.find("a", attrs={"name": "poster"})
    if not isinstance(poster_anchor, Tag):
        return
    image = poster_anchor.find("img")
    if isinstance(image, Tag) and image.get("src"):
        _set_if_empty(md, "poster_url", _POSTER_SIZE_PATTERN.sub(".jpg", str(image["src"])))


def parse_combined_page(
    soup: BeautifulSoup,
    options: MediaScrapeOptions,
    md: MediaMetadata,
    site_root: str = "",
) -> None:
    """
    Fills ``md`` from the combined-details page of a title.

    Scalar fields already set on ``md`` are kept; the page only fills gaps.
    """
    _parse_title(soup, md)
    _parse_star_rating(soup, md)
    _parse_info_blocks(soup, options, md)
    _parse_poster(soup, md)

    cast_table = soup.find("table", class_="cast")
    if isinstance(cast_table, Tag):
        rows = [row for row in cast_table.find_all("tr") if isinstance(row, Tag)]
        for actor in parse_actor_rows(rows, site_root):
            md.add_cast_member(actor)

    logger.info(
        f"[IMDB] Combined page parsed: '{md.title}' "
        f"({len(md.cast_members)} cast member(s))"
    )


def parse_plotsummary_page(soup: BeautifulSoup, md: MediaMetadata) -> None:
    """Takes the first user summary as the long-form plot."""
    plot = ""
    summaries = soup.find(id="plot-summaries-content")
    if isinstance(summaries, Tag):
        first = summaries.find("li", class_="ipl-zebra-list__item")
        if isinstance(first, Tag) and first.get("id") != "no-summary-content":
            paragraph = first.find("p")
            plot = own_text(paragraph if isinstance(paragraph, Tag) else first)
    if not plot:
        paragraph = soup.find("p", class_=["plotSummary", "plotpar"])
        if isinstance(paragraph, Tag):
            plot = own_text(paragraph)

    if not plot:
        md.record_skip(FieldResult.skipped("plot", "no summary on plot summary page"))
        return
    if len(plot) > len(md.plot):
        md.plot = plot
