# imdb_tv/utils.py

import re
from datetime import date

from bs4 import NavigableString, Tag

_IMDB_ID_PATTERN = re.compile(r"^tt\d{6,}$")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_DAY_MONTH_YEAR_PATTERN = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s+(\d{4})(?!\d)")

# Month names are matched in English no matter which locale the process runs in.
_ENGLISH_MONTHS = {
    name: index
    for index, name in enumerate(
        (
            "january",
            "february",
            "march",
            "april",
            "may",
            "june",
            "july",
            "august",
            "september",
            "october",
            "november",
            "december",
        ),
        start=1,
    )
}
_ENGLISH_MONTHS.update({name[:3]: index for name, index in list(_ENGLISH_MONTHS.items())})
_ENGLISH_MONTHS["sept"] = 9


def is_valid_imdb_id(imdb_id: str | None) -> bool:
    """Checks whether a string looks like an IMDb title id (e.g. tt0491738)."""
    if not imdb_id:
        return False
    return bool(_IMDB_ID_PATTERN.match(imdb_id.strip()))


def extract_first_int(text: str) -> int | None:
    """Safely extracts the first integer from a string."""
    if not text:
        return None
    match = re.search(r"\d+", text.strip())
    return int(match.group(0)) if match else None


def parse_int(text: str) -> int:
    """
    Parses vote counts such as "1,523" or "12.045". Returns 0 when the text
    holds no usable number.
    """
    cleaned = re.sub(r"[,.\s\xa0]", "", text or "")
    try:
        return int(cleaned)
    except ValueError:
        return 0


def clean_string(value: str) -> str:
    """Collapses whitespace (including non-breaking spaces) and trims."""
    if not value:
        return ""
    return _WHITESPACE_PATTERN.sub(" ", value.replace("\xa0", " ")).strip()


def own_text(tag: Tag) -> str:
    """Returns only the text nodes directly under ``tag``, ignoring child tags."""
    parts = [str(child) for child in tag.children if isinstance(child, NavigableString)]
    return clean_string("".join(parts))


def parse_day_month_year(text: str) -> date:
    """
    Parses dates printed as "7 July 2006".

    Raises:
        ValueError: If the text does not have the day-month-year shape or
            names an unknown month.
    """
    cleaned = clean_string(text)
    match = _DAY_MONTH_YEAR_PATTERN.match(cleaned)
    if not match:
        raise ValueError(f"Unparseable date: '{text}'")
    day, month_name, year = match.groups()
    month = _ENGLISH_MONTHS.get(month_name.casefold())
    if month is None:
        raise ValueError(f"Unknown month name in date: '{text}'")
    return date(int(year), month, int(day))


def build_accept_language(language: str, country: str) -> str:
    """
    Builds an Accept-Language header preferring the requested locale and
    always falling back to US English.

    Examples:
        - ("de", "DE") -> "de-de,de;q=0.9,en-us;q=0.8,en;q=0.7"
        - ("en", "US") -> "en-us,en;q=0.9"
    """
    candidates: list[str] = []
    language = (language or "").strip().lower()
    country = (country or "").strip().lower()
    if language and country:
        candidates.append(f"{language}-{country}")
    if language:
        candidates.append(language)
    candidates.extend(["en-us", "en"])

    ordered: list[str] = []
    for candidate in candidates:
        if candidate not in ordered:
            ordered.append(candidate)

    parts: list[str] = []
    for index, candidate in enumerate(ordered):
        if index == 0:
            parts.append(candidate)
        else:
            parts.append(f"{candidate};q={1 - index / 10:.1f}")
    return ",".join(parts)
