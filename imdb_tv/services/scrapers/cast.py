import re

from bs4 import Tag

from ...models import CastMember, CastType
from ...utils import clean_string

_TRAILING_COMMENTARY_PATTERN = re.compile(r"\s*\(.*?\)$")
_IMAGE_SIZE_PATTERN = re.compile(r"\._.*?\.jpg$")
_IMAGE_SIZE_AT_PATTERN = re.compile(r"@@\._.*?\.jpg$")
_PLACEHOLDER_IMAGE_TOKENS = ("nopicture", "no_photo", "/images/nopicture")


def _normalize_image_url(image: str) -> str:
    if not image or any(token in image for token in _PLACEHOLDER_IMAGE_TOKENS):
        return ""
    if "@@" in image:
        return _IMAGE_SIZE_AT_PATTERN.sub("@@.jpg", image)
    return _IMAGE_SIZE_PATTERN.sub(".jpg", image)


def _find_name(row: Tag) -> str:
    name_element = row.find(attrs={"itemprop": "name"})
    if isinstance(name_element, Tag):
        return clean_string(name_element.get_text())
    name_cell = row.find("td", class_="nm")
    if isinstance(name_cell, Tag):
        return clean_string(name_cell.get_text())
    return ""


def _find_character(row: Tag) -> str:
    character_cell = row.find(class_=["character", "char"])
    if not isinstance(character_cell, Tag):
        return ""
    character = clean_string(character_cell.get_text(" "))
    # strip trailing commentary like "(120 episodes, 2006-2014)"
    return _TRAILING_COMMENTARY_PATTERN.sub("", character).strip()


def parse_cast_member(row: Tag, site_root: str = "") -> CastMember:
    """
    Reads one cast table row into a CastMember.

    The row is returned as found: empty name or character fields are left to
    the caller to filter.
    """
    member = CastMember(name=_find_name(row), character=_find_character(row))

    image_element = row.find("img")
    if isinstance(image_element, Tag):
        image = image_element.get("loadlate") or image_element.get("src") or ""
        member.image_url = _normalize_image_url(str(image))

    anchor = row.find("a", href=re.compile(r"^/name/"))
    if isinstance(anchor, Tag):
        href = str(anchor.get("href", "")).split("?")[0]
        member.profile_url = f"{site_root.rstrip('/')}{href}" if site_root else href

    return member


def parse_actor_rows(rows: list[Tag], site_root: str = "") -> list[CastMember]:
    """Keeps only rows that name both the actor and the character played."""
    actors: list[CastMember] = []
    for row in rows:
        member = parse_cast_member(row, site_root)
        if member.name and member.character:
            member.type = CastType.ACTOR
            actors.append(member)
    return actors
