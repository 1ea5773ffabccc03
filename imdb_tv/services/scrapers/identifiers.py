import re

_TITLE_ID_PATTERN = re.compile(r"/title/(tt\d{6,})")

TITLE_LINK_PREFIX = "/title/tt"


def extract_imdb_id(url: str | None) -> str | None:
    """
    Pulls the title id out of an href such as ``/title/tt0680052/?ref_=ttep``.

    Some anchors carry more than one ``/title/`` segment (redirect links);
    the last one is the id of the linked page.
    """
    if not url:
        return None
    imdb_id: str | None = None
    for match in _TITLE_ID_PATTERN.finditer(url):
        if match.group(1):
            imdb_id = match.group(1)
    return imdb_id
