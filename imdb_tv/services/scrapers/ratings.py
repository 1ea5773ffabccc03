import re

from ...models import FieldResult, MediaRating
from ...utils import clean_string, parse_int

_RATING_PATTERN = re.compile(r"^(\d+(?:[.,]\d+)?)(?:\s*/\s*10)?$")


def parse_rating(rating_text: str, votes_text: str, provider_id: str) -> FieldResult:
    """
    Builds a rating from the raw rating and vote-count texts.

    The rating is only produced when the numeric value parses. An unusable
    vote count does not discard the rating; it is stored as 0 instead.
    """
    cleaned = clean_string(rating_text)
    match = _RATING_PATTERN.match(cleaned)
    if not match:
        return FieldResult.skipped("rating", f"unparseable rating '{cleaned}'")
    try:
        value = float(match.group(1).replace(",", "."))
    except ValueError:
        return FieldResult.skipped("rating", f"unparseable rating '{cleaned}'")

    votes = parse_int(re.sub(r"[^\d,.]", "", votes_text or ""))
    return FieldResult.success(
        "rating", MediaRating(provider_id=provider_id, rating=value, votes=votes)
    )
