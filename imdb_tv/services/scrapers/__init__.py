from .identifiers import extract_imdb_id, TITLE_LINK_PREFIX
from .cast import parse_cast_member, parse_actor_rows
from .ratings import parse_rating
from .combined_page import parse_combined_page, parse_plotsummary_page
from .episode_list import parse_episode_list, get_episode_list
from .episode_details import (
    find_text_after,
    parse_episode_cast_page,
    parse_episode_crew,
    get_episode_metadata,
)
from .tv_show import resolve_show_id, get_tv_show_metadata

__all__ = [
    "extract_imdb_id",
    "TITLE_LINK_PREFIX",
    "parse_cast_member",
    "parse_actor_rows",
    "parse_rating",
    "parse_combined_page",
    "parse_plotsummary_page",
    "parse_episode_list",
    "get_episode_list",
    "find_text_after",
    "parse_episode_cast_page",
    "parse_episode_crew",
    "get_episode_metadata",
    "resolve_show_id",
    "get_tv_show_metadata",
]
