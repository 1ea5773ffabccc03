# imdb_tv/config.py

import configparser
import logging
import os
from pathlib import Path
from typing import Any

# --- Constants ---
PROVIDER_ID = "imdb"
CONFIG_SECTION = "imdb"
DEFAULT_CONFIG_PATH = "config.ini"
SITE_DEFINITIONS_PATH = Path(__file__).resolve().parent / "sites.yaml"
# The detail page labels are matched as English text.
FORCED_DETAIL_LANGUAGE = "en"

DEFAULT_SETTINGS: dict[str, Any] = {
    "site": "imdb",
    "filter_unwanted_categories": False,
    "cache_ttl_seconds": 30 * 60,
    "request_timeout_seconds": 30.0,
}

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


class ConfigurationError(ValueError):
    """Raised when config.ini or a site definition holds unusable values."""


def get_configuration(config_path: str = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """
    Reads the [imdb] section of the config file and merges it over the
    defaults. A missing file is not an error: the scraper runs on defaults.
    """
    settings = dict(DEFAULT_SETTINGS)
    if not os.path.exists(config_path):
        logger.info(
            f"[CONFIG] Configuration file '{config_path}' not found. Using defaults."
        )
        return settings

    parser = configparser.ConfigParser()
    with open(config_path, encoding="utf-8") as f:
        parser.read_string(f.read())

    if not parser.has_section(CONFIG_SECTION):
        logger.info(
            f"[CONFIG] No [{CONFIG_SECTION}] section in '{config_path}'. Using defaults."
        )
        return settings

    section = parser[CONFIG_SECTION]
    site = section.get("site", fallback=settings["site"]).strip()
    if not site:
        raise ConfigurationError("'site' must not be empty in the [imdb] section.")
    settings["site"] = site

    try:
        settings["filter_unwanted_categories"] = section.getboolean(
            "filter_unwanted_categories",
            fallback=settings["filter_unwanted_categories"],
        )
        settings["cache_ttl_seconds"] = section.getint(
            "cache_ttl_seconds", fallback=settings["cache_ttl_seconds"]
        )
        settings["request_timeout_seconds"] = section.getfloat(
            "request_timeout_seconds", fallback=settings["request_timeout_seconds"]
        )
    except ValueError as e:
        logger.critical(f"[CONFIG] Invalid value in [{CONFIG_SECTION}] section: {e}")
        raise ConfigurationError(f"Invalid value in [{CONFIG_SECTION}] section: {e}")

    if settings["cache_ttl_seconds"] < 0:
        raise ConfigurationError("'cache_ttl_seconds' must not be negative.")
    if settings["request_timeout_seconds"] <= 0:
        raise ConfigurationError("'request_timeout_seconds' must be positive.")

    logger.info(f"[CONFIG] IMDb configuration loaded for site '{site}'.")
    return settings
