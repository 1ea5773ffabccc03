from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..config import SITE_DEFINITIONS_PATH, ConfigurationError, logger

# Cache for site definitions to avoid repeated disk reads.
_definitions_cache: dict[Path, dict[str, ImdbSiteDefinition]] = {}

_REQUIRED_KEYS = {"name", "site", "charset"}


@dataclass(frozen=True)
class ImdbSiteDefinition:
    """Root URL and response charset of one IMDb mirror."""

    name: str
    site: str
    charset: str = "utf-8"

    def url(self, path: str) -> str:
        return f"{self.site.rstrip('/')}/{path.lstrip('/')}"


def load_site_definitions(
    definitions_path: Path = SITE_DEFINITIONS_PATH,
) -> dict[str, ImdbSiteDefinition]:
    """Load and minimally validate the YAML site definitions.

    Definitions are cached in-memory per resolved path after the first load.
    """

    resolved_path = definitions_path.resolve()
    cached = _definitions_cache.get(resolved_path)
    if cached is not None:
        return cached

    if not resolved_path.exists():
        raise FileNotFoundError(f"Site definitions not found: {resolved_path}")

    with resolved_path.open("r", encoding="utf-8") as fh:
        data: dict[str, Any] = yaml.safe_load(fh) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Site definitions must be a mapping: {resolved_path}")

    definitions: dict[str, ImdbSiteDefinition] = {}
    for key, entry in data.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Site definition '{key}' must be a mapping")
        missing = _REQUIRED_KEYS - entry.keys()
        if missing:
            raise ConfigurationError(
                f"Site definition '{key}' missing keys: {', '.join(sorted(missing))}"
            )
        definitions[str(key)] = ImdbSiteDefinition(
            name=str(entry["name"]),
            site=str(entry["site"]).rstrip("/"),
            charset=str(entry["charset"]),
        )

    logger.info(
        f"[CONFIG] Loaded {len(definitions)} IMDb site definition(s) "
        f"from {resolved_path.name}"
    )
    _definitions_cache[resolved_path] = definitions
    return definitions


def get_site_definition(
    key: str, definitions_path: Path = SITE_DEFINITIONS_PATH
) -> ImdbSiteDefinition:
    definitions = load_site_definitions(definitions_path)
    try:
        return definitions[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown IMDb site '{key}'. Known sites: {', '.join(sorted(definitions))}"
        ) from None
