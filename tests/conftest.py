import sys
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

# Ensure root path is available for imports
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from imdb_tv.services.site_definitions import ImdbSiteDefinition  # noqa: E402

SITE_ROOT = "https://www.imdb.com"


class FakeDocuments:
    """Stands in for DocumentService: serves canned HTML keyed by URL."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[tuple[str, str]] = []

    async def fetch(self, url: str, accept_language: str) -> BeautifulSoup:
        self.calls.append((url, accept_language))
        if url not in self.pages:
            raise AssertionError(f"Unexpected fetch: {url}")
        return BeautifulSoup(self.pages[url], "lxml")

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


@pytest.fixture
def site() -> ImdbSiteDefinition:
    return ImdbSiteDefinition(name="imdb.com", site=SITE_ROOT, charset="utf-8")


@pytest.fixture
def make_documents():
    def _make(pages: dict[str, str] | None = None) -> FakeDocuments:
        return FakeDocuments(pages)

    return _make


@pytest.fixture
def soup_of():
    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "lxml")

    return _parse
