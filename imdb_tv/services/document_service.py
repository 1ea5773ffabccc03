# imdb_tv/services/document_service.py

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable

import httpx
from bs4 import BeautifulSoup

from ..config import DEFAULT_SETTINGS, logger

DOCUMENT_CACHE_MAX_ENTRIES = 100
_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float


class DocumentCache:
    """Simple TTL-based LRU cache for fetched page bodies."""

    MISS = object()

    def __init__(
        self,
        *,
        max_entries: int = DOCUMENT_CACHE_MAX_ENTRIES,
        ttl: float = DEFAULT_SETTINGS["cache_ttl_seconds"],
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._entries: OrderedDict[Hashable, _CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return DocumentCache.MISS
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return DocumentCache.MISS
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        if self.ttl <= 0:
            return
        expires_at = self._clock() + self.ttl
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
            self._entries.move_to_end(key)
            self._evict_if_needed()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:  # pragma: no cover - convenience
        with self._lock:
            return len(self._entries)

    def _evict_if_needed(self) -> None:
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)


class DocumentService:
    """
    Fetches catalog pages and hands them out as parsed BeautifulSoup trees.

    Raw page bytes are cached per (url, accept-language) so the same page
    requested for a show and later for one of its episodes is downloaded
    only once. Every call returns a freshly parsed tree, so callers never
    share mutable DOM state.
    """

    def __init__(
        self,
        *,
        charset: str = "utf-8",
        timeout: float = DEFAULT_SETTINGS["request_timeout_seconds"],
        cache: DocumentCache | None = None,
        client_factory: Callable[..., httpx.AsyncClient] | None = None,
    ) -> None:
        self.charset = charset
        self.timeout = timeout
        self.cache = cache if cache is not None else DocumentCache()
        self._client_factory = client_factory or httpx.AsyncClient

    async def fetch(self, url: str, accept_language: str) -> BeautifulSoup:
        """
        Returns the parsed document for ``url``.

        Raises:
            httpx.HTTPError: When the request fails or the site answers with
                an error status. Nothing is cached in that case.
        """
        key = (url, accept_language)
        body = self.cache.get(key)
        if body is DocumentCache.MISS:
            logger.debug(f"[IMDB] Cache MISS for {url} ({accept_language})")
            body = await self._download(url, accept_language)
            self.cache.set(key, body)
        else:
            logger.debug(f"[IMDB] Cache HIT for {url} ({accept_language})")

        return BeautifulSoup(body, "lxml", from_encoding=self.charset)

    async def _download(self, url: str, accept_language: str) -> bytes:
        headers = {"Accept-Language": accept_language, "User-Agent": _USER_AGENT}
        async with self._client_factory(
            timeout=self.timeout, follow_redirects=True
        ) as client:
            response = await client.get(url, headers=headers)
            response.raise_for_status()
            logger.info(
                f"[IMDB] Fetched {url} ({len(response.content)} bytes, "
                f"Accept-Language: {accept_language})"
            )
            return response.content
