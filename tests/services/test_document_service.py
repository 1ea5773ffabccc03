import httpx
import pytest

from imdb_tv.services.document_service import DocumentCache, DocumentService


class FakeResponse:
    def __init__(self, body: bytes, status_code: int = 200, url: str = "") -> None:
        self.content = body
        self.status_code = status_code
        self.url = url

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("GET", self.url or "https://www.imdb.com")
            response = httpx.Response(self.status_code, request=request)
            raise httpx.HTTPStatusError("error", request=request, response=response)


class FakeAsyncClient:
    instances: list["FakeAsyncClient"] = []

    def __init__(self, response: FakeResponse, **kwargs):
        self._response = response
        self.kwargs = kwargs
        self.requests: list[tuple[str, dict]] = []
        FakeAsyncClient.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, headers=None):
        self.requests.append((url, headers or {}))
        return self._response


def _factory(response: FakeResponse):
    FakeAsyncClient.instances = []

    def _make(**kwargs):
        return FakeAsyncClient(response, **kwargs)

    return _make


@pytest.mark.asyncio
async def test_fetch_parses_document_and_sends_language_header():
    factory = _factory(FakeResponse(b"<html><body><h1>Psych</h1></body></html>"))
    service = DocumentService(client_factory=factory, timeout=12)

    soup = await service.fetch("https://www.imdb.com/title/tt0491738/combined", "de,en;q=0.9")

    assert soup.find("h1").get_text() == "Psych"
    client = FakeAsyncClient.instances[0]
    assert client.kwargs == {"timeout": 12, "follow_redirects": True}
    url, headers = client.requests[0]
    assert url == "https://www.imdb.com/title/tt0491738/combined"
    assert headers["Accept-Language"] == "de,en;q=0.9"


@pytest.mark.asyncio
async def test_fetch_uses_cache_per_url_and_language():
    factory = _factory(FakeResponse(b"<p>cached</p>"))
    service = DocumentService(client_factory=factory)

    first = await service.fetch("https://www.imdb.com/a", "en")
    second = await service.fetch("https://www.imdb.com/a", "en")
    await service.fetch("https://www.imdb.com/a", "de")

    assert len(FakeAsyncClient.instances) == 2
    # every call gets its own tree
    assert first is not second
    assert second.p.get_text() == "cached"


@pytest.mark.asyncio
async def test_fetch_error_status_propagates_and_is_not_cached():
    factory = _factory(FakeResponse(b"", status_code=503))
    service = DocumentService(client_factory=factory)

    with pytest.raises(httpx.HTTPStatusError):
        await service.fetch("https://www.imdb.com/a", "en")
    assert len(service.cache) == 0


def test_document_cache_expires_entries():
    now = {"t": 100.0}
    cache = DocumentCache(ttl=10, clock=lambda: now["t"])
    cache.set("k", b"v")
    assert cache.get("k") == b"v"
    now["t"] = 111.0
    assert cache.get("k") is DocumentCache.MISS


def test_document_cache_evicts_oldest():
    cache = DocumentCache(max_entries=2, ttl=60)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is DocumentCache.MISS
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_document_cache_disabled_with_zero_ttl():
    cache = DocumentCache(ttl=0)
    cache.set("a", 1)
    assert cache.get("a") is DocumentCache.MISS
