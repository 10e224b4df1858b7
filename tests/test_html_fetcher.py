import httpx
import pytest

from recipe_importer.app.core.config import Settings
from recipe_importer.app.services.url_parsing.errors import FetchError, FetchErrorKind, InvalidUrlError
from recipe_importer.app.services.url_parsing.html_fetcher import (
    decode_body,
    fetch_document,
    is_private_host,
    validate_url,
)

PAGE = "<html><body><h1>Hi</h1></body></html>"


def make_transport(status=200, content_type="text/html; charset=utf-8", body=PAGE, seen=None):
    async def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, headers={"content-type": content_type}, content=body.encode())

    return httpx.MockTransport(handler)


def raising_transport(exc_type):
    async def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_fetch_document_returns_raw_document():
    seen = []
    doc = await fetch_document("https://example.com/recipe", transport=make_transport(seen=seen))
    assert doc.html == PAGE
    assert doc.status_code == 200
    assert doc.final_url == "https://example.com/recipe"
    assert "RecipeImporter" in seen[0].headers["user-agent"]
    assert seen[0].headers["accept"].startswith("text/html")


@pytest.mark.asyncio
async def test_fetch_document_http_error_keeps_status():
    with pytest.raises(FetchError) as info:
        await fetch_document("https://example.com/missing", transport=make_transport(status=404))
    assert info.value.kind is FetchErrorKind.HTTP_ERROR
    assert info.value.status_code == 404


@pytest.mark.asyncio
async def test_fetch_document_timeout():
    with pytest.raises(FetchError) as info:
        await fetch_document("https://example.com/slow", transport=raising_transport(httpx.ReadTimeout))
    assert info.value.kind is FetchErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_fetch_document_network_error():
    with pytest.raises(FetchError) as info:
        await fetch_document("https://example.com/down", transport=raising_transport(httpx.ConnectError))
    assert info.value.kind is FetchErrorKind.NETWORK_ERROR


@pytest.mark.asyncio
async def test_fetch_document_rejects_unsupported_content_type():
    with pytest.raises(FetchError) as info:
        await fetch_document("https://example.com/file.pdf", transport=make_transport(content_type="application/pdf"))
    assert info.value.kind is FetchErrorKind.UNSUPPORTED_CONTENT_TYPE


@pytest.mark.asyncio
async def test_fetch_document_rejects_invalid_url_before_network():
    seen = []
    for url in ["not a url", "ftp://example.com/x", "https://", "/relative/path", ""]:
        with pytest.raises(InvalidUrlError):
            await fetch_document(url, transport=make_transport(seen=seen))
    assert seen == []


@pytest.mark.asyncio
async def test_fetch_document_private_hosts_are_configurable():
    with pytest.raises(InvalidUrlError):
        await fetch_document("http://localhost/test", transport=make_transport())
    settings = Settings(IMPORTER_ALLOW_PRIVATE_HOSTS=True)
    doc = await fetch_document("http://127.0.0.1/test", transport=make_transport(), settings=settings)
    assert doc.html == PAGE


def test_is_private_host():
    assert is_private_host("localhost")
    assert is_private_host("127.0.0.1")
    assert is_private_host("10.1.2.3")
    assert is_private_host("::1")
    assert not is_private_host("example.com")
    assert not is_private_host("8.8.8.8")


def test_validate_url_strips_whitespace():
    assert validate_url("  https://example.com/a  ") == "https://example.com/a"


def test_decode_body_uses_declared_charsets():
    text = "<html><body>Crème brûlée</body></html>"
    assert decode_body(text.encode("latin-1"), "text/html; charset=ISO-8859-1") == text
    meta_page = '<html><head><meta charset="iso-8859-1"></head><body>Crème</body></html>'
    assert decode_body(meta_page.encode("latin-1"), "text/html") == meta_page
    assert decode_body(text.encode("utf-8"), "text/html") == text
