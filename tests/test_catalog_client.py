"""Catalog client tests against an in-process mock transport.

No network access: every request is answered by ``httpx.MockTransport``
and retries wait zero seconds.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from tenacity import wait_none

from typelit.catalog.client import CatalogClient, CatalogError, DownloadError
from typelit.catalog.schemas import CatalogBook, CatalogPage
from typelit.models import IngestConfig

CATALOG_URL = "https://catalog.test/books"


def _book(book_id: int, with_text: bool = True) -> dict:
    formats = {"image/jpeg": f"https://catalog.test/{book_id}.jpg"}
    if with_text:
        formats["text/plain; charset=us-ascii"] = f"https://catalog.test/{book_id}.txt"
    return {
        "id": book_id,
        "title": f"Book {book_id}",
        "authors": [{"name": "Author, Some", "birth_year": 1800, "death_year": 1870}],
        "subjects": ["Fiction"],
        "bookshelves": [],
        "languages": ["en"],
        "formats": formats,
        "download_count": 123,
    }


PAGES = {
    None: {
        "count": 4,
        "next": f"{CATALOG_URL}?page=2",
        "previous": None,
        "results": [_book(1), _book(2, with_text=False), _book(3)],
    },
    "2": {
        "count": 4,
        "next": None,
        "previous": CATALOG_URL,
        "results": [_book(4)],
    },
}


def _catalog_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=PAGES[request.url.params.get("page")])


def _client(
    handler: Callable[[httpx.Request], httpx.Response], **overrides
) -> CatalogClient:
    config = IngestConfig(
        catalog_url=CATALOG_URL,
        page_delay_seconds=0,
        max_retries=3,
        **overrides,
    )
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CatalogClient(config, http_client=http, retry_wait=wait_none())


# ======================================================================
# Schemas
# ======================================================================


class TestSchemas:
    def test_page_parses_and_ignores_extra_fields(self) -> None:
        page = CatalogPage.model_validate(PAGES[None])
        assert page.next == f"{CATALOG_URL}?page=2"
        assert [b.id for b in page.results] == [1, 2, 3]

    def test_to_raw_book(self) -> None:
        raw = CatalogBook.model_validate(_book(9)).to_raw_book()
        assert raw.id == 9
        assert raw.authors == ["Author, Some"]
        assert raw.plain_text_url == "https://catalog.test/9.txt"
        assert raw.cover_image_url == "https://catalog.test/9.jpg"

    def test_book_without_text_has_no_url(self) -> None:
        raw = CatalogBook.model_validate(_book(2, with_text=False)).to_raw_book()
        assert raw.plain_text_url is None


# ======================================================================
# Listing
# ======================================================================


class TestFetchBooks:
    async def test_first_page_query(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"count": 0, "next": None, "results": []})

        async with _client(handler) as client:
            assert await client.fetch_books() == []

        params = seen[0].params
        assert params["languages"] == "en"
        assert params["copyright"] == "false"
        assert params["mime_type"] == "text/plain"

    async def test_paginates_and_filters(self) -> None:
        async with _client(_catalog_handler) as client:
            books = await client.fetch_books(limit=10)
        assert [b.id for b in books] == [1, 3, 4]

    async def test_limit_stops_pagination(self) -> None:
        pages_requested: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            pages_requested.append(request.url.params.get("page"))
            return _catalog_handler(request)

        async with _client(handler) as client:
            books = await client.fetch_books(limit=1)

        assert [b.id for b in books] == [1]
        assert pages_requested == [None]

    async def test_default_limit_from_config(self) -> None:
        async with _client(_catalog_handler, book_limit=2) as client:
            books = await client.fetch_books()
        assert [b.id for b in books] == [1, 3]

    async def test_transient_failure_retried(self) -> None:
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(503)
            if calls["n"] == 2:
                return httpx.Response(429)
            return _catalog_handler(request)

        async with _client(handler) as client:
            books = await client.fetch_books(limit=2)

        assert [b.id for b in books] == [1, 3]
        assert calls["n"] == 3

    async def test_persistent_server_error_raises(self) -> None:
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(500)

        async with _client(handler) as client:
            with pytest.raises(CatalogError):
                await client.fetch_books()
        assert calls["n"] == 3

    async def test_client_error_not_retried(self) -> None:
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(404)

        async with _client(handler) as client:
            with pytest.raises(CatalogError):
                await client.fetch_books()
        assert calls["n"] == 1

    async def test_malformed_page_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>maintenance</html>")

        async with _client(handler) as client:
            with pytest.raises(CatalogError):
                await client.fetch_books()

    async def test_invalid_schema_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"results": [{"title": "no id"}]})

        async with _client(handler) as client:
            with pytest.raises(CatalogError):
                await client.fetch_books()


# ======================================================================
# Downloads
# ======================================================================


class TestDownloadText:
    async def test_returns_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="CHAPTER I\n\nIt began.")

        async with _client(handler) as client:
            text = await client.download_text("https://catalog.test/1.txt")
        assert text == "CHAPTER I\n\nIt began."

    async def test_not_found_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with _client(handler) as client:
            with pytest.raises(DownloadError):
                await client.download_text("https://catalog.test/missing.txt")

    async def test_transport_errors_retried_then_raise(self) -> None:
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(DownloadError):
                await client.download_text("https://catalog.test/1.txt")
        assert calls["n"] == 3
