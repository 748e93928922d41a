"""Async client for the public-domain book catalog (Gutendex).

Two operations:
  1. ``fetch_books()`` -- walk the paginated listing, keeping books that
     offer a plain-text rendition, with a politeness delay between pages
  2. ``download_text()`` -- fetch one book's plain-text body

Every request has a fixed timeout. Transport errors, HTTP 429 and 5xx are
retried with exponential backoff; anything still failing is surfaced as
:class:`CatalogError` (fatal for a batch, later pages are unreachable) or
:class:`DownloadError` (one book lost).
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from typelit.catalog.schemas import CatalogPage
from typelit.models import IngestConfig, RawBook

logger = logging.getLogger(__name__)

USER_AGENT = "typelit/0.1 (+book ingestion)"

# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class TransientError(Exception):
    """Raised on transport failures, 429 and 5xx responses; retried."""


class CatalogError(Exception):
    """Raised when a catalog page cannot be fetched or parsed."""


class DownloadError(Exception):
    """Raised when a book's text body cannot be downloaded."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class CatalogClient:
    """Wrapper around ``httpx.AsyncClient`` for catalog access.

    Usage::

        async with CatalogClient(IngestConfig()) as client:
            books = await client.fetch_books(limit=75)
            text = await client.download_text(books[0].plain_text_url)

    Args:
        config: Catalog URL, timeout, page delay and retry settings.
        http_client: Optional pre-built client (tests inject one backed by
            ``httpx.MockTransport``). An injected client is not closed here.
        retry_wait: Optional tenacity wait strategy overriding the default
            exponential backoff.
    """

    def __init__(
        self,
        config: IngestConfig,
        http_client: httpx.AsyncClient | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=config.request_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=15)

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    def first_page_url(self) -> str:
        """Listing URL restricted to public-domain plain-text books."""
        url = httpx.URL(
            self._config.catalog_url,
            params={
                "languages": self._config.languages,
                "copyright": "false",
                "mime_type": "text/plain",
            },
        )
        return str(url)

    # ------------------------------------------------------------------
    # Catalog listing
    # ------------------------------------------------------------------

    async def fetch_books(self, limit: int | None = None) -> list[RawBook]:
        """Fetch up to *limit* books that have a plain-text format.

        Args:
            limit: Maximum number of books (defaults to ``config.book_limit``).

        Returns:
            Books in catalog order.

        Raises:
            CatalogError: If any page fails after retries or does not parse.
        """
        if limit is None:
            limit = self._config.book_limit

        books: list[RawBook] = []
        url: str | None = self.first_page_url()
        logger.info("Fetching up to %d books from %s", limit, self._config.catalog_url)

        while url and len(books) < limit:
            logger.info("Fetching catalog page: %s", url)
            try:
                response = await self._get(url)
                page = CatalogPage.model_validate(response.json())
            except (TransientError, httpx.HTTPStatusError, ValidationError, ValueError) as exc:
                raise CatalogError(f"Failed to fetch catalog page {url}: {exc}") from exc

            valid = [b for b in (r.to_raw_book() for r in page.results) if b.plain_text_url]
            books.extend(valid)
            logger.info(
                "Fetched %d valid books (total: %d/%d)", len(valid), len(books), limit
            )

            url = page.next
            if url and len(books) < limit and self._config.page_delay_seconds > 0:
                await asyncio.sleep(self._config.page_delay_seconds)

        return books[:limit]

    # ------------------------------------------------------------------
    # Text download
    # ------------------------------------------------------------------

    async def download_text(self, url: str) -> str:
        """Download a book's plain-text body.

        Raises:
            DownloadError: If the request fails after retries.
        """
        try:
            response = await self._get(url)
        except (TransientError, httpx.HTTPStatusError) as exc:
            raise DownloadError(f"Failed to download {url}: {exc}") from exc
        return response.text

    # ------------------------------------------------------------------
    # Internal: GET with retries
    # ------------------------------------------------------------------

    async def _get(self, url: str) -> httpx.Response:
        """GET *url*, retrying transient failures.

        Raises:
            TransientError: If retries are exhausted.
            httpx.HTTPStatusError: On non-retryable 4xx responses.
        """
        async for attempt in AsyncRetrying(
            wait=self._retry_wait,
            stop=stop_after_attempt(max(1, self._config.max_retries)),
            retry=retry_if_exception_type(TransientError),
            reraise=True,
        ):
            with attempt:
                try:
                    response = await self._http.get(url)
                except httpx.TransportError as exc:
                    logger.warning("Transport error for %s: %s", url, exc)
                    raise TransientError(f"transport error: {exc}") from exc

                if response.status_code == 429 or response.status_code >= 500:
                    logger.warning("HTTP %d for %s", response.status_code, url)
                    raise TransientError(f"HTTP {response.status_code}")

                response.raise_for_status()
                return response

        raise TransientError(f"retries exhausted for {url}")
