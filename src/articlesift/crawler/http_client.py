"""
Async HTTP page fetcher with per-stage deadlines and typed failures.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
import structlog
from yarl import URL

from articlesift.config.config import Config, settings
from articlesift.errors import (
    EncodingError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    NotFoundError,
)

from .urls import has_unescaped_characters

logger = structlog.get_logger(__name__)


@dataclass
class FetchedPage:
    """A successfully fetched HTML page."""

    url: str
    final_url: str
    status: int
    html: str
    headers: Dict[str, str]
    elapsed_ms: int


class HttpClient:
    """Shared aiohttp session that raises typed errors instead of returning status codes."""

    def __init__(self, config: Optional[Config] = None, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.config = config or settings
        self.crawler_config = self.config.crawler
        self.default_timeout = self.config.extraction.stage_timeout_seconds
        self.session = session
        self._owns_session = session is None

    async def initialize(self) -> None:
        """Create the pooled session if one was not injected."""
        if self.session is None:
            connector = aiohttp.TCPConnector(limit=self.crawler_config.max_connections, ttl_dns_cache=30)
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.crawler_config.timeout),
                headers={"User-Agent": self.crawler_config.user_agent},
            )
            self._owns_session = True
            logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self.session is not None and self._owns_session:
            await self.session.close()
        self.session = None

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _build_url(self, url: str, encoded: bool) -> URL:
        if encoded and has_unescaped_characters(url):
            raise EncodingError("Request path contains unescaped characters", url=url)
        try:
            request_url = URL(url, encoded=encoded)
            # Pre-encoded URLs are only validated when their parts are read
            scheme, host, _ = request_url.scheme, request_url.host, request_url.port
        except (ValueError, UnicodeError) as e:
            raise EncodingError(f"Invalid URL: {e}", url=url) from e
        if not scheme or not host:
            raise NetworkError("URL is missing a scheme or host", url=url)
        return request_url

    async def fetch(self, url: str, *, timeout: Optional[float] = None, encoded: bool = False) -> FetchedPage:
        """
        Fetch a page and return its decoded HTML.

        Args:
            url: Absolute http(s) URL
            timeout: Stage deadline in seconds (defaults to the configured stage timeout)
            encoded: Treat ``url`` as already percent-encoded and send it verbatim

        Raises:
            EncodingError: The URL holds unescaped or invalid characters
            NotFoundError: 404 or 410 response
            HttpStatusError: Any other non-success response
            NetworkError: Connection-level failure
            FetchTimeoutError: The deadline expired
        """
        if self.session is None:
            await self.initialize()
        assert self.session is not None

        deadline = timeout if timeout is not None else self.default_timeout
        request_url = self._build_url(url, encoded)
        start = time.perf_counter()

        try:
            async with asyncio.timeout(deadline):
                async with self.session.get(request_url, allow_redirects=True) as response:
                    status = response.status
                    if status in (404, 410):
                        raise NotFoundError(f"Failed to fetch URL: {status}", url=url, status=status)
                    if status >= 400:
                        raise HttpStatusError(f"Failed to fetch URL: {status}", url=url, status=status)
                    html = await response.text(errors="replace")
                    final_url = str(response.url)
                    headers = dict(response.headers)
        except TimeoutError as e:
            logger.warning("Fetch deadline expired", url=url, timeout=deadline)
            raise FetchTimeoutError(f"Request timed out after {deadline}s", url=url, timeout=deadline) from e
        except aiohttp.InvalidURL as e:
            raise EncodingError(f"Invalid characters in URL: {e}", url=url) from e
        except aiohttp.ClientError as e:
            logger.warning("Fetch failed", url=url, error=str(e), error_type=type(e).__name__)
            raise NetworkError(f"Network error while fetching URL: {e}", url=url) from e

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("Fetched page", url=url, status=status, bytes=len(html), elapsed_ms=elapsed_ms)
        return FetchedPage(
            url=url,
            final_url=final_url,
            status=status,
            html=html,
            headers=headers,
            elapsed_ms=elapsed_ms,
        )
