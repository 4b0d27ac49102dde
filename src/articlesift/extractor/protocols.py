"""
Protocols for the pluggable extraction stages.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..crawler.http_client import FetchedPage
from ..metadata.structured_data_parser import StructuredDataExtractionResult
from .models import TraditionalArticle


@runtime_checkable
class PageFetcher(Protocol):
    """Fetches a page or raises a typed ``FetchError``."""

    async def fetch(self, url: str, *, timeout: Optional[float] = None, encoded: bool = False) -> FetchedPage:
        ...


@runtime_checkable
class StructuredExtractor(Protocol):
    """Structured-data stage. Never raises on fetch or markup failures."""

    async def extract(self, url: str) -> StructuredDataExtractionResult:
        ...


@runtime_checkable
class TraditionalParser(Protocol):
    """Readability-style stage. Raises when no content could be obtained."""

    name: str

    async def parse(self, url: str) -> TraditionalArticle:
        """Fetch ``url`` and extract the article body.

        Args:
            url: Article URL, possibly percent-encoded

        Returns:
            TraditionalArticle with a non-empty ``content``
        """
        ...
