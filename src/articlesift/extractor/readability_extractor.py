"""
Readability-based traditional article parser.
"""

from __future__ import annotations

import asyncio
import html as html_entities
import re
from typing import Any, Optional
from urllib.parse import urljoin

import structlog
import trafilatura
from lxml import etree
from lxml import html as lxml_html
from readability import Document
from readability.readability import Unparseable

from ..config.config import ExtractionSettings, settings
from ..crawler.urls import clean_url, encode_url, encode_url_components, extract_domain
from ..errors import EncodingError, NoContentError
from .models import TraditionalArticle
from .protocols import PageFetcher

logger = structlog.get_logger(__name__)

_IMG_PATTERN = re.compile(r'<img[^>]+src=["\']([^"\']+)["\'][^>]*>', re.IGNORECASE)

# Class and id fragments that readability should favour or penalise
CONTENT_HINTS = ("article", "story", "post", "entry", "body", "content", "main")
CLUTTER_HINTS = (
    "comment",
    "footer",
    "masthead",
    "newsletter",
    "outbrain",
    "promo",
    "related",
    "share",
    "sidebar",
    "sponsor",
    "subscribe",
    "taboola",
    "widget",
)

EXCERPT_LENGTH = 200


class ReadabilityExtractor:
    """Traditional parser using readability-lxml for the body and trafilatura for bylines and dates."""

    name = "readability"

    def __init__(self, fetcher: PageFetcher, extraction: Optional[ExtractionSettings] = None) -> None:
        self.fetcher = fetcher
        self.extraction = extraction or settings.extraction

    async def parse(self, url: str) -> TraditionalArticle:
        """Fetch and extract an article, retrying once with component encoding on an encoding error.

        Args:
            url: Article URL, possibly percent-encoded

        Returns:
            TraditionalArticle with non-empty content

        Raises:
            NoContentError: The page yielded no article body
            FetchError: The page could not be fetched (after the single retry for EncodingError)
        """
        cleaned = clean_url(url)
        try:
            return await self._parse_once(encode_url(cleaned), cleaned, used_retry=False)
        except EncodingError as e:
            retry_url = encode_url_components(cleaned)
            logger.warning("Retrying traditional parse with component encoding", url=cleaned, error=str(e))
            return await self._parse_once(retry_url, cleaned, used_retry=True)

    async def _parse_once(self, request_url: str, cleaned: str, *, used_retry: bool) -> TraditionalArticle:
        page = await self.fetcher.fetch(request_url, encoded=True)
        base_url = page.final_url or cleaned

        # readability and trafilatura are CPU-bound
        loop = asyncio.get_running_loop()
        article = await loop.run_in_executor(None, self._extract_sync, page.html, base_url)

        if not article.content:
            raise NoContentError("No content found in the article", url=cleaned)

        article.used_retry = used_retry
        logger.info(
            "Traditional parse completed",
            url=cleaned,
            title=article.title,
            content_length=len(article.content),
            used_retry=used_retry,
        )
        return article

    def _extract_sync(self, html: str, url: str) -> TraditionalArticle:
        """Synchronous extraction using readability-lxml and trafilatura metadata."""
        empty = TraditionalArticle(content="", url=url, domain=extract_domain(url) or None)
        if not html or not html.strip():
            return empty

        try:
            doc = Document(
                html,
                url=url,
                min_text_length=self.extraction.readability_min_text_length,
                retry_length=self.extraction.readability_retry_length,
                positive_keywords=list(CONTENT_HINTS),
                negative_keywords=list(CLUTTER_HINTS),
            )
            title = doc.short_title() or doc.title()
            content_html = doc.summary()
        except (Unparseable, etree.ParserError, ValueError) as e:
            logger.warning("Readability extraction failed", url=url, error=str(e))
            return empty

        text = html_entities.unescape(self._html_to_text(content_html))
        metadata = self._extract_metadata(html, url)

        lead_image = _meta_value(metadata, "image")
        if not lead_image and content_html:
            images = _IMG_PATTERN.findall(content_html)
            if images:
                lead_image = urljoin(url, images[0])

        excerpt = _meta_value(metadata, "description") or self._make_excerpt(text)
        title = title or _meta_value(metadata, "title")

        return TraditionalArticle(
            title=html_entities.unescape(title).strip() if title else None,
            content=text,
            url=url,
            author=_meta_value(metadata, "author"),
            date_published=_meta_value(metadata, "date"),
            excerpt=html_entities.unescape(excerpt) if excerpt else None,
            lead_image_url=lead_image,
            word_count=len(text.split()) if text else None,
            domain=extract_domain(url) or None,
        )

    def _extract_metadata(self, html: str, url: str) -> Any:
        try:
            return trafilatura.extract_metadata(html, default_url=url)
        except (ValueError, TypeError, etree.ParserError) as e:
            logger.debug("Trafilatura metadata extraction failed", url=url, error=str(e))
            return None

    def _make_excerpt(self, text: str) -> Optional[str]:
        if not text:
            return None
        limit = EXCERPT_LENGTH
        if len(text) <= limit:
            return text
        cut = text[:limit].rsplit(" ", 1)[0]
        return f"{cut}..."

    @staticmethod
    def _html_to_text(html: str) -> str:
        """Convert HTML to plain text."""
        if not html:
            return ""
        try:
            doc = lxml_html.fromstring(html)
        except (etree.ParserError, ValueError):
            return ""
        for element in doc.xpath("//script|//style"):
            element.drop_tree()
        text = etree.tostring(doc, method="text", encoding="unicode")
        return " ".join(text.split())


def _meta_value(metadata: Any, attr: str) -> Optional[str]:
    if metadata is None:
        return None
    value = metadata.get(attr) if isinstance(metadata, dict) else getattr(metadata, attr, None)
    if value is None:
        return None
    text = str(value).strip()
    return text or None
