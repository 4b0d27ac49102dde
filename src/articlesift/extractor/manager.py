"""
Hybrid parsing orchestrator for ArticleSift.

Runs structured-data extraction first and, depending on how much of the
article it recovered, adopts it as-is, supplements it with a traditional
readability parse, or hands over to the traditional parser entirely.
"""

from __future__ import annotations

import time
from typing import Optional

import structlog

from ..config.config import Config, ExtractionSettings, settings
from ..crawler.http_client import HttpClient
from ..crawler.urls import extract_domain
from ..errors import ArticleSiftError, ParsingFailedError
from ..metadata.structured_data_parser import (
    StructuredArticleData,
    StructuredDataExtractionResult,
    StructuredDataParser,
    StructuredRecommendation,
    get_extraction_performance_score,
)
from ..observability import histogram, increment
from .confidence_scorer import ConfidenceScorer
from .models import ArticleMetadata, HybridParsingResult, ParsingMethod, TraditionalArticle
from .protocols import StructuredExtractor, TraditionalParser
from .readability_extractor import ReadabilityExtractor

logger = structlog.get_logger(__name__)


def estimate_word_count(text: Optional[str]) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


class HybridParser:
    """
    Chooses and fuses parsing strategies for a single URL.

    Features:
    - Structured-data quality score drives the strategy
    - Traditional parse supplements missing body and fields in hybrid mode
    - Structured record as fallback when traditional parsing fails
    - Confidence recomputed on the final merged result
    """

    def __init__(
        self,
        structured: StructuredExtractor,
        traditional: TraditionalParser,
        extraction: Optional[ExtractionSettings] = None,
    ) -> None:
        self.structured = structured
        self.traditional = traditional
        self.extraction = extraction or settings.extraction
        self.weights = self.extraction.scoring
        self.scorer = ConfidenceScorer(self.weights)
        self.logger = logger.bind(component="HybridParser")

    @classmethod
    def from_http_client(cls, http_client: HttpClient, config: Optional[Config] = None) -> "HybridParser":
        """Build a parser whose stages share one HTTP client."""
        extraction = (config or settings).extraction
        return cls(
            structured=StructuredDataParser(http_client),
            traditional=ReadabilityExtractor(http_client, extraction),
            extraction=extraction,
        )

    async def parse(self, url: str) -> HybridParsingResult:
        """
        Parse ``url`` into a confidence-scored article record.

        Raises:
            ParsingFailedError: No structured data and traditional parsing failed
        """
        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_url=url):
            self.logger.info("Starting hybrid parsing")
            try:
                structured_result = await self._extract_structured(url)
                performance = get_extraction_performance_score(structured_result, self.weights)
                self.logger.info(
                    "Structured data scored",
                    score=performance.score,
                    recommendation=performance.recommendation.value,
                    methods=structured_result.extraction_methods,
                )

                combined = structured_result.combined
                match performance.recommendation:
                    case StructuredRecommendation.USE_STRUCTURED if combined is not None and (
                        combined.article_body or combined.description
                    ):
                        result = self._from_structured(combined, url, ParsingMethod.STRUCTURED_ONLY)
                    case StructuredRecommendation.HYBRID if combined is not None:
                        result = await self._parse_hybrid(combined, url)
                    case _:
                        result = await self._parse_traditional_with_fallback(combined, url)
            except ParsingFailedError:
                increment("parse_failures_total")
                raise

            result.structured_data_score = performance.score
            result.extraction_time = int((time.perf_counter() - start) * 1000)
            result.extraction_methods = list(structured_result.extraction_methods)
            result.structured_data = combined
            result.confidence = self.scorer.score(result)

            increment("parses_total", labels={"parsing_method": result.parsing_method.value})
            histogram("parse_duration_seconds", result.extraction_time / 1000)
            self.logger.info(
                "Hybrid parsing completed",
                parsing_method=result.parsing_method.value,
                extraction_time=result.extraction_time,
                confidence=result.confidence,
            )
            return result

    async def _extract_structured(self, url: str) -> StructuredDataExtractionResult:
        try:
            return await self.structured.extract(url)
        except ArticleSiftError as e:
            self._record_stage_failure("structured", e)
            return StructuredDataExtractionResult(source_url=url)

    async def _parse_hybrid(self, structured: StructuredArticleData, url: str) -> HybridParsingResult:
        result = self._from_structured(structured, url, ParsingMethod.HYBRID)

        try:
            traditional = await self.traditional.parse(url)
        except ArticleSiftError as e:
            # Keep the structured record as-is
            self._record_stage_failure("traditional", e)
            return result

        if len(traditional.content) > len(result.content or ""):
            result.content = traditional.content
            result.has_full_content = True
            result.word_count = traditional.word_count or estimate_word_count(traditional.content)

        if not result.title and traditional.title:
            result.title = traditional.title
        if not result.author and traditional.author:
            result.author = traditional.author
        if not result.date_published and traditional.date_published:
            result.date_published = traditional.date_published
        if not result.excerpt and traditional.excerpt:
            result.excerpt = traditional.excerpt
        if not result.lead_image_url and traditional.lead_image_url:
            result.lead_image_url = traditional.lead_image_url

        return result

    async def _parse_traditional_with_fallback(
        self, structured: Optional[StructuredArticleData], url: str
    ) -> HybridParsingResult:
        try:
            traditional = await self.traditional.parse(url)
        except ArticleSiftError as e:
            self._record_stage_failure("traditional", e)
            if structured is not None:
                self.logger.info("Falling back to structured data")
                return self._from_structured(structured, url, ParsingMethod.STRUCTURED_FALLBACK)
            raise ParsingFailedError(f"Failed to parse article: {e}", url=url) from e

        return self._from_traditional(traditional, url)

    def _from_structured(
        self, data: StructuredArticleData, url: str, method: ParsingMethod
    ) -> HybridParsingResult:
        content = data.article_body or data.description or ""
        return HybridParsingResult(
            parsing_method=method,
            title=data.title,
            content=content,
            url=data.url or url,
            author=data.authors[0].name if data.authors else None,
            date_published=data.date_published,
            excerpt=data.description,
            lead_image_url=data.images[0] if data.images else None,
            word_count=data.word_count or estimate_word_count(content),
            domain=extract_domain(url) or None,
            has_full_content=bool(data.article_body),
            metadata=ArticleMetadata(
                keywords=data.keywords or None,
                categories=data.categories or None,
                publisher=data.publisher.name if data.publisher else None,
                language=data.language,
                reading_time=data.reading_time,
            ),
        )

    def _from_traditional(self, article: TraditionalArticle, url: str) -> HybridParsingResult:
        return HybridParsingResult(
            parsing_method=ParsingMethod.TRADITIONAL_ONLY,
            title=article.title,
            content=article.content,
            url=article.url or url,
            author=article.author,
            date_published=article.date_published,
            excerpt=article.excerpt,
            lead_image_url=article.lead_image_url,
            word_count=article.word_count,
            domain=article.domain or extract_domain(url) or None,
            has_full_content=bool(article.content),
        )

    def _record_stage_failure(self, stage: str, error: ArticleSiftError) -> None:
        increment("stage_failures_total", labels={"stage": stage, "error_type": type(error).__name__})
        self.logger.warning(
            "Extraction stage failed",
            stage=stage,
            error=str(error),
            error_type=type(error).__name__,
        )


async def parse_article_hybrid(
    url: str,
    *,
    parser: Optional[HybridParser] = None,
    config: Optional[Config] = None,
) -> HybridParsingResult:
    """Parse a single URL, creating a short-lived HTTP client when no parser is given."""
    if parser is not None:
        return await parser.parse(url)
    async with HttpClient(config) as client:
        return await HybridParser.from_http_client(client, config).parse(url)
