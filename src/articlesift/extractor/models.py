"""
Data models for hybrid extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..metadata.structured_data_parser import StructuredArticleData


class ParsingMethod(Enum):
    """How the final article record was assembled."""

    STRUCTURED_ONLY = "structured-only"
    TRADITIONAL_ONLY = "traditional-only"
    HYBRID = "hybrid"
    STRUCTURED_FALLBACK = "structured-fallback"


class AccessibilityErrorType(Enum):
    """Accessibility verdict for an extracted article."""

    PAYWALL = "paywall"
    NO_CONTENT = "no-content"
    PARSING_FAILED = "parsing-failed"
    ACCESSIBLE = "accessible"


class RecommendedStrategy(Enum):
    """Parsing strategy hint derived from a URL's domain."""

    STRUCTURED_FIRST = "structured-first"
    TRADITIONAL_FIRST = "traditional-first"
    HYBRID = "hybrid"


class BenchmarkWinner(Enum):
    """Strategy that won a benchmark comparison."""

    STRUCTURED = "structured"
    TRADITIONAL = "traditional"
    HYBRID = "hybrid"


@dataclass
class TraditionalArticle:
    """Article fields produced by readability-style DOM extraction."""

    content: str
    url: str
    title: Optional[str] = None
    author: Optional[str] = None
    date_published: Optional[str] = None
    excerpt: Optional[str] = None
    lead_image_url: Optional[str] = None
    word_count: Optional[int] = None
    domain: Optional[str] = None
    used_retry: bool = False


@dataclass
class ArticleMetadata:
    """Supplementary metadata carried over from structured data."""

    keywords: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    publisher: Optional[str] = None
    language: Optional[str] = None
    reading_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "keywords": self.keywords,
            "categories": self.categories,
            "publisher": self.publisher,
            "language": self.language,
            "readingTime": self.reading_time,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class HybridParsingResult:
    """Article record plus the metadata describing how it was produced."""

    parsing_method: ParsingMethod
    title: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None
    date_published: Optional[str] = None
    excerpt: Optional[str] = None
    lead_image_url: Optional[str] = None
    word_count: Optional[int] = None
    domain: Optional[str] = None
    structured_data_score: int = 0
    extraction_time: int = 0
    has_full_content: bool = False
    extraction_methods: List[str] = field(default_factory=list)
    confidence: int = 0
    metadata: ArticleMetadata = field(default_factory=ArticleMetadata)
    structured_data: Optional[StructuredArticleData] = None

    def article_fields(self) -> Dict[str, Any]:
        """The ArticleData-shaped subset consumed by downstream layers."""
        return {
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "author": self.author,
            "date_published": self.date_published,
            "excerpt": self.excerpt,
            "lead_image_url": self.lead_image_url,
            "word_count": self.word_count,
            "domain": self.domain,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.article_fields()
        data.update(
            {
                "parsingMethod": self.parsing_method.value,
                "structuredDataScore": self.structured_data_score,
                "extractionTime": self.extraction_time,
                "hasFullContent": self.has_full_content,
                "extractionMethods": list(self.extraction_methods),
                "confidence": self.confidence,
                "metadata": self.metadata.to_dict(),
            }
        )
        return data


@dataclass(frozen=True)
class AccessibilityStatus:
    """Whether extracted content is usable, and what to do if it is not."""

    is_accessible: bool
    reason: str
    error_type: AccessibilityErrorType
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isAccessible": self.is_accessible,
            "reason": self.reason,
            "errorType": self.error_type.value,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class PlatformRecommendation:
    """Domain-based hint about structured data availability."""

    likely_has_structured_data: bool
    recommended_strategy: RecommendedStrategy
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "likelyHasStructuredData": self.likely_has_structured_data,
            "recommendedStrategy": self.recommended_strategy.value,
            "reason": self.reason,
        }


@dataclass
class BenchmarkRecord:
    """Timings (ms) and outcomes of each strategy for one URL."""

    url: str
    structured_time: int = 0
    traditional_time: int = 0
    hybrid_time: int = 0
    structured_success: bool = False
    traditional_success: bool = False
    hybrid_success: bool = False
    winner: BenchmarkWinner = BenchmarkWinner.TRADITIONAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "structuredTime": self.structured_time,
            "traditionalTime": self.traditional_time,
            "hybridTime": self.hybrid_time,
            "structuredSuccess": self.structured_success,
            "traditionalSuccess": self.traditional_success,
            "hybridSuccess": self.hybrid_success,
            "winner": self.winner.value,
        }
