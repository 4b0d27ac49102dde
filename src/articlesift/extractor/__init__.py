"""
ArticleSift Extraction Module - Hybrid Structured/Traditional Parser

Parsing runs in up to two stages:
1. Structured data: JSON-LD, Microdata, RDFa, OpenGraph and Twitter Cards
2. Traditional: readability DOM extraction with an encoding retry

Features:
- Strategy chosen from a structured-data quality score
- Field-level merge of structured and traditional results
- Confidence scoring and paywall/no-content classification
- Domain-based strategy hints
- Benchmarking of all three strategies
"""

from .accessibility import AccessibilityClassifier, get_content_accessibility_status
from .benchmark import benchmark_parsing_methods
from .confidence_scorer import ConfidenceScorer
from .manager import HybridParser, parse_article_hybrid
from .models import (
    AccessibilityErrorType,
    AccessibilityStatus,
    ArticleMetadata,
    BenchmarkRecord,
    BenchmarkWinner,
    HybridParsingResult,
    ParsingMethod,
    PlatformRecommendation,
    RecommendedStrategy,
    TraditionalArticle,
)
from .platform_advisor import get_platform_recommendations
from .protocols import PageFetcher, StructuredExtractor, TraditionalParser
from .readability_extractor import ReadabilityExtractor

__all__ = [
    "AccessibilityClassifier",
    "AccessibilityErrorType",
    "AccessibilityStatus",
    "ArticleMetadata",
    "BenchmarkRecord",
    "BenchmarkWinner",
    "ConfidenceScorer",
    "HybridParser",
    "HybridParsingResult",
    "PageFetcher",
    "ParsingMethod",
    "PlatformRecommendation",
    "ReadabilityExtractor",
    "RecommendedStrategy",
    "StructuredExtractor",
    "TraditionalArticle",
    "TraditionalParser",
    "benchmark_parsing_methods",
    "get_content_accessibility_status",
    "get_platform_recommendations",
    "parse_article_hybrid",
]
