"""
ArticleSift Structured Metadata Module

Extracts article metadata embedded in pages as JSON-LD (Schema.org),
Microdata, RDFa, OpenGraph and Twitter Cards, and scores whether it is
rich enough to stand in for a full-text parse.
"""

from .structured_data_parser import (
    AuthorInfo,
    ExtractionPerformanceScore,
    PublisherInfo,
    StructuredArticleData,
    StructuredDataExtractionResult,
    StructuredDataParser,
    StructuredRecommendation,
    combine_structured_data,
    get_extraction_performance_score,
    has_useful_structured_data,
)

__all__ = [
    "AuthorInfo",
    "ExtractionPerformanceScore",
    "PublisherInfo",
    "StructuredArticleData",
    "StructuredDataExtractionResult",
    "StructuredDataParser",
    "StructuredRecommendation",
    "combine_structured_data",
    "get_extraction_performance_score",
    "has_useful_structured_data",
]
