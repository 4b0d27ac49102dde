"""
JSON envelopes for the parse endpoints.

Field names here are consumed by existing clients and must not change.
"""

from __future__ import annotations

from typing import Any, Dict

from ..extractor.models import (
    AccessibilityErrorType,
    AccessibilityStatus,
    HybridParsingResult,
    PlatformRecommendation,
    TraditionalArticle,
)

TRADITIONAL_CONFIDENCE = 85
TRADITIONAL_RETRY_CONFIDENCE = 80

SUPPORTED_STRUCTURED_DATA = [
    "JSON-LD (Schema.org)",
    "Microdata",
    "RDFa",
    "Open Graph",
    "Twitter Card",
]

HYBRID_INFO: Dict[str, Any] = {
    "description": "Hybrid parsing combines structured data extraction with traditional parsing for optimal results",
    "modes": {
        "hybrid": "Automatically chooses the best parsing method based on structured data availability",
        "benchmark": "Tests all parsing methods and compares performance",
    },
    "supportedStructuredData": SUPPORTED_STRUCTURED_DATA,
}


def status_code_for(accessibility: AccessibilityStatus) -> int:
    match accessibility.error_type:
        case AccessibilityErrorType.ACCESSIBLE:
            return 200
        case AccessibilityErrorType.PAYWALL | AccessibilityErrorType.NO_CONTENT | AccessibilityErrorType.PARSING_FAILED:
            return 422


def _parsing_summary(result: HybridParsingResult) -> Dict[str, Any]:
    return {
        "parsingMethod": result.parsing_method.value,
        "structuredDataScore": result.structured_data_score,
        "extractionTime": result.extraction_time,
        "hasFullContent": result.has_full_content,
        "confidence": result.confidence,
        "extractionMethods": list(result.extraction_methods),
    }


def hybrid_success_body(
    result: HybridParsingResult,
    url: str,
    recommendations: PlatformRecommendation,
    accessibility: AccessibilityStatus,
) -> Dict[str, Any]:
    body = result.article_fields()
    body["url"] = result.url or url
    body["_hybrid"] = {
        **_parsing_summary(result),
        "metadata": result.metadata.to_dict(),
        "recommendations": recommendations.to_dict(),
        "accessibility": accessibility.to_dict(),
    }
    return body


def inaccessible_body(
    result: HybridParsingResult,
    recommendations: PlatformRecommendation,
    accessibility: AccessibilityStatus,
) -> Dict[str, Any]:
    """422 body: the reason plus whatever metadata survived."""
    return {
        "error": accessibility.reason,
        "errorType": accessibility.error_type.value,
        "suggestions": list(accessibility.suggestions),
        "metadata": {
            "title": result.title,
            "author": result.author,
            "date_published": result.date_published,
            "domain": result.domain,
            "publisher": result.metadata.publisher,
        },
        "_hybrid": {
            **_parsing_summary(result),
            "recommendations": recommendations.to_dict(),
        },
    }


def traditional_body(article: TraditionalArticle, recommendations: PlatformRecommendation) -> Dict[str, Any]:
    if article.used_retry:
        method, confidence, extraction_method = "traditional-retry", TRADITIONAL_RETRY_CONFIDENCE, "Readability (retry)"
    else:
        method, confidence, extraction_method = "traditional-only", TRADITIONAL_CONFIDENCE, "Readability"
    return {
        "title": article.title,
        "content": article.content,
        "url": article.url,
        "author": article.author,
        "date_published": article.date_published,
        "excerpt": article.excerpt,
        "lead_image_url": article.lead_image_url,
        "word_count": article.word_count,
        "domain": article.domain,
        "_hybrid": {
            "parsingMethod": method,
            "structuredDataScore": 0,
            "extractionTime": 0,
            "hasFullContent": bool(article.content),
            "confidence": confidence,
            "extractionMethods": [extraction_method],
            "metadata": {},
            "recommendations": recommendations.to_dict(),
        },
    }


def parse_hybrid_body(result: HybridParsingResult, recommendations: PlatformRecommendation) -> Dict[str, Any]:
    parsing = _parsing_summary(result)
    parsing["method"] = parsing.pop("parsingMethod")
    return {
        "success": True,
        "mode": "hybrid",
        "article": result.article_fields(),
        "parsing": parsing,
        "metadata": result.metadata.to_dict(),
        "recommendations": recommendations.to_dict(),
    }
