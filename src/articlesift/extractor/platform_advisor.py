"""
Domain-based parsing strategy hints.
"""

from __future__ import annotations

from ..crawler.urls import extract_domain
from .models import PlatformRecommendation, RecommendedStrategy

NEWS_DOMAINS_WITH_STRUCTURED_DATA = (
    "cnn.com",
    "bbc.com",
    "reuters.com",
    "theguardian.com",
    "nytimes.com",
    "washingtonpost.com",
    "bloomberg.com",
    "techcrunch.com",
    "wired.com",
    "arstechnica.com",
    "theverge.com",
    "engadget.com",
)

PLATFORMS_WITH_STRUCTURED_DATA = (
    "medium.com",
    "substack.com",
    "linkedin.com",
    "dev.to",
    "stackoverflow.com",
    "github.com",
)

TRADITIONAL_FIRST_DOMAINS = (
    "wordpress.com",
    "blogspot.com",
    "tumblr.com",
)

_RULES = (
    (
        NEWS_DOMAINS_WITH_STRUCTURED_DATA,
        PlatformRecommendation(
            likely_has_structured_data=True,
            recommended_strategy=RecommendedStrategy.STRUCTURED_FIRST,
            reason="Major news site with typically good structured data",
        ),
    ),
    (
        PLATFORMS_WITH_STRUCTURED_DATA,
        PlatformRecommendation(
            likely_has_structured_data=True,
            recommended_strategy=RecommendedStrategy.STRUCTURED_FIRST,
            reason="Platform known for implementing structured data",
        ),
    ),
    (
        TRADITIONAL_FIRST_DOMAINS,
        PlatformRecommendation(
            likely_has_structured_data=False,
            recommended_strategy=RecommendedStrategy.TRADITIONAL_FIRST,
            reason="Platform with historically poor structured data implementation",
        ),
    ),
)

DEFAULT_RECOMMENDATION = PlatformRecommendation(
    likely_has_structured_data=True,
    recommended_strategy=RecommendedStrategy.HYBRID,
    reason="Unknown domain, using hybrid approach for best results",
)


def get_platform_recommendations(url: str) -> PlatformRecommendation:
    """Pure lookup of a strategy hint for ``url``'s hostname. Never raises."""
    domain = extract_domain(url) if isinstance(url, str) else ""
    if domain:
        for domains, recommendation in _RULES:
            if any(d in domain for d in domains):
                return recommendation
    return DEFAULT_RECOMMENDATION
