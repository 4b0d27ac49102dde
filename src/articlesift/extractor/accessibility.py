"""
Accessibility classification for extracted articles.
"""

from __future__ import annotations

from typing import Optional

from ..config.config import ScoringWeights
from .models import AccessibilityErrorType, AccessibilityStatus, HybridParsingResult

PAYWALL_INDICATORS = (
    "read more at",
    "subscribe to continue",
    "subscribe for full access",
    "sign in to continue",
    "this article is reserved",
    "premium content",
    "subscriber content",
    "to read the full article",
)

PARSING_FAILED_SUGGESTIONS = (
    "Check if the URL is correct and accessible",
    "Try a different article from the same site",
    "Some sites may be temporarily unavailable",
)

PAYWALL_SUGGESTIONS = (
    "Try accessing the article directly in your browser first",
    "Look for a free version of the article on the publisher's site",
    "Try articles from free news sources like BBC, Reuters, or AP News",
)

NO_CONTENT_SUGGESTIONS = (
    "Make sure the URL points to a complete article, not a homepage",
    "Try a different article from a major news website",
    "Some sites may require JavaScript to load content",
)


def has_rich_metadata(result: HybridParsingResult) -> bool:
    """Title, author and publish date are all present."""
    return bool(result.title and result.author and result.date_published)


def is_probable_paywall(result: HybridParsingResult, weights: Optional[ScoringWeights] = None) -> bool:
    """Content carries a paywall phrase, or is a short stub attached to rich metadata."""
    if not result.content:
        return False
    w = weights or ScoringWeights()
    lowered = result.content.lower()
    if any(indicator in lowered for indicator in PAYWALL_INDICATORS):
        return True
    return len(result.content) < w.paywall_short_length and has_rich_metadata(result)


class AccessibilityClassifier:
    """Derives an AccessibilityStatus from a parsing result. First matching check wins."""

    def __init__(self, weights: Optional[ScoringWeights] = None) -> None:
        self.weights = weights or ScoringWeights()

    def classify(self, result: HybridParsingResult) -> AccessibilityStatus:
        if not result.title and not result.content:
            return AccessibilityStatus(
                is_accessible=False,
                reason="Failed to extract any content from the article",
                error_type=AccessibilityErrorType.PARSING_FAILED,
                suggestions=PARSING_FAILED_SUGGESTIONS,
            )

        if is_probable_paywall(result, self.weights):
            return AccessibilityStatus(
                is_accessible=False,
                reason="Article appears to be behind a paywall or requires subscription",
                error_type=AccessibilityErrorType.PAYWALL,
                suggestions=PAYWALL_SUGGESTIONS,
            )

        if not result.content or len(result.content) < self.weights.no_content_length:
            return AccessibilityStatus(
                is_accessible=False,
                reason="Article content is too short or incomplete",
                error_type=AccessibilityErrorType.NO_CONTENT,
                suggestions=NO_CONTENT_SUGGESTIONS,
            )

        return AccessibilityStatus(
            is_accessible=True,
            reason="Article content successfully extracted",
            error_type=AccessibilityErrorType.ACCESSIBLE,
        )


def get_content_accessibility_status(
    result: HybridParsingResult, weights: Optional[ScoringWeights] = None
) -> AccessibilityStatus:
    """Classify ``result`` into an accessibility verdict."""
    return AccessibilityClassifier(weights).classify(result)
