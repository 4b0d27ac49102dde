"""
Extraction Confidence Scorer

Additive 0-100 trust score for a hybrid parsing result, built from field
presence, content length and paywall suspicion.
"""

from __future__ import annotations

from typing import Optional

import structlog

from ..config.config import ScoringWeights
from .accessibility import has_rich_metadata, is_probable_paywall
from .models import HybridParsingResult

logger = structlog.get_logger(__name__)


class ConfidenceScorer:
    """
    Deterministic confidence scorer.

    Signals:
    - Title and content length
    - Byline, date, excerpt and lead image
    - Full-text vs. partial content
    - Keywords and publisher metadata
    - Short content mislabeled as complete
    - Paywall stubs with rich metadata (floored rather than penalized)
    """

    def __init__(self, weights: Optional[ScoringWeights] = None) -> None:
        self.weights = weights or ScoringWeights()

    def _score_content_length(self, content: Optional[str]) -> int:
        w = self.weights
        if not content:
            return 0
        length = len(content)
        if length > w.content_full_length:
            return w.content_over_1000
        elif length > w.content_substantial_length:
            return w.content_over_500
        elif length > w.content_some_length:
            return w.content_over_200
        elif length > w.content_minimal_length:
            return w.content_over_50
        return w.content_minimal

    def score(self, result: HybridParsingResult) -> int:
        w = self.weights
        confidence = 0

        if result.title:
            confidence += w.title
        confidence += self._score_content_length(result.content)

        if result.author:
            confidence += w.author
        if result.date_published:
            confidence += w.date
        if result.excerpt:
            confidence += w.excerpt
        if result.lead_image_url:
            confidence += w.lead_image

        if result.has_full_content:
            confidence += w.full_content_bonus
        else:
            confidence = max(confidence - w.partial_content_penalty, w.partial_content_floor)

        if result.metadata.keywords:
            confidence += w.keywords
        if result.metadata.publisher:
            confidence += w.publisher

        # Short content that claims to be complete is suspicious
        if result.content and len(result.content) < w.suspicious_short_length and result.has_full_content:
            confidence = max(confidence - w.suspicious_short_penalty, w.suspicious_short_floor)

        if is_probable_paywall(result, w) and has_rich_metadata(result):
            confidence = max(confidence, w.paywall_metadata_floor)

        final = max(0, min(confidence, 100))
        logger.debug("Confidence computed", confidence=final, has_full_content=result.has_full_content)
        return final
