"""
Shared fixtures for ArticleSift tests.
"""

from typing import Any, Dict

import pytest

from articlesift.config.config import ExtractionSettings, ScoringWeights
from tests.helpers.pages import LONG_BODY, StubFetcher, article_body_html, build_page


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Pages
# ============================================================================


@pytest.fixture
def rich_json_ld() -> Dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "NewsArticle",
        "headline": "Observatory confirms binary system",
        "description": "A faint signal turns out to be a new binary system.",
        "articleBody": LONG_BODY,
        "author": {"@type": "Person", "name": "Dana Ortiz"},
        "publisher": {"@type": "Organization", "name": "Science Daily Wire"},
        "datePublished": "2024-03-12T09:30:00Z",
        "keywords": "astronomy, binary stars, observatory",
        "image": "https://example.com/images/binary.jpg",
        "inLanguage": "en",
    }


@pytest.fixture
def rich_json_ld_page(rich_json_ld) -> str:
    return build_page(json_ld=rich_json_ld, body_html=article_body_html())


@pytest.fixture
def metadata_only_json_ld(rich_json_ld) -> Dict[str, Any]:
    json_ld = dict(rich_json_ld)
    json_ld.pop("articleBody")
    return json_ld


@pytest.fixture
def metadata_only_page(metadata_only_json_ld) -> str:
    return build_page(json_ld=metadata_only_json_ld, body_html=article_body_html())


@pytest.fixture
def plain_page() -> str:
    return build_page(body_html=article_body_html())


# ============================================================================
# Components
# ============================================================================


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def weights() -> ScoringWeights:
    return ScoringWeights()


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    return ExtractionSettings(stage_timeout_seconds=5.0)
