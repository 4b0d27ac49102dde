"""
Tests for the FastAPI parse endpoints.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from articlesift.errors import EncodingError, NetworkError, NoContentError, NotFoundError
from articlesift.extractor.manager import HybridParser
from articlesift.extractor.models import TraditionalArticle
from articlesift.metadata.structured_data_parser import StructuredDataParser
from articlesift.web.main import app, get_parser
from tests.helpers.pages import LONG_BODY, StubFetcher, build_page

URL = "https://www.bbc.com/news/x"


def traditional_article(**overrides) -> TraditionalArticle:
    fields = dict(
        content=LONG_BODY,
        url=URL,
        title="Traditional title",
        author="Dana Ortiz",
        date_published="2024-03-12",
        excerpt="Excerpt",
        word_count=300,
        domain="www.bbc.com",
    )
    fields.update(overrides)
    return TraditionalArticle(**fields)


@pytest.fixture
def traditional():
    parser = AsyncMock()
    parser.name = "readability"
    parser.parse.return_value = traditional_article()
    return parser


@pytest.fixture
def pages():
    return {}


@pytest.fixture
def client(pages, traditional, extraction_settings):
    parser = HybridParser(
        structured=StructuredDataParser(StubFetcher(pages)),
        traditional=traditional,
        extraction=extraction_settings,
    )
    app.dependency_overrides[get_parser] = lambda: parser
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestParseEndpoint:
    def test_missing_url(self, client):
        assert client.get("/api/parse").status_code == 400
        response = client.post("/api/parse", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    def test_hybrid_success_envelope(self, client, pages, rich_json_ld_page):
        pages[URL] = rich_json_ld_page

        response = client.get("/api/parse", params={"url": URL})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Observatory confirms binary system"
        assert body["content"] == LONG_BODY
        assert body["domain"] == "www.bbc.com"
        hybrid = body["_hybrid"]
        assert hybrid["parsingMethod"] == "structured-only"
        assert hybrid["structuredDataScore"] == 100
        assert hybrid["hasFullContent"] is True
        assert hybrid["extractionMethods"] == ["JSON-LD"]
        assert hybrid["metadata"]["publisher"] == "Science Daily Wire"
        assert hybrid["recommendations"]["recommendedStrategy"] == "structured-first"
        assert hybrid["accessibility"]["isAccessible"] is True
        assert set(hybrid) == {
            "parsingMethod",
            "structuredDataScore",
            "extractionTime",
            "hasFullContent",
            "confidence",
            "extractionMethods",
            "metadata",
            "recommendations",
            "accessibility",
        }

    def test_inaccessible_returns_422(self, client, traditional):
        traditional.parse.return_value = traditional_article(
            content="Subscribe to continue reading this story.", excerpt=None
        )

        response = client.post("/api/parse", json={"url": URL})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Article appears to be behind a paywall or requires subscription"
        assert body["errorType"] == "paywall"
        assert len(body["suggestions"]) == 3
        assert body["metadata"] == {
            "title": "Traditional title",
            "author": "Dana Ortiz",
            "date_published": "2024-03-12",
            "domain": "www.bbc.com",
            "publisher": None,
        }
        assert body["_hybrid"]["parsingMethod"] == "traditional-only"
        assert "accessibility" not in body["_hybrid"]

    def test_hybrid_failure_falls_back_to_traditional(self, client, traditional):
        # First call fails inside the hybrid parse, second serves the traditional path
        traditional.parse.side_effect = [NotFoundError("HTTP 404"), traditional_article()]

        response = client.get("/api/parse", params={"url": URL})

        assert response.status_code == 200
        hybrid = response.json()["_hybrid"]
        assert hybrid["parsingMethod"] == "traditional-only"
        assert hybrid["confidence"] == 85
        assert hybrid["metadata"] == {}

    def test_traditional_path(self, client):
        response = client.get("/api/parse", params={"url": URL, "hybrid": "false"})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == LONG_BODY
        assert body["_hybrid"]["parsingMethod"] == "traditional-only"
        assert body["_hybrid"]["structuredDataScore"] == 0
        assert body["_hybrid"]["extractionMethods"] == ["Readability"]

    def test_traditional_retry_label(self, client, traditional):
        traditional.parse.return_value = traditional_article(used_retry=True)

        response = client.post("/api/parse", json={"url": URL, "hybrid": False})

        hybrid = response.json()["_hybrid"]
        assert hybrid["parsingMethod"] == "traditional-retry"
        assert hybrid["confidence"] == 80

    def test_traditional_no_content(self, client, traditional):
        traditional.parse.side_effect = NoContentError("No content found in the article")

        response = client.post("/api/parse", json={"url": URL, "hybrid": False})

        assert response.status_code == 422
        assert response.json() == {"error": "No content found in the article"}

    def test_traditional_failure(self, client, traditional):
        traditional.parse.side_effect = EncodingError("unescaped characters")

        response = client.post("/api/parse", json={"url": "https://medium.com/@a/post", "hybrid": False})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to parse article: unescaped characters"
        assert body["details"]["category"] == "format-unsupported"


class TestParseHybridEndpoint:
    def test_hybrid_mode(self, client, pages, rich_json_ld_page):
        pages[URL] = rich_json_ld_page

        response = client.post("/api/parse-hybrid", json={"url": URL})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["mode"] == "hybrid"
        assert body["article"]["title"] == "Observatory confirms binary system"
        assert body["parsing"]["method"] == "structured-only"
        assert body["metadata"]["keywords"] == ["astronomy", "binary stars", "observatory"]
        assert body["recommendations"]["likelyHasStructuredData"] is True

    def test_benchmark_mode(self, client, pages, rich_json_ld_page):
        pages[URL] = rich_json_ld_page

        response = client.post("/api/parse-hybrid", json={"url": URL, "mode": "benchmark"})

        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "benchmark"
        assert body["benchmark"]["url"] == URL
        assert body["benchmark"]["structuredSuccess"] is True

    def test_failure_is_500(self, client, traditional):
        traditional.parse.side_effect = NetworkError("connection refused")

        response = client.post("/api/parse-hybrid", json={"url": URL})

        assert response.status_code == 500
        assert "connection refused" in response.json()["error"]

    def test_unknown_mode_rejected(self, client):
        assert client.post("/api/parse-hybrid", json={"url": URL, "mode": "fast"}).status_code == 422

    def test_info(self, client):
        response = client.get("/api/parse-hybrid", params={"url": "https://example.org/a"})

        body = response.json()
        assert body["success"] is True
        assert body["recommendations"]["recommendedStrategy"] == "hybrid"
        assert "Microdata" in body["info"]["supportedStructuredData"]
        assert set(body["info"]["modes"]) == {"hybrid", "benchmark"}

    def test_info_requires_url(self, client):
        assert client.get("/api/parse-hybrid").status_code == 400


class TestOperationalEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    def test_metrics(self, client, pages):
        pages[URL] = build_page(json_ld={"@type": "Article", "headline": "h", "articleBody": LONG_BODY * 2})
        client.get("/api/parse", params={"url": URL})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "articlesift_parses_total" in response.text
