"""
Unit tests for structured data extraction and scoring.
"""

import json
from unittest.mock import Mock

import pytest

from articlesift.config.config import ScoringWeights
from articlesift.errors import NetworkError
from articlesift.metadata.structured_data_parser import (
    AuthorInfo,
    StructuredArticleData,
    StructuredDataExtractionResult,
    StructuredDataParser,
    StructuredRecommendation,
    combine_structured_data,
    get_extraction_performance_score,
    has_useful_structured_data,
    normalize_authors,
    normalize_images,
    normalize_keywords,
    normalize_publisher,
    normalize_word_count,
)
from tests.helpers.pages import LONG_BODY, StubFetcher, build_page


class TestNormalizers:
    def test_authors_from_string_dict_and_list(self):
        assert normalize_authors("Dana Ortiz") == [AuthorInfo(name="Dana Ortiz")]
        assert normalize_authors({"name": "Dana", "url": "https://example.com/dana"}) == [
            AuthorInfo(name="Dana", url="https://example.com/dana")
        ]
        assert [a.name for a in normalize_authors(["A", {"name": "B"}])] == ["A", "B"]
        assert normalize_authors({"@type": "Person"}) == []

    def test_publisher_logo_object(self):
        publisher = normalize_publisher({"name": "Wire", "logo": {"url": "https://example.com/logo.png"}})
        assert publisher.name == "Wire"
        assert publisher.logo == "https://example.com/logo.png"

    def test_keywords_string_is_split(self):
        assert normalize_keywords("a, b ,, c") == ["a", "b", "c"]
        assert normalize_keywords(["x", " y "]) == ["x", "y"]
        assert normalize_keywords([None, "x", 3, {"name": "z"}]) == ["x", "3"]

    @pytest.mark.parametrize(
        "value,expected",
        [(350, 350), (350.0, 350), ("350", 350), (float("inf"), None), (float("nan"), None), (True, None), ("many", None)],
    )
    def test_word_count(self, value, expected):
        assert normalize_word_count(value) == expected

    def test_images_mixed(self):
        images = normalize_images(["https://a/1.jpg", {"url": "https://a/2.jpg"}, {"@type": "ImageObject"}])
        assert images == ["https://a/1.jpg", "https://a/2.jpg"]


class TestParseHtml:
    def test_json_ld_article(self, rich_json_ld):
        result = StructuredDataParser().parse_html(build_page(json_ld=rich_json_ld), "https://example.com/a")

        assert result.extraction_methods == ["JSON-LD"]
        combined = result.combined
        assert combined.headline == "Observatory confirms binary system"
        assert combined.article_body == LONG_BODY
        assert combined.authors[0].name == "Dana Ortiz"
        assert combined.publisher.name == "Science Daily Wire"
        assert combined.keywords == ["astronomy", "binary stars", "observatory"]
        assert combined.language == "en"

    def test_json_ld_graph_and_non_article_types(self):
        graph = {
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "WebSite", "name": "Example"},
                {"@type": ["BlogPosting"], "headline": "From the graph"},
            ],
        }
        result = StructuredDataParser().parse_html(build_page(json_ld=graph))
        assert result.combined.headline == "From the graph"

    def test_invalid_json_ld_is_skipped(self):
        html = '<html><head><script type="application/ld+json">{not json</script></head><body></body></html>'
        result = StructuredDataParser().parse_html(html)
        assert result.json_ld == []
        assert not result.has_structured_data
        assert result.combined is None

    @pytest.mark.parametrize("word_count", ["1e400", "NaN"])
    def test_non_finite_word_count_keeps_other_fields(self, word_count):
        html = (
            '<html><head><script type="application/ld+json">'
            f'{{"@type": "NewsArticle", "headline": "H", "wordCount": {word_count}}}'
            '</script><meta property="og:image" content="https://example.com/i.jpg"></head><body></body></html>'
        )
        result = StructuredDataParser().parse_html(html)

        assert result.combined.headline == "H"
        assert result.combined.word_count is None
        assert result.combined.images == ["https://example.com/i.jpg"]

    def test_failing_technique_keeps_the_others(self, rich_json_ld):
        parser = StructuredDataParser()
        parser.og_parser.parse = Mock(side_effect=ValueError("bad markup"))
        html = build_page(json_ld=rich_json_ld, meta={"og:title": "OG title"})

        result = parser.parse_html(html)

        assert result.open_graph == {}
        assert result.extraction_methods == ["JSON-LD"]
        assert result.combined.headline == "Observatory confirms binary system"

    def test_list_and_null_values_are_not_stringified(self):
        json_ld = {
            "@type": "Article",
            "headline": ["Main headline", "Alt"],
            "description": {"@value": "x"},
            "keywords": [None, "science"],
            "articleSection": [None, "Space"],
        }
        combined = StructuredDataParser().parse_html(build_page(json_ld=json_ld)).combined

        assert combined.headline == "Main headline"
        assert combined.description is None
        assert combined.keywords == ["science"]
        assert combined.categories == ["Space"]

    def test_json_ld_title_beats_open_graph(self, rich_json_ld):
        page = build_page(
            json_ld=rich_json_ld,
            meta={"og:title": "Open Graph title", "og:site_name": "OG Site", "og:locale": "en_GB"},
        )
        result = StructuredDataParser().parse_html(page)

        assert result.extraction_methods == ["JSON-LD", "Open Graph"]
        assert result.combined.headline == "Observatory confirms binary system"
        assert result.combined.publisher.name == "Science Daily Wire"
        assert result.combined.language == "en"

    def test_open_graph_fills_missing_fields(self):
        page = build_page(
            json_ld={"@type": "Article", "headline": "Only a headline"},
            meta={
                "og:description": "OG description",
                "og:image": "https://example.com/og.jpg",
                "article:published_time": "2024-01-01",
                "article:tag": "space",
            },
        )
        combined = StructuredDataParser().parse_html(page).combined

        assert combined.headline == "Only a headline"
        assert combined.description == "OG description"
        assert combined.images == ["https://example.com/og.jpg"]
        assert combined.date_published == "2024-01-01"
        assert combined.tags == ["space"]

    def test_microdata(self):
        body = (
            '<div itemscope itemtype="https://schema.org/NewsArticle">'
            '<h1 itemprop="headline">Microdata headline</h1>'
            '<time itemprop="datePublished" datetime="2024-02-02">Feb 2</time>'
            '<span itemprop="author" itemscope><span itemprop="name">Lee Park</span></span>'
            '<div itemprop="articleBody"><p>Body text here.</p></div>'
            "</div>"
        )
        result = StructuredDataParser().parse_html(build_page(body_html=body))

        assert result.extraction_methods == ["Microdata"]
        assert result.combined.headline == "Microdata headline"
        assert result.combined.date_published == "2024-02-02"
        assert result.combined.authors == [AuthorInfo(name="Lee Park")]
        assert result.combined.article_body == "Body text here."

    def test_rdfa_ignores_open_graph_properties(self):
        body = '<h1 property="schema:headline">RDFa headline</h1>'
        result = StructuredDataParser().parse_html(build_page(body_html=body, meta={"og:description": "x"}))

        assert result.rdfa.headline == "RDFa headline"
        assert result.rdfa.description is None

    def test_twitter_card(self):
        page = build_page(meta={"twitter:title": "Tweet title", "twitter:creator": "@dana"})
        result = StructuredDataParser().parse_html(page)

        assert result.extraction_methods == ["Twitter Card"]
        assert result.combined.headline == "Tweet title"
        assert result.combined.authors[0].name == "@dana"

    def test_empty_html(self):
        result = StructuredDataParser().parse_html("   ", "https://example.com")
        assert result.source_url == "https://example.com"
        assert result.extraction_methods == []


class TestExtract:
    @pytest.mark.asyncio
    async def test_extract_fetches_and_parses(self, rich_json_ld):
        fetcher = StubFetcher({"https://example.com/a": build_page(json_ld=rich_json_ld)})
        result = await StructuredDataParser(fetcher).extract("https://example.com/a")

        assert result.has_structured_data
        assert fetcher.calls == [("https://example.com/a", False)]

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_empty_result(self):
        fetcher = StubFetcher({"https://example.com/a": NetworkError("connection reset")})
        result = await StructuredDataParser(fetcher).extract("https://example.com/a")

        assert result == StructuredDataExtractionResult(source_url="https://example.com/a")

    @pytest.mark.asyncio
    async def test_extract_without_client(self):
        with pytest.raises(RuntimeError):
            await StructuredDataParser().extract("https://example.com/a")


class TestCombine:
    def test_first_non_empty_value_wins(self):
        combined = combine_structured_data(
            [
                None,
                StructuredArticleData(headline="", description="first"),
                StructuredArticleData(headline="second", description="ignored", keywords=["k"]),
            ]
        )
        assert combined.headline == "second"
        assert combined.description == "first"
        assert combined.keywords == ["k"]


def _result(combined: StructuredArticleData) -> StructuredDataExtractionResult:
    return StructuredDataExtractionResult(source_url="", combined=combined, extraction_methods=["JSON-LD"])


class TestUsefulness:
    def test_requires_title(self):
        assert not has_useful_structured_data(_result(StructuredArticleData(description="d")))

    def test_title_with_metadata(self):
        data = StructuredArticleData(headline="t", date_published="2024-01-01")
        assert has_useful_structured_data(_result(data))

    def test_no_methods(self):
        assert not has_useful_structured_data(StructuredDataExtractionResult(source_url=""))


class TestPerformanceScore:
    def test_full_record_recommends_structured(self):
        data = StructuredArticleData(
            headline="t",
            article_body="x" * 1001,
            authors=[AuthorInfo(name="a")],
            date_published="2024-01-01",
            keywords=["k"],
        )
        score = get_extraction_performance_score(_result(data))

        assert score.score == 100
        assert score.recommendation is StructuredRecommendation.USE_STRUCTURED
        assert "Full article content in structured data" in score.reasons

    def test_description_only_recommends_hybrid(self):
        data = StructuredArticleData(
            headline="t",
            description="d",
            authors=[AuthorInfo(name="a")],
            date_published="2024-01-01",
            keywords=["k"],
        )
        score = get_extraction_performance_score(_result(data))

        assert score.score == 75
        assert score.recommendation is StructuredRecommendation.HYBRID

    def test_high_score_without_full_body_is_not_structured(self):
        weights = ScoringWeights(body_partial=60)
        data = StructuredArticleData(headline="t", article_body="x" * 500)
        score = get_extraction_performance_score(_result(data), weights)

        assert score.score == 90
        assert score.recommendation is StructuredRecommendation.HYBRID

    @pytest.mark.parametrize(
        "body,expected",
        [("x" * 1001, 70), ("x" * 201, 55), ("x" * 200, 40)],
    )
    def test_body_length_tiers(self, body, expected):
        score = get_extraction_performance_score(_result(StructuredArticleData(article_body=body)))
        assert score.score == expected

    def test_nothing_recommends_traditional(self):
        score = get_extraction_performance_score(StructuredDataExtractionResult(source_url=""))

        assert score.score == 0
        assert score.reasons == []
        assert score.recommendation is StructuredRecommendation.USE_TRADITIONAL

    def test_json_ld_beats_open_graph_end_to_end(self):
        page = build_page(
            json_ld={"@type": "NewsArticle", "headline": "JSON-LD wins"},
            meta={"og:title": "OG loses"},
        )
        data = StructuredDataParser().parse_html(page)
        assert data.combined.title == "JSON-LD wins"
        assert json.loads(json.dumps(data.combined.to_dict()))["headline"] == "JSON-LD wins"
