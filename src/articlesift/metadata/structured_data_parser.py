"""
Structured Data Parser - JSON-LD, Microdata, RDFa, OpenGraph and Twitter Cards

Extracts machine-readable article metadata from a page and merges the
techniques into one normalized record, highest-priority technique first.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ScoringWeights
from ..errors import ArticleSiftError

if TYPE_CHECKING:
    from ..crawler.http_client import HttpClient

logger = structlog.get_logger(__name__)

ARTICLE_TYPES = (
    "Article",
    "NewsArticle",
    "BlogPosting",
    "ScholarlyArticle",
    "TechArticle",
    "Report",
    "Review",
)

JSON_LD = "JSON-LD"
MICRODATA = "Microdata"
RDFA = "RDFa"
OPEN_GRAPH = "Open Graph"
TWITTER_CARD = "Twitter Card"


@dataclass
class AuthorInfo:
    name: Optional[str] = None
    url: Optional[str] = None


@dataclass
class PublisherInfo:
    name: Optional[str] = None
    url: Optional[str] = None
    logo: Optional[str] = None


@dataclass
class StructuredArticleData:
    """Normalized Schema.org-style article metadata. Every field is optional."""

    headline: Optional[str] = None
    alternative_headline: Optional[str] = None
    description: Optional[str] = None
    article_body: Optional[str] = None
    article_section: Optional[str] = None
    url: Optional[str] = None
    main_entity_of_page: Optional[str] = None
    authors: List[AuthorInfo] = field(default_factory=list)
    publisher: Optional[PublisherInfo] = None
    date_published: Optional[str] = None
    date_modified: Optional[str] = None
    images: List[str] = field(default_factory=list)
    word_count: Optional[int] = None
    keywords: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    language: Optional[str] = None
    reading_time: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(_has_value(getattr(self, f.name)) for f in fields(self))

    @property
    def title(self) -> Optional[str]:
        return self.headline or self.alternative_headline

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "headline": self.headline,
            "alternativeHeadline": self.alternative_headline,
            "description": self.description,
            "articleBody": self.article_body,
            "articleSection": self.article_section,
            "url": self.url,
            "mainEntityOfPage": self.main_entity_of_page,
            "author": [{"name": a.name, "url": a.url} for a in self.authors] or None,
            "publisher": (
                {"name": self.publisher.name, "url": self.publisher.url, "logo": self.publisher.logo}
                if self.publisher
                else None
            ),
            "datePublished": self.date_published,
            "dateModified": self.date_modified,
            "image": self.images or None,
            "wordCount": self.word_count,
            "keywords": self.keywords or None,
            "category": self.categories or None,
            "tags": self.tags or None,
            "language": self.language,
            "readingTime": self.reading_time,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class StructuredDataExtractionResult:
    """Per-technique partial records plus their priority merge."""

    source_url: str
    json_ld: List[StructuredArticleData] = field(default_factory=list)
    microdata: Optional[StructuredArticleData] = None
    rdfa: Optional[StructuredArticleData] = None
    open_graph: Dict[str, Any] = field(default_factory=dict)
    twitter_card: Dict[str, str] = field(default_factory=dict)
    combined: Optional[StructuredArticleData] = None
    extraction_methods: List[str] = field(default_factory=list)

    @property
    def has_structured_data(self) -> bool:
        return bool(self.extraction_methods)


class StructuredRecommendation(Enum):
    USE_STRUCTURED = "use-structured"
    HYBRID = "hybrid"
    USE_TRADITIONAL = "use-traditional"


@dataclass(frozen=True)
class ExtractionPerformanceScore:
    score: int
    reasons: List[str]
    recommendation: StructuredRecommendation


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    if isinstance(value, (AuthorInfo, PublisherInfo)):
        return bool(value.name or value.url)
    return True


def _clean_text(value: Any) -> Optional[str]:
    # Lists contribute their first non-blank string
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if value is None or isinstance(value, (bool, dict)):
        return None
    text = str(value).strip()
    return text or None


# --- Normalization helpers ---


def normalize_authors(author: Any) -> List[AuthorInfo]:
    if not author:
        return []
    if isinstance(author, str):
        return [AuthorInfo(name=author.strip())]
    if isinstance(author, list):
        result: List[AuthorInfo] = []
        for item in author:
            result.extend(normalize_authors(item))
        return result
    if isinstance(author, dict):
        name = _clean_text(author.get("name"))
        url = _clean_text(author.get("url"))
        return [AuthorInfo(name=name, url=url)] if name or url else []
    return []


def normalize_publisher(publisher: Any) -> Optional[PublisherInfo]:
    if not publisher:
        return None
    if isinstance(publisher, str):
        return PublisherInfo(name=publisher.strip())
    if isinstance(publisher, list):
        return normalize_publisher(publisher[0])
    if isinstance(publisher, dict):
        logo = publisher.get("logo")
        if isinstance(logo, dict):
            logo = logo.get("url")
        return PublisherInfo(
            name=_clean_text(publisher.get("name")),
            url=_clean_text(publisher.get("url")),
            logo=_clean_text(logo),
        )
    return None


def normalize_keywords(keywords: Any) -> List[str]:
    if not keywords:
        return []
    if isinstance(keywords, str):
        return [k.strip() for k in keywords.split(",") if k.strip()]
    if isinstance(keywords, list):
        return [text for text in (_clean_text(k) for k in keywords if not isinstance(k, list)) if text]
    return []


def normalize_images(image: Any) -> List[str]:
    if not image:
        return []
    if isinstance(image, str):
        return [image]
    if isinstance(image, list):
        result: List[str] = []
        for item in image:
            result.extend(normalize_images(item))
        return result
    if isinstance(image, dict):
        url = image.get("url") or image.get("contentUrl") or image.get("@id")
        return [str(url)] if url else []
    return []


def normalize_entity_url(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return _clean_text(value.get("@id") or value.get("url"))
    return _clean_text(value)


def normalize_word_count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def is_article_schema(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    schema_type = item.get("@type")
    if isinstance(schema_type, str):
        return schema_type in ARTICLE_TYPES
    if isinstance(schema_type, list):
        return any(t in ARTICLE_TYPES for t in schema_type)
    return False


def normalize_json_ld_article(item: Dict[str, Any]) -> StructuredArticleData:
    section = item.get("articleSection")
    categories: List[str] = []
    if isinstance(section, list):
        categories = [text for text in (_clean_text(s) for s in section if not isinstance(s, list)) if text]
        section = categories[0] if categories else None
    elif isinstance(section, str) and section:
        categories = [section]

    main_entity = normalize_entity_url(item.get("mainEntityOfPage"))
    language = item.get("inLanguage")
    if isinstance(language, dict):
        language = language.get("name") or language.get("alternateName")

    return StructuredArticleData(
        headline=_clean_text(item.get("headline") or item.get("name")),
        alternative_headline=_clean_text(item.get("alternativeHeadline")),
        description=_clean_text(item.get("description")),
        article_body=_clean_text(item.get("articleBody")),
        article_section=_clean_text(section),
        url=_clean_text(item.get("url")) or main_entity,
        main_entity_of_page=main_entity,
        authors=normalize_authors(item.get("author")),
        publisher=normalize_publisher(item.get("publisher")),
        date_published=_clean_text(item.get("datePublished")),
        date_modified=_clean_text(item.get("dateModified")),
        images=normalize_images(item.get("image")),
        word_count=normalize_word_count(item.get("wordCount")),
        keywords=normalize_keywords(item.get("keywords")),
        categories=categories,
        language=_clean_text(language),
        reading_time=_clean_text(item.get("timeRequired")),
    )


# --- Technique parsers ---


class SchemaOrgParser:
    """Parser for Schema.org JSON-LD and Microdata."""

    @staticmethod
    def parse_json_ld(soup: BeautifulSoup) -> List[StructuredArticleData]:
        """Parse article objects from every JSON-LD block, including ``@graph`` members."""
        articles: List[StructuredArticleData] = []

        for script in soup.find_all("script", type="application/ld+json"):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw.strip())
            except json.JSONDecodeError as e:
                logger.warning("Invalid JSON-LD block", error=str(e))
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if is_article_schema(item):
                    articles.append(normalize_json_ld_article(item))
                elif isinstance(item, dict) and isinstance(item.get("@graph"), list):
                    for graph_item in item["@graph"]:
                        if is_article_schema(graph_item):
                            articles.append(normalize_json_ld_article(graph_item))

        return articles

    @staticmethod
    def _prop_value(element: Tag) -> Optional[str]:
        if element.name == "meta":
            return _clean_text(element.get("content"))
        if element.name == "time":
            return _clean_text(element.get("datetime") or element.get_text())
        if element.name == "img":
            return _clean_text(element.get("src"))
        if element.name in ("a", "link"):
            return _clean_text(element.get("href") or element.get_text())
        return _clean_text(element.get("content") or element.get_text(" ", strip=True))

    @classmethod
    def parse_microdata(cls, soup: BeautifulSoup) -> Optional[StructuredArticleData]:
        """Parse the first Microdata item whose ``itemtype`` names an Article."""
        article = soup.find(attrs={"itemtype": re.compile("Article")})
        if not isinstance(article, Tag):
            return None

        def first(prop: str) -> Optional[Tag]:
            found = article.find(attrs={"itemprop": prop})
            return found if isinstance(found, Tag) else None

        result = StructuredArticleData()
        headline = first("headline")
        if headline is not None:
            result.headline = cls._prop_value(headline)
        description = first("description")
        if description is not None:
            result.description = cls._prop_value(description)
        published = first("datePublished")
        if published is not None:
            result.date_published = _clean_text(published.get("datetime") or published.get("content"))
        body = first("articleBody")
        if body is not None:
            result.article_body = _clean_text(body.get_text(" ", strip=True))
        author = first("author")
        if author is not None:
            name_tag = author.find(attrs={"itemprop": "name"})
            name = cls._prop_value(name_tag) if isinstance(name_tag, Tag) else cls._prop_value(author)
            if name:
                result.authors = [AuthorInfo(name=name)]

        return None if result.is_empty() else result


class RdfaParser:
    """Basic RDFa parser for article properties."""

    _RESERVED_PREFIXES = ("og:", "article:", "twitter:", "fb:")

    @classmethod
    def _find(cls, soup: BeautifulSoup, prop: str) -> Optional[Tag]:
        def matches(tag: Tag) -> bool:
            value = tag.get("property")
            return (
                isinstance(value, str)
                and prop in value
                and not value.startswith(cls._RESERVED_PREFIXES)
            )

        found = soup.find(matches)
        return found if isinstance(found, Tag) else None

    @classmethod
    def parse(cls, soup: BeautifulSoup) -> Optional[StructuredArticleData]:
        result = StructuredArticleData()
        for prop, attr in (("headline", "headline"), ("description", "description")):
            tag = cls._find(soup, prop)
            if tag is not None:
                setattr(result, attr, _clean_text(tag.get("content") or tag.get_text(" ", strip=True)))
        author = cls._find(soup, "author")
        if author is not None:
            name = _clean_text(author.get("content") or author.get_text(" ", strip=True))
            if name:
                result.authors = [AuthorInfo(name=name)]
        return None if result.is_empty() else result


class OpenGraphParser:
    """Parser for OpenGraph and ``article:*`` metadata."""

    @staticmethod
    def parse(soup: BeautifulSoup) -> Dict[str, Any]:
        og_data: Dict[str, Any] = {}
        for tag in soup.find_all("meta", property=re.compile(r"^(og|article):")):
            prop = tag.get("property", "")
            content = _clean_text(tag.get("content"))
            if not prop or not content:
                continue
            if prop == "article:tag":
                og_data.setdefault(prop, []).append(content)
            elif prop not in og_data:
                og_data[prop] = content
        return og_data

    @staticmethod
    def to_article_data(og: Dict[str, Any]) -> Optional[StructuredArticleData]:
        if not og:
            return None
        site_name = og.get("og:site_name")
        author = og.get("article:author")
        return StructuredArticleData(
            headline=og.get("og:title"),
            description=og.get("og:description"),
            images=[og["og:image"]] if og.get("og:image") else [],
            url=og.get("og:url"),
            date_published=og.get("og:published_time") or og.get("article:published_time"),
            date_modified=og.get("og:modified_time") or og.get("article:modified_time"),
            authors=[AuthorInfo(name=author)] if author else [],
            article_section=og.get("article:section"),
            tags=list(og.get("article:tag", [])),
            language=og.get("og:locale"),
            publisher=PublisherInfo(name=site_name) if site_name else None,
        )


class TwitterCardParser:
    """Parser for Twitter Card metadata."""

    @staticmethod
    def parse(soup: BeautifulSoup) -> Dict[str, str]:
        twitter_data: Dict[str, str] = {}
        pattern = re.compile(r"^twitter:")
        tags = soup.find_all("meta", attrs={"name": pattern}) + soup.find_all("meta", attrs={"property": pattern})
        for tag in tags:
            name = tag.get("name") or tag.get("property")
            content = _clean_text(tag.get("content"))
            if name and content and name not in twitter_data:
                twitter_data[name] = content
        return twitter_data

    @staticmethod
    def to_article_data(twitter: Dict[str, str]) -> Optional[StructuredArticleData]:
        if not twitter:
            return None
        creator = twitter.get("twitter:creator")
        return StructuredArticleData(
            headline=twitter.get("twitter:title"),
            description=twitter.get("twitter:description"),
            images=[twitter["twitter:image"]] if twitter.get("twitter:image") else [],
            authors=[AuthorInfo(name=creator)] if creator else [],
        )


def combine_structured_data(sources: List[Optional[StructuredArticleData]]) -> StructuredArticleData:
    """Merge partial records; a field keeps the first non-empty value in priority order."""
    combined = StructuredArticleData()
    for source in sources:
        if source is None:
            continue
        for f in fields(StructuredArticleData):
            value = getattr(source, f.name)
            if _has_value(value) and not _has_value(getattr(combined, f.name)):
                setattr(combined, f.name, value)
    return combined


def _run_technique(
    name: str,
    technique: Callable[[BeautifulSoup], Any],
    soup: BeautifulSoup,
    url: str,
    empty: Any,
) -> Any:
    """Run one technique; malformed markup only empties that technique's output."""
    try:
        return technique(soup)
    except (ValueError, TypeError, AttributeError, OverflowError) as e:
        logger.warning("Structured data technique failed", url=url, technique=name, error=str(e))
        return empty


class StructuredDataParser:
    """
    Structured data extractor.

    Fetches a page and runs every technique over it. Fetch or markup failures
    yield an empty result so the caller can fall back to traditional parsing.
    """

    def __init__(self, http_client: Optional[HttpClient] = None) -> None:
        self.http_client = http_client
        self.schema_parser = SchemaOrgParser()
        self.rdfa_parser = RdfaParser()
        self.og_parser = OpenGraphParser()
        self.twitter_parser = TwitterCardParser()

    async def extract(self, url: str) -> StructuredDataExtractionResult:
        if self.http_client is None:
            raise RuntimeError("StructuredDataParser.extract requires an HttpClient")
        try:
            page = await self.http_client.fetch(url)
        except ArticleSiftError as e:
            logger.warning(
                "Structured data fetch failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return StructuredDataExtractionResult(source_url=url)

        result = self.parse_html(page.html, url)
        logger.info("Structured data extraction completed", url=url, methods=result.extraction_methods)
        return result

    def parse_html(self, html: str, url: str = "") -> StructuredDataExtractionResult:
        """Run every technique over ``html`` and merge the results."""
        result = StructuredDataExtractionResult(source_url=url)
        if not html or not html.strip():
            return result

        soup = BeautifulSoup(html, "html.parser")
        result.json_ld = _run_technique(JSON_LD, self.schema_parser.parse_json_ld, soup, url, [])
        result.microdata = _run_technique(MICRODATA, self.schema_parser.parse_microdata, soup, url, None)
        result.rdfa = _run_technique(RDFA, self.rdfa_parser.parse, soup, url, None)
        result.open_graph = _run_technique(OPEN_GRAPH, self.og_parser.parse, soup, url, {})
        result.twitter_card = _run_technique(TWITTER_CARD, self.twitter_parser.parse, soup, url, {})

        og_article = self.og_parser.to_article_data(result.open_graph)
        twitter_article = self.twitter_parser.to_article_data(result.twitter_card)
        sources = [
            (JSON_LD, result.json_ld[0] if result.json_ld else None),
            (MICRODATA, result.microdata),
            (RDFA, result.rdfa),
            (OPEN_GRAPH, og_article),
            (TWITTER_CARD, twitter_article),
        ]
        result.extraction_methods = [
            name for name, source in sources if source is not None and not source.is_empty()
        ]
        if result.extraction_methods:
            result.combined = combine_structured_data([source for _, source in sources])
        return result


def has_useful_structured_data(data: StructuredDataExtractionResult) -> bool:
    """True when the combined record has a title plus content or descriptive metadata."""
    combined = data.combined
    if not data.has_structured_data or combined is None:
        return False
    has_title = bool(combined.title)
    has_content = bool(combined.article_body or combined.description)
    has_metadata = bool(combined.authors or combined.date_published or combined.keywords)
    return has_title and (has_content or has_metadata)


def get_extraction_performance_score(
    data: StructuredDataExtractionResult,
    weights: Optional[ScoringWeights] = None,
) -> ExtractionPerformanceScore:
    """
    Score how well structured data alone can stand in for the article.

    A record without ``articleBody`` can never reach ``use-structured``.
    """
    w = weights or ScoringWeights()
    reasons: List[str] = []
    score = 0
    combined = data.combined

    if data.has_structured_data:
        score += w.structured_present
        reasons.append("Structured data available")

    body = combined.article_body if combined else None
    if body:
        if len(body) > w.body_full_length:
            score += w.body_full
            reasons.append("Full article content in structured data")
        elif len(body) > w.body_partial_length:
            score += w.body_partial
            reasons.append("Partial article content in structured data")
        else:
            score += w.body_short
            reasons.append("Very short article content - likely incomplete")
    elif combined and combined.description:
        score += w.description_only
        reasons.append("Article description available (may be incomplete)")

    if combined and combined.authors:
        score += w.structured_author
        reasons.append("Author information available")
    if combined and combined.date_published:
        score += w.structured_date
        reasons.append("Publication date available")
    if combined and combined.keywords:
        score += w.structured_keywords
        reasons.append("Keywords/tags available")

    score = max(0, min(score, 100))

    if score >= w.use_structured_min_score and body and len(body) > w.body_full_length:
        recommendation = StructuredRecommendation.USE_STRUCTURED
    elif score >= w.hybrid_min_score:
        recommendation = StructuredRecommendation.HYBRID
    else:
        recommendation = StructuredRecommendation.USE_TRADITIONAL

    return ExtractionPerformanceScore(score=score, reasons=reasons, recommendation=recommendation)
