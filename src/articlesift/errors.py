"""
Error taxonomy for ArticleSift.

Stage code raises these typed errors so that callers decide on retries and
fallbacks with ``isinstance`` checks instead of inspecting message text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


class ArticleSiftError(Exception):
    """Base class for all ArticleSift errors."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class FetchError(ArticleSiftError):
    """Raised when a page could not be fetched."""

    pass


class NotFoundError(FetchError):
    """The server answered 404 or 410."""

    def __init__(self, message: str, *, url: Optional[str] = None, status: int = 404) -> None:
        super().__init__(message, url=url)
        self.status = status


class HttpStatusError(FetchError):
    """The server answered with a non-success status other than 404/410."""

    def __init__(self, message: str, *, url: Optional[str] = None, status: int = 0) -> None:
        super().__init__(message, url=url)
        self.status = status


class NetworkError(FetchError):
    """Connection-level failure (DNS, refused connection, reset, TLS)."""

    pass


class FetchTimeoutError(FetchError):
    """The per-stage deadline expired before the page was fetched."""

    def __init__(self, message: str, *, url: Optional[str] = None, timeout: float = 0.0) -> None:
        super().__init__(message, url=url)
        self.timeout = timeout


class EncodingError(FetchError):
    """The URL was rejected because it contains unescaped or invalid characters."""

    pass


class NoContentError(ArticleSiftError):
    """The page was fetched but no article body could be extracted."""

    pass


class ParsingFailedError(ArticleSiftError):
    """Neither structured data nor traditional parsing produced a usable result."""

    pass


# --- Client-facing error reports ---

PROBLEMATIC_DOMAINS = ("medium.com", "substack.com", "linkedin.com")


@dataclass(frozen=True)
class ParsingErrorReport:
    """Client-facing description of a parsing failure."""

    category: str
    title: str
    message: str
    details: str
    retryable: bool
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "title": self.title,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
            "suggestions": list(self.suggestions),
        }


def describe_parsing_error(exc: BaseException, url: str = "") -> ParsingErrorReport:
    """
    Map a parsing failure to a client-facing report.

    Dispatch happens on the exception type first and on the URL second.
    A ``ParsingFailedError`` is described by the stage failure that caused it.
    """
    if isinstance(exc, ParsingFailedError) and isinstance(exc.__cause__, ArticleSiftError):
        return describe_parsing_error(exc.__cause__, url)

    try:
        domain = (urlparse(url).hostname or "").lower()
    except ValueError:
        domain = ""

    if isinstance(exc, (NoContentError, NotFoundError)):
        return ParsingErrorReport(
            category="no-content",
            title="No Content Found",
            message="No readable content found in this article",
            details="The article may be empty, deleted, or in an unsupported format",
            retryable=True,
            suggestions=[
                "Verify the URL points to a complete article",
                "Try a different article from the same website",
                "Some websites require JavaScript to load content",
            ],
        )

    if isinstance(exc, HttpStatusError) and exc.status == 402:
        return ParsingErrorReport(
            category="paywall",
            title="Paywall Detected",
            message="This article appears to be behind a paywall",
            details="Content is restricted to subscribers",
            retryable=False,
            suggestions=[
                "Try a different article that's freely accessible",
                "Look for the same content on other news sites",
                "Check if the site offers free articles per month",
            ],
        )

    if isinstance(exc, HttpStatusError) and exc.status in (401, 403, 451):
        return ParsingErrorReport(
            category="content-blocked",
            title="Content Access Blocked",
            message="Access to this content is blocked",
            details="The website is preventing content extraction",
            retryable=False,
            suggestions=[
                "Try an article from a different news source",
                "Some sites block automated content reading",
                "Look for the same story on other websites",
            ],
        )

    if "gist.github.com" in url:
        return ParsingErrorReport(
            category="gist-redirect",
            title="Code Snippet Found",
            message="This article redirects to a GitHub Gist",
            details="GitHub Gists contain code snippets, not full articles",
            retryable=True,
            suggestions=[
                "Try finding the original full article on Medium or the author's blog",
                'Look for a "View story at Medium.com" link if this was shared',
                "Search for the article title on the original publication site",
            ],
        )

    if any(d in domain for d in PROBLEMATIC_DOMAINS):
        return ParsingErrorReport(
            category="format-unsupported",
            title="Limited Support",
            message=f"Content extraction is limited for {domain}",
            details="This platform often restricts automated content reading",
            retryable=True,
            suggestions=[
                "Try copying the article text directly if it's short",
                "Look for the same content republished elsewhere",
                "Some platforms work better with direct article links",
            ],
        )

    return ParsingErrorReport(
        category="invalid-article",
        title="Article Not Accessible",
        message="Unable to extract content from this article",
        details=str(exc),
        retryable=True,
        suggestions=[
            "Make sure the URL points to a complete article, not a homepage",
            "Try a different article from a major news website",
            "Some sites may be temporarily unavailable",
        ],
    )
