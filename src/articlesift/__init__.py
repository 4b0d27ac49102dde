"""
ArticleSift - Hybrid structured-data and readability article extraction.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .errors import ArticleSiftError, ParsingFailedError
from .extractor import (
    benchmark_parsing_methods,
    get_content_accessibility_status,
    get_platform_recommendations,
    parse_article_hybrid,
)

__all__ = [
    "__version__",
    "ArticleSiftError",
    "Config",
    "ParsingFailedError",
    "benchmark_parsing_methods",
    "get_content_accessibility_status",
    "get_platform_recommendations",
    "parse_article_hybrid",
]
