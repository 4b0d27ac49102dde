"""Page fetching for the extraction stages."""

from .http_client import FetchedPage, HttpClient
from .urls import clean_url, encode_url, encode_url_components, extract_domain, has_unescaped_characters

__all__ = [
    "FetchedPage",
    "HttpClient",
    "clean_url",
    "encode_url",
    "encode_url_components",
    "extract_domain",
    "has_unescaped_characters",
]
