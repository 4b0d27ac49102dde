"""
URL cleaning and encoding helpers for page fetches.
"""

from __future__ import annotations

from urllib.parse import quote, unquote, urlsplit, urlunsplit

# encodeURI leaves these untouched; "!'()*" are dropped so they get escaped too.
_URI_SAFE = ";,/?:@&=+$#"
# encodeURIComponent leaves only unreserved marks untouched.
_COMPONENT_SAFE = "!~*'()"


def clean_url(url: str) -> str:
    """Percent-decode a URL that already carries escapes."""
    if "%" not in url:
        return url
    try:
        return unquote(url, errors="strict")
    except UnicodeDecodeError:
        return url


def _ascii_netloc(netloc: str) -> str:
    """IDNA-encode a non-ASCII hostname, keeping any userinfo and port."""
    if netloc.isascii():
        return netloc
    userinfo, at, hostport = netloc.rpartition("@")
    host, colon, port = hostport.partition(":")
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return netloc
    return f"{quote(userinfo, safe=_URI_SAFE)}{at}{host}{colon}{port}"


def encode_url(url: str) -> str:
    """
    Encode a clean URL, escaping every character outside the restricted safe set.

    Only path, query and fragment are escaped; a non-ASCII host is converted to punycode.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return quote(url, safe=_URI_SAFE)
    return urlunsplit(
        (
            parts.scheme,
            _ascii_netloc(parts.netloc),
            quote(parts.path, safe=_URI_SAFE),
            quote(parts.query, safe=_URI_SAFE),
            quote(parts.fragment, safe=_URI_SAFE),
        )
    )


def encode_url_components(url: str) -> str:
    """
    Encode every path segment, query key and query value as a full URI component.

    Scheme and port are preserved and a non-ASCII host is converted to punycode,
    so the result stays fetchable.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return quote(url, safe=_COMPONENT_SAFE)
    path = "/".join(quote(segment, safe=_COMPONENT_SAFE) for segment in parts.path.split("/"))
    query_pairs = []
    for pair in parts.query.split("&") if parts.query else []:
        key, sep, value = pair.partition("=")
        query_pairs.append(quote(key, safe=_COMPONENT_SAFE) + sep + quote(value, safe=_COMPONENT_SAFE))
    fragment = quote(parts.fragment, safe=_COMPONENT_SAFE)
    return urlunsplit((parts.scheme, _ascii_netloc(parts.netloc), path, "&".join(query_pairs), fragment))


def has_unescaped_characters(url: str) -> bool:
    """True if the URL holds characters that must be escaped before a request is sent."""
    for ch in url:
        if ord(ch) > 0x7E or ord(ch) <= 0x20 or ch in '"<>\\^`{|}':
            return True
    i = url.find("%")
    while i != -1:
        escape = url[i + 1 : i + 3]
        if len(escape) != 2 or any(c not in "0123456789abcdefABCDEF" for c in escape):
            return True
        i = url.find("%", i + 1)
    return False


def extract_domain(url: str) -> str:
    """Return the lowercase hostname of a URL, or an empty string."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""
