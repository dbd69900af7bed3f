"""
URL utilities for OBS operations.

OBS resources are addressed by path segments below the API URL
(``/source/<project>/<package>/<file>``); every segment is percent-encoded
on its own so names containing ``:`` or ``+`` and file names containing
``/``-like characters can't escape their position.
"""

from typing import Iterable, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urlencode

QueryValue = Union[str, int]
QueryPairs = Sequence[Tuple[str, QueryValue]]


def quote_segment(segment: str) -> str:
    """Percent-encode one path segment (``/`` included)."""
    return quote(segment, safe=":@+~!$&'()*,;=")


def normalize_base_url(base_url: str) -> str:
    """
    Validate an API URL and strip the trailing slash.

    Raises:
        ValueError: If the URL has no http(s) scheme or no host
    """
    base = base_url.strip().rstrip("/")
    scheme, sep, rest = base.partition("://")
    if not sep or scheme.lower() not in ("http", "https") or not rest or rest.startswith("/"):
        raise ValueError(f"Invalid OBS API URL: {base_url!r}")
    return base


def build_url(base_url: str, segments: Iterable[str], params: Optional[QueryPairs] = None) -> str:
    """
    Build ``{base_url}/{segment}/...?{params}``.

    Args:
        base_url: Normalized API URL (see normalize_base_url)
        segments: Unencoded path segments
        params: Ordered query pairs; repeated keys are kept

    Example:
        >>> build_url("https://api.example.org", ["source", "home:user", "pkg"], [("rev", 3)])
        'https://api.example.org/source/home:user/pkg?rev=3'
    """
    url = base_url + "/" + "/".join(quote_segment(s) for s in segments)
    if params:
        url += "?" + urlencode([(key, str(value)) for key, value in params])
    return url


__all__ = ["quote_segment", "normalize_base_url", "build_url", "QueryPairs"]
