"""
HTTP session utilities for OBS operations.

This module creates the pooled httpx client shared by every request an
ObsClient makes.
"""

import logging
from typing import Optional

import httpx

from .constants import CONNECT_TIMEOUT, DEFAULT_MAX_CONNECTIONS, DEFAULT_TIMEOUT


def http2_available() -> bool:
    """Return True when the optional ``h2`` package is installed."""
    try:
        import importlib.util  # pylint: disable=import-outside-toplevel

        return importlib.util.find_spec("h2") is not None
    except (ImportError, AttributeError):
        return False


def create_session_with_retry(
    auth: Optional[httpx.Auth] = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
    verify: bool = True,
) -> httpx.Client:
    """
    Create an httpx client with connection pooling for OBS requests.

    Retries are not configured on the transport: the client only retries
    idempotent GETs itself (see ObsClient), and httpx transport retries would
    apply to every method.

    Args:
        auth: Authentication applied to every request
        timeout: Total timeout in seconds
        max_connections: Maximum number of connections in the pool
        verify: Verify TLS certificates

    Returns:
        Configured httpx.Client with pooling, timeouts, redirects followed
        and HTTP/2 when available

    Example:
        >>> client = create_session_with_retry(auth=ObsBasicAuth("user", "pass"))
        >>> response = client.get("https://api.opensuse.org/about")
    """
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max(20, max_connections // 5),
    )
    timeout_config = httpx.Timeout(timeout, connect=CONNECT_TIMEOUT)

    use_http2 = http2_available()
    if not use_http2:
        logging.debug("HTTP/2 support not available (h2 package not installed)")

    return httpx.Client(
        auth=auth,
        limits=limits,
        timeout=timeout_config,
        follow_redirects=True,
        http2=use_http2,
        verify=verify,
    )


__all__ = ["create_session_with_retry", "http2_available"]
