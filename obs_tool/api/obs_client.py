"""
OBS API client for managing projects, packages, sources and builds.

This module provides the main ObsClient class, which is composed using the
mixin pattern to provide specialized functionality:

Mixins:
    - SourceManagerMixin: /source endpoints (projects, packages, files, commits, branches)
    - BuildManagerMixin: /build endpoints (results, job status, binaries, rebuilds)

Callers normally go through the handles returned by ``project()`` and
``ProjectHandle.package()``, which validate names before any request is
built.

Key Features:
    - Basic authentication on a pooled httpx client
    - Transport failures of GET requests retried with exponential backoff
    - OBS ``<status>`` error documents surfaced as ObsHttpError
    - Streamed downloads that close their response when dropped
    - Proper resource cleanup with context managers
"""

# Standard library imports
import logging
import time
from typing import Any, Iterator, Optional, Type, TypeVar

# Third-party imports
import httpx
from pydantic import BaseModel

# Local imports
from ..exceptions import ObsDecodeError, ObsHttpError, ObsTransportError
from ..models import ApiErrorStatus, Directory
from ..utils import ConfigManager, build_url, create_session_with_retry, normalize_base_url
from ..utils.constants import (
    DEFAULT_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
    MAX_LOGGED_BODY_LENGTH,
    MAX_RETRIES,
    RETRY_BACKOFF_FACTOR,
    SEPARATOR_WIDTH,
)
from ..utils.url import QueryPairs
from ..utils.xml_codec import parse_xml
from .auth import ObsBasicAuth
from .build_manager import BuildManagerMixin
from .handles import ProjectHandle
from .source_manager import SourceManagerMixin

M = TypeVar("M", bound=BaseModel)

# Headers never written to logs
SENSITIVE_HEADERS = ("authorization", "cookie", "set-cookie")


def _request_of(error: httpx.RequestError) -> Optional[httpx.Request]:
    try:
        return error.request
    except RuntimeError:
        return None


# ============================================================================
# Main Client Class
# ============================================================================


class ObsClient(SourceManagerMixin, BuildManagerMixin):
    """
    A client for interacting with the Open Build Service API.

    API documentation:
    - https://api.opensuse.org/apidocs/

    Every resource is addressed by path segments below the API URL, e.g.
    ``/source/<project>/<package>/<file>`` or
    ``/build/<project>/<repository>/<arch>/<package>/_log``. Segments are
    percent-encoded one by one and query parameters keep their order.

    Only GET requests are retried on transport failures; POST, PUT and
    DELETE requests are sent once since OBS commands aren't idempotent.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
    ) -> None:
        """Initialize the OBS client.

        Args:
            base_url: API URL of the OBS instance (e.g. "https://api.opensuse.org")
            username: OBS user name
            password: OBS password
            timeout: Timeout in seconds applied to every request
            verify: Verify TLS certificates

        Raises:
            ValueError: If base_url is not an http(s) URL
        """
        self.base_url = normalize_base_url(base_url)
        self.username = username
        self.timeout = timeout  # Used by Protocol mixins
        self._auth = ObsBasicAuth(username, password)
        self.session = create_session_with_retry(auth=self._auth, timeout=timeout, verify=verify)
        logging.debug("ObsClient initialized for %s as %s", self.base_url, username)

    @classmethod
    def create_from_config_file(
        cls, path: Optional[str] = None, apiurl: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT
    ) -> "ObsClient":
        """
        Create an OBS client from the configuration file used by `osc`.

        Args:
            path: Configuration file, defaults to ~/.oscrc
            apiurl: API URL or osc alias, defaults to ``[general] apiurl``
            timeout: Timeout in seconds applied to every request

        Raises:
            FileNotFoundError: If the configuration file doesn't exist
            ValueError: If the configuration file is invalid
            CredentialsError: If no usable credentials are configured for the API URL
        """
        config = ConfigManager(path)
        config.load()

        resolved = config.resolve_alias(apiurl) if apiurl else config.default_apiurl()
        username, password = config.credentials(resolved)
        return cls(resolved, username, password, timeout=timeout)

    @property
    def auth(self) -> ObsBasicAuth:
        """Authentication attached to the session."""
        return self._auth

    def close(self) -> None:
        """Close the session and release all connections."""
        if hasattr(self, "session") and self.session:
            self.session.close()
            logging.debug("ObsClient session closed and connections released")

    def __enter__(self) -> "ObsClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[BaseException], exc_tb: Optional[Any]) -> None:
        """Context manager exit - ensures session is closed."""
        self.close()

    def __repr__(self) -> str:
        return f"ObsClient(base_url={self.base_url!r}, username={self.username!r}, password='[REDACTED]')"

    # ========================================================================
    # Handles
    # ========================================================================

    def list_projects(self) -> Directory:
        """List all projects of the instance (``GET /source``)."""
        return self._get_xml(self._url("source"), Directory, "list projects")

    def project(self, name: str) -> ProjectHandle:
        """
        Get a handle on a project.

        Raises:
            ValueError: If the project name is invalid
        """
        return ProjectHandle(self, name)

    # ========================================================================
    # Request Plumbing
    # ========================================================================

    def _url(self, *segments: str, params: Optional[QueryPairs] = None) -> str:
        """
        Build a fully qualified URL for the given path segments.

        Args:
            *segments: Unencoded path segments (e.g. "source", project, package)
            params: Ordered query parameters, repeated keys allowed

        Returns:
            Complete URL below the API URL
        """
        return build_url(self.base_url, segments, params)

    def _send(self, method: str, url: str, operation: str, *, stream: bool = False, **kwargs: Any) -> httpx.Response:
        """
        Send a request and check its response.

        GET requests failing at the transport level are retried with
        exponential backoff; any other method is sent exactly once.

        Args:
            method: HTTP method
            url: Fully qualified URL
            operation: Description of the operation for logging and errors
            stream: Return before the body is read; the caller must close the response
            **kwargs: Passed to httpx.Client.build_request (content, headers, ...)

        Raises:
            ObsTransportError: If no response was received
            ObsHttpError: If the response status is not 2xx
        """
        attempts = MAX_RETRIES if method == "GET" else 1
        attempt = 1
        while True:
            try:
                request = self.session.build_request(method, url, timeout=self.timeout, **kwargs)
                response = self.session.send(request, stream=stream)
                break
            except httpx.TransportError as e:
                if attempt >= attempts:
                    raise ObsTransportError(f"Failed to {operation}: {e}", request=_request_of(e)) from e
                delay = RETRY_BACKOFF_FACTOR * (2 ** (attempt - 1))
                logging.warning(
                    "Transport error during %s (attempt %d/%d): %s, retrying in %.1fs",
                    operation,
                    attempt,
                    attempts,
                    e,
                    delay,
                )
                time.sleep(delay)
                attempt += 1

        if not response.is_success:
            try:
                self._check_response(response, operation)
            finally:
                response.close()
        return response

    def _get_xml(self, url: str, model: Type[M], operation: str) -> M:
        """GET ``url`` and decode the XML answer into ``model``."""
        response = self._send("GET", url, operation)
        return parse_xml(response.content, model)

    def _post_xml(self, url: str, model: Type[M], operation: str, **kwargs: Any) -> M:
        """POST to ``url`` and decode the XML answer into ``model``."""
        response = self._send("POST", url, operation, **kwargs)
        return parse_xml(response.content, model)

    def _stream(self, url: str, operation: str) -> Iterator[bytes]:
        """
        Stream the body of a GET request.

        The request is only sent once iteration starts; closing the
        generator closes the response.

        Raises:
            ObsTransportError: If the connection fails, before or while streaming
            ObsHttpError: If the response status is not 2xx
        """
        response = self._send("GET", url, operation, stream=True)
        try:
            yield from response.iter_bytes(DOWNLOAD_CHUNK_SIZE)
        except httpx.TransportError as e:
            raise ObsTransportError(f"Failed to {operation}: {e}", request=_request_of(e)) from e
        finally:
            response.close()

    # ========================================================================
    # Error Handling
    # ========================================================================

    def _check_response(self, response: httpx.Response, operation: str = "request") -> None:
        """Check if a response is successful, raise ObsHttpError if not."""
        if response.is_success:
            return

        try:
            response.read()
        except httpx.TransportError as e:
            raise ObsTransportError(f"Failed to {operation}: {e}", request=_request_of(e)) from e

        status = self._parse_error_status(response)

        if response.status_code >= 500:
            # Server errors (5xx) are critical and should be logged as ERROR
            self._log_server_error(response, operation)
        else:
            # Client errors (4xx) are logged at debug level, callers decide how bad they are
            logging.debug(
                "Client error during %s: %s - %s",
                operation,
                response.status_code,
                response.text[:MAX_LOGGED_BODY_LENGTH],
            )

        raise ObsHttpError(
            response.status_code,
            request=response.request,
            response=response,
            code=status.code if status else None,
            summary=status.summary if status else None,
            details=status.details if status else None,
        )

    @staticmethod
    def _parse_error_status(response: httpx.Response) -> Optional[ApiErrorStatus]:
        """Parse the OBS ``<status>`` document of an error response, if there is one."""
        if not response.content.strip():
            return None
        try:
            return parse_xml(response.content, ApiErrorStatus)
        except ObsDecodeError as e:
            logging.debug("Error response is not an OBS status document: %s", e)
            return None

    def _log_request_headers(self, response: httpx.Response) -> None:
        """Log request headers with sensitive data redacted."""
        if response.request and response.request.headers:
            safe_headers = dict(response.request.headers)
            for sensitive_key in SENSITIVE_HEADERS:
                if sensitive_key in safe_headers:
                    safe_headers[sensitive_key] = "[REDACTED]"
            logging.error("  Request Headers: %s", safe_headers)

    def _log_response_details(self, response: httpx.Response) -> None:
        """Log response status and body."""
        logging.error("RESPONSE DETAILS:")
        logging.error("  Status Code: %s", response.status_code)
        if len(response.text) > MAX_LOGGED_BODY_LENGTH:
            logging.error("  Response Body (truncated): %s...", response.text[:MAX_LOGGED_BODY_LENGTH])
        else:
            logging.error("  Response Body: %s", response.text)

    def _log_server_error(self, response: httpx.Response, operation: str) -> None:
        """Log detailed information for server errors (5xx)."""
        logging.error("=" * SEPARATOR_WIDTH)
        logging.error("SERVER ERROR (%d) during %s", response.status_code, operation)
        logging.error("=" * SEPARATOR_WIDTH)

        logging.error("REQUEST DETAILS:")
        logging.error("  Method: %s", response.request.method if response.request else "Unknown")
        logging.error("  URL: %s", response.url)

        self._log_request_headers(response)
        self._log_response_details(response)

        logging.error("=" * SEPARATOR_WIDTH)


__all__ = ["ObsClient"]
