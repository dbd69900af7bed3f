"""
Exception hierarchy for OBS client operations.

Every error raised by the client derives from ObsError so callers can
catch a single type:

    - ObsTransportError: network or TLS failure, the request got no response
    - ObsHttpError: non-2xx response, with the parsed OBS <status> body if any
    - ObsDecodeError: malformed XML or a document that doesn't fit the model
    - ChecksumMismatchError: downloaded content doesn't match its MD5
    - UnexpectedResultError: well-formed answer missing required data
    - CredentialsError: no usable credentials in the configuration
    - BuildFailureError: a monitored build ended failed or unbuildable
"""

from typing import Optional

import httpx


class ObsError(Exception):
    """Base class for all OBS client errors."""


class ObsTransportError(ObsError):
    """Network level failure (connection refused, TLS, timeout, ...)."""

    def __init__(self, message: str, *, request: Optional[httpx.Request] = None) -> None:
        super().__init__(message)
        self.request = request


class ObsHttpError(ObsError, httpx.HTTPStatusError):
    """
    Non-successful HTTP response.

    OBS reports API errors as ``<status code="..."><summary>...</summary></status>``
    documents; when the body can be parsed the fields are exposed here,
    otherwise they are None.
    """

    def __init__(
        self,
        status_code: int,
        *,
        request: httpx.Request,
        response: httpx.Response,
        code: Optional[str] = None,
        summary: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.summary = summary
        self.details = details
        httpx.HTTPStatusError.__init__(self, self._format_message(), request=request, response=response)

    def _format_message(self) -> str:
        if self.code is not None:
            return f"{self.status_code} {self.code}: {self.summary or ''}".rstrip()
        return f"{self.status_code} HTTP error"

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses."""
        return 400 <= self.status_code < 500


class ObsDecodeError(ObsError, ValueError):
    """Response body could not be decoded into the expected model."""


class ChecksumMismatchError(ObsError):
    """Downloaded content does not match the MD5 reported by the API."""

    def __init__(self, filename: str, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {filename}: expected {expected}, got {actual}")
        self.filename = filename
        self.expected = expected
        self.actual = actual


class UnexpectedResultError(ObsError):
    """The API answered successfully but without the data we asked for."""


class CredentialsError(ObsError):
    """Credentials could not be resolved from the configuration."""


class BuildFailureError(ObsError):
    """A monitored package finished without a successful build."""


__all__ = [
    "ObsError",
    "ObsTransportError",
    "ObsHttpError",
    "ObsDecodeError",
    "ChecksumMismatchError",
    "UnexpectedResultError",
    "CredentialsError",
    "BuildFailureError",
]
