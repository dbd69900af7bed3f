"""
HTTP basic authentication for the OBS API.

This module provides the httpx authentication flow attached to every
request an ObsClient sends.
"""

# Standard library imports
import base64
import logging
from typing import Generator

# Third-party imports
import httpx


class ObsBasicAuth(httpx.Auth):
    """
    Basic authentication with the OBS user and password.

    The Authorization header is computed once; the password is never part
    of the repr so clients can be logged safely.
    """

    def __init__(self, username: str, password: str):
        """
        Initialize basic authentication.

        Args:
            username: OBS user name
            password: OBS password
        """
        self._username = username
        credentials = f"{username}:{password}".encode("utf-8")
        self._header = "Basic " + base64.b64encode(credentials).decode("ascii")

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Add the Authorization header and report rejected credentials."""
        request.headers["Authorization"] = self._header

        response = yield request

        if response.status_code == 401:
            logging.debug("OBS rejected the credentials of user %s", self._username)

    @property
    def username(self) -> str:
        return self._username

    def __repr__(self) -> str:
        return f"ObsBasicAuth(username={self._username!r}, password='[REDACTED]')"


__all__ = ["ObsBasicAuth"]
