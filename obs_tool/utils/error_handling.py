"""
Error handling utilities for standardized error logging and handling.

Used by the CLI commands to turn client exceptions into log messages and
exit codes in one place.
"""

import logging
import sys
import traceback

from ..exceptions import (
    BuildFailureError,
    ChecksumMismatchError,
    CredentialsError,
    ObsDecodeError,
    ObsError,
    ObsHttpError,
    ObsTransportError,
)


def handle_http_error(error: ObsHttpError, operation: str, *, log_traceback: bool = True) -> None:
    """
    Log an HTTP error with a hint matching its status code.

    Args:
        error: The HTTP error to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    status = error.status_code

    if status == 401:
        logging.error(
            "Authentication failed during %s: Invalid credentials. "
            "Please check the user and password for this API URL in your oscrc.",
            operation,
        )
    elif status == 403:
        logging.error(
            "Authentication failed during %s: You don't have permission to access this resource (%s).",
            operation,
            error,
        )
    elif status == 404:
        logging.error("Resource not found during %s: %s", operation, error)
    elif status >= 500:
        logging.error("Server error during %s: %s", operation, error)
    else:
        logging.error("HTTP error during %s: %s", operation, error)

    if error.details:
        logging.error("  Details: %s", error.details)

    if log_traceback:
        logging.debug("Traceback: %s", traceback.format_exc())


def handle_obs_error(error: ObsError, operation: str, *, log_traceback: bool = True) -> None:
    """
    Log any client error with a message suited to its type.

    Args:
        error: The client error to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    if isinstance(error, ObsHttpError):
        handle_http_error(error, operation, log_traceback=log_traceback)
        return

    if isinstance(error, ObsTransportError):
        logging.error("Network error during %s: %s", operation, error)
    elif isinstance(error, ObsDecodeError):
        logging.error("Unexpected response during %s: %s", operation, error)
    elif isinstance(error, ChecksumMismatchError):
        logging.error("Corrupted download during %s: %s", operation, error)
    elif isinstance(error, CredentialsError):
        logging.error("Credentials error during %s: %s", operation, error)
    elif isinstance(error, BuildFailureError):
        logging.error("%s", error)
    else:
        logging.error("Error during %s: %s", operation, error)

    if log_traceback:
        logging.debug("Traceback: %s", traceback.format_exc())


def handle_generic_error(error: Exception, operation: str, *, log_traceback: bool = True) -> None:
    """
    Handle generic errors with standardized logging.

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    logging.error("Unexpected error during %s: %s", operation, error)

    if log_traceback:
        logging.error("Traceback: %s", traceback.format_exc())


def log_and_exit(message: str, exit_code: int = 1) -> None:
    """
    Log an error message and exit the program.

    Args:
        message: Error message to log
        exit_code: Exit code (default: 1)
    """
    logging.error(message)
    sys.exit(exit_code)


__all__ = [
    "handle_http_error",
    "handle_obs_error",
    "handle_generic_error",
    "log_and_exit",
]
