"""
obs-tool - A Python client for the Open Build Service API.

This package provides a typed client for the OBS REST/XML API to query and
manage projects, packages, sources and builds, plus the ``obs-tool``
command line built on it.
"""

from ._version import __version__

# Import main classes and functions for easy access
from .api import ObsClient, ObsBasicAuth, PackageHandle, PackageLog, ProjectHandle
from .exceptions import (
    BuildFailureError,
    ChecksumMismatchError,
    CredentialsError,
    ObsDecodeError,
    ObsError,
    ObsHttpError,
    ObsTransportError,
    UnexpectedResultError,
)
from .utils import (
    ConfigManager,
    create_session_with_retry,
    setup_logging,
    WrappingFormatter,
    get_logger,
)
from .cli import main as cli_main, cli as cli_group

__all__ = [
    "__version__",
    "ObsClient",
    "ObsBasicAuth",
    "PackageHandle",
    "PackageLog",
    "ProjectHandle",
    "ObsError",
    "ObsTransportError",
    "ObsHttpError",
    "ObsDecodeError",
    "ChecksumMismatchError",
    "UnexpectedResultError",
    "CredentialsError",
    "BuildFailureError",
    "ConfigManager",
    "setup_logging",
    "WrappingFormatter",
    "get_logger",
    "create_session_with_retry",
    "cli_main",
    "cli_group",
]
