"""
Utility modules for obs-tool operations.
"""

from .logger import setup_logging, WrappingFormatter, get_logger
from .session import create_session_with_retry
from .checksum import md5_hexdigest, Md5Verifier, verified_stream
from .url import build_url, normalize_base_url
from .validation import validate_file_name, validate_name, validate_package_name, validate_project_name
from .config_manager import ConfigManager, resolve_connection

from . import constants
from . import error_handling
from . import xml_codec

__all__ = [
    "setup_logging",
    "WrappingFormatter",
    "get_logger",
    "create_session_with_retry",
    "md5_hexdigest",
    "Md5Verifier",
    "verified_stream",
    "build_url",
    "normalize_base_url",
    "validate_file_name",
    "validate_name",
    "validate_package_name",
    "validate_project_name",
    "ConfigManager",
    "resolve_connection",
    "constants",
    "error_handling",
    "xml_codec",
]
