"""
Central constants for the obs-tool package.

This module consolidates all constants used throughout the codebase
to eliminate magic numbers and strings.
"""

import re

# ============================================================================
# Configuration
# ============================================================================

# Default location of the osc configuration file
DEFAULT_CONFIG_PATH = "~/.oscrc"

# XDG location used by newer osc releases, tried when ~/.oscrc is missing
XDG_CONFIG_PATH = "~/.config/osc/oscrc"

# API URL used when neither the CLI nor the config name one
DEFAULT_APIURL = "https://api.opensuse.org"

# Environment variables overriding the configuration file
ENV_APIURL = "OBS_APIURL"
ENV_USER = "OBS_USER"
ENV_PASSWORD = "OBS_PASSWORD"  # nosec B105

# osc credential manager classes
PLAINTEXT_CREDENTIALS_MANAGER = "osc.credentials.PlaintextConfigFileCredentialsManager"
OBFUSCATED_CREDENTIALS_MANAGER = "osc.credentials.ObfuscatedConfigFileCredentialsManager"
SECRET_SERVICE_CREDENTIALS_MANAGER = (
    "osc.credentials.KeyringCredentialsManager:keyring.backends.SecretService.Keyring"
)

# ============================================================================
# API and Network Constants
# ============================================================================

# Default timeout for HTTP requests (seconds)
DEFAULT_TIMEOUT = 120.0

# Connect timeout (seconds)
CONNECT_TIMEOUT = 10.0

# Size of the connection pool
DEFAULT_MAX_CONNECTIONS = 100

# Attempts for idempotent GET requests failing at the transport level
MAX_RETRIES = 3

# Backoff between retries: 0.5s, 1s, 2s
RETRY_BACKOFF_FACTOR = 0.5

# Chunk size used when streaming files to disk
DOWNLOAD_CHUNK_SIZE = 65536

# ============================================================================
# OBS Naming
# ============================================================================

# Characters OBS accepts in project and package names
NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.:+\-]*$")

# srcmd5 OBS reports for the empty zero revision of a package
ZERO_REV_SRCMD5 = "d41d8cd98f00b204e9800998ecf8427e"

# Revision used to stage files before a commitfilelist
UPLOAD_FOR_COMMIT_REV = "repository"

# ============================================================================
# Monitoring
# ============================================================================

# Seconds between build result polls in `obs-tool monitor`
DEFAULT_MONITOR_INTERVAL = 20

# ============================================================================
# Logging and Display Constants
# ============================================================================

# Width for separator lines in console output
SEPARATOR_WIDTH = 80

# Maximum response body length echoed in error logs
MAX_LOGGED_BODY_LENGTH = 500


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "XDG_CONFIG_PATH",
    "DEFAULT_APIURL",
    "ENV_APIURL",
    "ENV_USER",
    "ENV_PASSWORD",
    "PLAINTEXT_CREDENTIALS_MANAGER",
    "OBFUSCATED_CREDENTIALS_MANAGER",
    "SECRET_SERVICE_CREDENTIALS_MANAGER",
    "DEFAULT_TIMEOUT",
    "CONNECT_TIMEOUT",
    "DEFAULT_MAX_CONNECTIONS",
    "MAX_RETRIES",
    "RETRY_BACKOFF_FACTOR",
    "DOWNLOAD_CHUNK_SIZE",
    "NAME_PATTERN",
    "ZERO_REV_SRCMD5",
    "UPLOAD_FOR_COMMIT_REV",
    "DEFAULT_MONITOR_INTERVAL",
    "SEPARATOR_WIDTH",
    "MAX_LOGGED_BODY_LENGTH",
]
