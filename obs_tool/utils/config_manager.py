"""
Configuration management utilities.

obs-tool reads the same configuration file as osc (``~/.oscrc``): an INI
file with a ``[general]`` section naming the default API URL and one
section per API URL holding the credentials::

    [general]
    apiurl = https://api.opensuse.org

    [https://api.opensuse.org]
    user = alice
    pass = secret
"""

import base64
import binascii
import bz2
import configparser
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

import keyring
import keyring.errors

from ..exceptions import CredentialsError
from .constants import (
    DEFAULT_APIURL,
    DEFAULT_CONFIG_PATH,
    ENV_APIURL,
    ENV_PASSWORD,
    ENV_USER,
    OBFUSCATED_CREDENTIALS_MANAGER,
    PLAINTEXT_CREDENTIALS_MANAGER,
    SECRET_SERVICE_CREDENTIALS_MANAGER,
    XDG_CONFIG_PATH,
)


def _normalize_apiurl(url: str) -> str:
    return url.strip().rstrip("/")


def decode_obfuscated_password(value: str) -> str:
    """
    Decode a password stored by osc's obfuscated credentials manager.

    The value is the base64 encoding of the bz2 compressed password.

    Raises:
        CredentialsError: If the value can't be decoded
    """
    try:
        return bz2.decompress(base64.b64decode(value.encode("ascii"), validate=True)).decode("utf-8")
    except (binascii.Error, OSError, ValueError) as e:
        raise CredentialsError(f"Malformed obfuscated password: {e}") from e


def keyring_password(apiurl: str, user: str) -> str:
    """
    Look up the password osc stored in the system keyring.

    osc files the entry under the host name of the API URL.

    Raises:
        CredentialsError: If no password can be read for the user
    """
    host = urlparse(apiurl).hostname
    if not host:
        raise CredentialsError(f"Cannot derive a keyring service from {apiurl}")
    try:
        password = keyring.get_password(host, user)
    except keyring.errors.KeyringError as e:
        raise CredentialsError(f"Keyring lookup for {user}@{host} failed: {e}") from e
    if password is None:
        raise CredentialsError(f"No password stored in the keyring for {user}@{host}")
    logging.debug("Read password for %s@%s from the keyring", user, host)
    return password


def default_config_path() -> Path:
    """Return ``~/.oscrc``, or the XDG location when only that one exists."""
    legacy = Path(DEFAULT_CONFIG_PATH).expanduser()
    xdg = Path(XDG_CONFIG_PATH).expanduser()
    if not legacy.exists() and xdg.exists():
        return xdg
    return legacy


class ConfigManager:
    """
    Manages loading of and access to the osc configuration file.

    Keys are addressed as ``"<section>.<option>"``; since section names are
    API URLs containing dots, the option is everything after the last dot.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses the osc default.
        """
        self.config_path = Path(config_path).expanduser() if config_path else default_config_path()
        self._config: Optional[Dict[str, Dict[str, str]]] = None

    def load(self) -> Dict[str, Dict[str, str]]:
        """
        Load configuration from file.

        Returns:
            Dictionary of sections, each a dictionary of options

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # Passwords may contain '%', so no interpolation
        parser = configparser.ConfigParser(interpolation=None)
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                parser.read_file(f)
        except configparser.Error as e:
            raise ValueError(f"Invalid configuration file {self.config_path}: {e}") from e

        self._config = {section: dict(parser.items(section)) for section in parser.sections()}
        logging.debug("Loaded configuration from %s", self.config_path)
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by ``"<section>.<option>"`` key.

        Example:
            >>> config = ConfigManager("~/.oscrc")
            >>> config.get("general.apiurl")
            'https://api.opensuse.org'
        """
        section, _, option = key.rpartition(".")
        if not section:
            return default
        value = self.get_section(section).get(option)
        return value if value is not None else default

    def get_section(self, section: str) -> Dict[str, str]:
        """
        Get an entire configuration section.

        API URL sections match with or without a trailing slash.

        Returns:
            Dictionary containing section data, or empty dict if section not found
        """
        config = self.load()
        if section in config:
            return config[section]
        wanted = _normalize_apiurl(section)
        for name, values in config.items():
            if _normalize_apiurl(name) == wanted:
                return values
        return {}

    def has_key(self, key: str) -> bool:
        """Check if a configuration key exists (False when the file can't be loaded)."""
        try:
            return self.get(key) is not None
        except (FileNotFoundError, ValueError):
            return False

    def reload(self) -> None:
        """Force reload configuration from file."""
        self._config = None
        self.load()

    def default_apiurl(self) -> str:
        """API URL from ``[general] apiurl``, falling back to the public OBS instance."""
        return _normalize_apiurl(self.get("general.apiurl", DEFAULT_APIURL))

    def resolve_alias(self, apiurl: str) -> str:
        """Map an osc alias (``aliases = obs, ibs``) to the API URL of its section."""
        config = self.load()
        for name, values in config.items():
            aliases = [alias.strip() for alias in values.get("aliases", "").split(",") if alias.strip()]
            if apiurl in aliases:
                return _normalize_apiurl(name)
        return _normalize_apiurl(apiurl)

    def credentials(self, apiurl: str) -> Tuple[str, str]:
        """
        Get the user and password configured for ``apiurl``.

        Raises:
            CredentialsError: If the API URL has no section, no user or no
                usable password, or uses an unsupported credentials manager
        """
        section = self.get_section(apiurl)
        if not section:
            raise CredentialsError(f"No credentials configured for {apiurl}")

        user = section.get("user")
        if not user:
            raise CredentialsError(f"No user configured for {apiurl}")

        manager = section.get("credentials_mgr_class")
        if manager in (None, "", PLAINTEXT_CREDENTIALS_MANAGER):
            if section.get("pass") is not None:
                return user, section["pass"]
            if section.get("passx") is not None:
                return user, decode_obfuscated_password(section["passx"])
            raise CredentialsError(f"Missing password for {apiurl}")
        if manager == OBFUSCATED_CREDENTIALS_MANAGER:
            if section.get("pass") is None:
                raise CredentialsError(f"Missing password for {apiurl}")
            return user, decode_obfuscated_password(section["pass"])
        if manager == SECRET_SERVICE_CREDENTIALS_MANAGER:
            # A plain pass in the section still wins over the keyring
            if section.get("pass") is not None:
                return user, section["pass"]
            return user, keyring_password(apiurl, user)

        raise CredentialsError(f"Unsupported credentials manager: {manager}")


def resolve_connection(
    apiurl: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Tuple[str, str, str]:
    """
    Resolve the API URL and credentials to connect with.

    Explicit arguments win over the OBS_APIURL/OBS_USER/OBS_PASSWORD
    environment variables, which win over the configuration file. The file
    is only read when something is still missing.

    Returns:
        Tuple of (apiurl, user, password)

    Raises:
        CredentialsError: If only one of user/password is given, or the
            configuration can't supply the rest
    """
    apiurl = apiurl or os.environ.get(ENV_APIURL)
    user = user or os.environ.get(ENV_USER)
    password = password or os.environ.get(ENV_PASSWORD)

    if (user is None) != (password is None):
        raise CredentialsError("User and password must be given together")

    if apiurl and user and password:
        return _normalize_apiurl(apiurl), user, password

    config = ConfigManager(config_path)
    try:
        config.load()
    except FileNotFoundError as e:
        raise CredentialsError(f"Cannot resolve the connection without a configuration: {e}") from e
    except ValueError as e:
        raise CredentialsError(str(e)) from e

    apiurl = config.resolve_alias(apiurl) if apiurl else config.default_apiurl()
    if user and password:
        return apiurl, user, password

    user, password = config.credentials(apiurl)
    return apiurl, user, password


__all__ = [
    "ConfigManager",
    "decode_obfuscated_password",
    "default_config_path",
    "keyring_password",
    "resolve_connection",
]
