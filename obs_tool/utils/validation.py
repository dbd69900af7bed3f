"""
Validation of OBS resource names.

Names are checked before any request is built so that an invalid name
never reaches the network.
"""

from .constants import NAME_PATTERN


def validate_name(value: str, kind: str) -> str:
    """
    Validate a project, package, repository or architecture name.

    Args:
        value: Name to check
        kind: What the name designates, used in the error message

    Returns:
        The unchanged name

    Raises:
        ValueError: If the name is empty or contains characters OBS rejects
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid {kind} name: name must not be empty")
    if not NAME_PATTERN.match(value):
        raise ValueError(f"Invalid {kind} name: {value!r}")
    return value


def validate_project_name(value: str) -> str:
    return validate_name(value, "project")


def validate_package_name(value: str) -> str:
    return validate_name(value, "package")


def validate_file_name(value: str) -> str:
    """Source and binary file names: non-empty, no path separators."""
    if not isinstance(value, str) or not value or value in (".", ".."):
        raise ValueError(f"Invalid file name: {value!r}")
    if "/" in value or "\0" in value:
        raise ValueError(f"Invalid file name: {value!r}")
    return value


__all__ = ["validate_name", "validate_project_name", "validate_package_name", "validate_file_name"]
