"""
OBS API client modules.

This package provides the client for the Open Build Service API:
- Basic authentication
- Main OBS client composed of the source and build managers
- Project and package handles
- Build log access
"""

from .auth import ObsBasicAuth
from .build_log import PackageLog
from .build_manager import BuildManagerMixin
from .handles import PackageHandle, ProjectHandle
from .obs_client import ObsClient
from .source_manager import SourceManagerMixin

__all__ = [
    "ObsBasicAuth",
    "BuildManagerMixin",
    "ObsClient",
    "PackageHandle",
    "PackageLog",
    "ProjectHandle",
    "SourceManagerMixin",
]
