"""
Service layer for OBS operations.

This package provides high-level logic built on top of the API client.
"""

from .monitor_service import MonitorService, check_outcome

__all__ = [
    "MonitorService",
    "check_outcome",
]
