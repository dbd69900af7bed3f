"""
Pydantic models for obs-tool.

This package contains all Pydantic models used in the application:
- obs_api: Models for OBS XML documents
- options: Request options translated into query parameters
- base, monitor: Domain models
"""

# OBS API Models
from .obs_api import (
    ApiErrorStatus,
    Binary,
    BinaryList,
    BlockMode,
    BranchStatus,
    BuildFlag,
    BuildHistory,
    BuildHistoryEntry,
    BuildStatus,
    CommitEntry,
    CommitFileList,
    CommitResult,
    Directory,
    DirectoryEntry,
    JobHist,
    JobHistList,
    JobStatus,
    LinkInfo,
    LogEntry,
    MissingEntries,
    PackageBuildMeta,
    PackageCode,
    PackageMeta,
    PersonRole,
    ProjectMeta,
    RebuildMode,
    RepositoryCode,
    RepositoryMeta,
    RepositoryPath,
    ResultList,
    ResultListResult,
    Revision,
    RevisionList,
    SourceDirectory,
    SourceDirectoryEntry,
)

# Request Options
from .options import (
    BranchOptions,
    CommitOptions,
    JobHistoryFilters,
    PackageLogStreamOptions,
    RebuildFilters,
)

# Domain Models
from .base import ObsBaseModel, ObsToolBaseModel
from .monitor import MonitorData

__all__ = [
    # OBS API Models
    "ApiErrorStatus",
    "Binary",
    "BinaryList",
    "BlockMode",
    "BranchStatus",
    "BuildFlag",
    "BuildHistory",
    "BuildHistoryEntry",
    "BuildStatus",
    "CommitEntry",
    "CommitFileList",
    "CommitResult",
    "Directory",
    "DirectoryEntry",
    "JobHist",
    "JobHistList",
    "JobStatus",
    "LinkInfo",
    "LogEntry",
    "MissingEntries",
    "PackageBuildMeta",
    "PackageCode",
    "PackageMeta",
    "PersonRole",
    "ProjectMeta",
    "RebuildMode",
    "RepositoryCode",
    "RepositoryMeta",
    "RepositoryPath",
    "ResultList",
    "ResultListResult",
    "Revision",
    "RevisionList",
    "SourceDirectory",
    "SourceDirectoryEntry",
    # Request Options
    "BranchOptions",
    "CommitOptions",
    "JobHistoryFilters",
    "PackageLogStreamOptions",
    "RebuildFilters",
    # Domain Models
    "ObsBaseModel",
    "ObsToolBaseModel",
    "MonitorData",
]
