"""
Request option models.

These are built by callers and translated into OBS query parameters; each
exposes ``query_params()`` returning ordered (key, value) pairs.
"""

from typing import List, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from .base import ObsToolBaseModel
from .obs_api import BlockMode, PackageCode, RebuildMode

QueryPair = Tuple[str, str]


class CommitOptions(ObsToolBaseModel):
    """Options of ``cmd=commitfilelist``."""

    comment: Optional[str] = None

    def query_params(self) -> List[QueryPair]:
        return [("comment", self.comment)] if self.comment is not None else []


class BranchOptions(ObsToolBaseModel):
    """
    Options of ``cmd=branch``.

    Attributes:
        target_project: Project to branch into (server default: home:<user>:branches:<project>)
        target_package: Package name in the target project
        comment: Commit comment for the branch
        force: Overwrite an existing branch
        missingok: Allow branching a package that doesn't exist yet
        add_repositories_rebuild: Rebuild mode for the repositories added to the target
        add_repositories_block: Block mode for the repositories added to the target
    """

    target_project: Optional[str] = None
    target_package: Optional[str] = None
    comment: Optional[str] = None
    force: bool = False
    missingok: bool = False
    add_repositories_rebuild: Optional[RebuildMode] = None
    add_repositories_block: Optional[BlockMode] = None

    def query_params(self) -> List[QueryPair]:
        params: List[QueryPair] = []
        if self.target_project is not None:
            params.append(("target_project", self.target_project))
        if self.target_package is not None:
            params.append(("target_package", self.target_package))
        if self.comment is not None:
            params.append(("comment", self.comment))
        if self.add_repositories_rebuild is not None:
            params.append(("add_repositories_rebuild", self.add_repositories_rebuild.value))
        if self.add_repositories_block is not None:
            params.append(("add_repositories_block", self.add_repositories_block.value))
        if self.force:
            params.append(("force", "1"))
        if self.missingok:
            params.append(("missingok", "1"))
        return params


class RebuildFilters(ObsToolBaseModel):
    """Packages to restrict a project rebuild to (empty means all)."""

    packages: List[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "RebuildFilters":
        return cls()

    @classmethod
    def only_package(cls, package: str) -> "RebuildFilters":
        return cls(packages=[package])

    def add_package(self, package: str) -> None:
        self.packages = [*self.packages, package]

    def package(self, package: str) -> "RebuildFilters":
        self.add_package(package)
        return self

    def query_params(self) -> List[QueryPair]:
        return [("package", package) for package in self.packages]


class JobHistoryFilters(ObsToolBaseModel):
    """Filters for the job history of a repository/architecture."""

    packages: List[str] = Field(default_factory=list)
    codes: List[PackageCode] = Field(default_factory=list)
    limit: Optional[int] = None

    @field_validator("limit")
    @classmethod
    def _positive_limit(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("limit must not be negative")
        return value

    @classmethod
    def empty(cls) -> "JobHistoryFilters":
        return cls()

    @classmethod
    def only_package(cls, package: str) -> "JobHistoryFilters":
        return cls(packages=[package])

    def add_package(self, package: str) -> None:
        self.packages = [*self.packages, package]

    def add_code(self, code: PackageCode) -> None:
        self.codes = [*self.codes, code]

    def set_limit(self, limit: Optional[int]) -> None:
        self.limit = limit

    def package(self, package: str) -> "JobHistoryFilters":
        self.add_package(package)
        return self

    def code(self, code: PackageCode) -> "JobHistoryFilters":
        self.add_code(code)
        return self

    def with_limit(self, limit: Optional[int]) -> "JobHistoryFilters":
        self.set_limit(limit)
        return self

    def query_params(self) -> List[QueryPair]:
        params: List[QueryPair] = [("package", package) for package in self.packages]
        params.extend(("code", code.value) for code in self.codes)
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        return params


class PackageLogStreamOptions(ObsToolBaseModel):
    """
    Byte range of a build log to stream.

    Attributes:
        offset: First byte to fetch (default 0)
        end: Stop once this offset is reached (default: until the log ends)
    """

    offset: Optional[int] = None
    end: Optional[int] = None

    @model_validator(mode="after")
    def _check_range(self) -> "PackageLogStreamOptions":
        if self.offset is not None and self.offset < 0:
            raise ValueError("offset must not be negative")
        if self.end is not None and self.end < (self.offset or 0):
            raise ValueError("end must not be before offset")
        return self


__all__ = [
    "CommitOptions",
    "BranchOptions",
    "RebuildFilters",
    "JobHistoryFilters",
    "PackageLogStreamOptions",
]
