"""
Project and package handles.

A handle names one OBS resource and forwards operations on it to the
client. Handles hold no state besides the names, which are validated when
the handle is created so that an invalid name never reaches the network.
"""

import logging
from typing import TYPE_CHECKING, Iterator, Optional, Union

from ..exceptions import UnexpectedResultError
from ..models import (
    BinaryList,
    BranchOptions,
    BranchStatus,
    BuildHistory,
    BuildStatus,
    CommitFileList,
    CommitOptions,
    CommitResult,
    Directory,
    JobHistList,
    JobHistoryFilters,
    JobStatus,
    PackageMeta,
    ProjectMeta,
    RebuildFilters,
    ResultList,
    RevisionList,
    SourceDirectory,
)
from ..utils.checksum import verified_stream
from ..utils.validation import validate_file_name, validate_name, validate_package_name, validate_project_name
from .build_log import PackageLog

if TYPE_CHECKING:
    from .obs_client import ObsClient


def _validate_target(repository: str, arch: str) -> None:
    validate_name(repository, "repository")
    validate_name(arch, "architecture")


class ProjectHandle:
    """Operations on one project."""

    def __init__(self, client: "ObsClient", name: str) -> None:
        self.client = client
        self.name = validate_project_name(name)

    def __repr__(self) -> str:
        return f"ProjectHandle({self.name!r})"

    def package(self, name: str) -> "PackageHandle":
        """
        Get a handle on a package of this project.

        Raises:
            ValueError: If the package name is invalid
        """
        return PackageHandle(self.client, self.name, name)

    def delete(self) -> None:
        self.client.delete_project(self.name)

    def list_packages(self) -> Directory:
        return self.client.list_packages(self.name)

    def meta(self) -> ProjectMeta:
        return self.client.get_project_meta(self.name)

    def set_meta(self, meta: ProjectMeta) -> None:
        """Create or update the project from ``meta``."""
        if meta.name != self.name:
            logging.warning("Meta names project %s, uploading it as %s", meta.name, self.name)
        self.client.set_project_meta(self.name, meta)

    def result(self) -> ResultList:
        return self.client.get_result(self.name)

    def repositories(self) -> Directory:
        return self.client.list_repositories(self.name)

    def arches(self, repository: str) -> Directory:
        validate_name(repository, "repository")
        return self.client.list_arches(self.name, repository)

    def rebuild(self, filters: Optional[RebuildFilters] = None) -> None:
        for package in (filters.packages if filters else []):
            validate_package_name(package)
        self.client.rebuild(self.name, filters)

    def jobhistory(self, repository: str, arch: str, filters: Optional[JobHistoryFilters] = None) -> JobHistList:
        _validate_target(repository, arch)
        return self.client.get_jobhistory(self.name, repository, arch, filters)


class PackageHandle:
    """Operations on one package."""

    def __init__(self, client: "ObsClient", project: str, name: str) -> None:
        self.client = client
        self.project = validate_project_name(project)
        self.name = validate_package_name(name)

    def __repr__(self) -> str:
        return f"PackageHandle({self.project!r}, {self.name!r})"

    # ------------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------------

    def create(self) -> None:
        """Create the package with an empty meta."""
        self.client.create_package(self.project, self.name)

    def delete(self) -> None:
        self.client.delete_package(self.project, self.name)

    def meta(self) -> PackageMeta:
        return self.client.get_package_meta(self.project, self.name)

    def set_meta(self, meta: PackageMeta) -> None:
        self.client.set_package_meta(self.project, self.name, meta)

    def revisions(self) -> RevisionList:
        return self.client.list_revisions(self.project, self.name)

    def list(self, rev: Optional[str] = None) -> SourceDirectory:
        return self.client.list_source(self.project, self.name, rev=rev)

    def list_meta(self, rev: Optional[str] = None) -> SourceDirectory:
        return self.client.list_source(self.project, self.name, rev=rev, meta=True)

    def source_file(self, filename: str) -> Iterator[bytes]:
        """Stream a source file of the latest revision, unverified."""
        validate_file_name(filename)
        return self.client.stream_source_file(self.project, self.name, filename)

    def download_source_file(self, filename: str, expected_md5: Optional[str] = None) -> bytes:
        """
        Download a source file and check its MD5.

        Args:
            filename: Source file name
            expected_md5: Checksum to verify against; looked up in the latest
                revision's listing when omitted

        Raises:
            UnexpectedResultError: If the file isn't listed in the latest revision
            ChecksumMismatchError: If the downloaded content doesn't match
        """
        validate_file_name(filename)
        if expected_md5 is None:
            entry = self.list().get_entry(filename)
            if entry is None:
                raise UnexpectedResultError(f"{filename} is not part of {self.project}/{self.name}")
            expected_md5 = entry.md5

        chunks = self.client.stream_source_file(self.project, self.name, filename)
        return b"".join(verified_stream(chunks, filename, expected_md5))

    def upload_for_commit(self, filename: str, data: Union[bytes, str]) -> None:
        validate_file_name(filename)
        self.client.upload_for_commit(self.project, self.name, filename, data)

    def commit(self, filelist: CommitFileList, options: Optional[CommitOptions] = None) -> CommitResult:
        for entry in filelist.entries:
            validate_file_name(entry.name)
        return self.client.commit(self.project, self.name, filelist, options)

    def branch(self, options: Optional[BranchOptions] = None) -> BranchStatus:
        if options is not None:
            if options.target_project is not None:
                validate_project_name(options.target_project)
            if options.target_package is not None:
                validate_package_name(options.target_package)
        return self.client.branch(self.project, self.name, options)

    # ------------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------------

    def result(self) -> ResultList:
        return self.client.get_result(self.project, self.name)

    def jobstatus(self, repository: str, arch: str) -> JobStatus:
        _validate_target(repository, arch)
        return self.client.get_jobstatus(self.project, self.name, repository, arch)

    def history(self, repository: str, arch: str) -> BuildHistory:
        _validate_target(repository, arch)
        return self.client.get_build_history(self.project, self.name, repository, arch)

    def status(self, repository: str, arch: str) -> BuildStatus:
        _validate_target(repository, arch)
        return self.client.get_build_status(self.project, self.name, repository, arch)

    def binaries(self, repository: str, arch: str) -> BinaryList:
        _validate_target(repository, arch)
        return self.client.list_binaries(self.project, self.name, repository, arch)

    def binary_file(self, repository: str, arch: str, filename: str) -> Iterator[bytes]:
        _validate_target(repository, arch)
        validate_file_name(filename)
        return self.client.stream_binary_file(self.project, self.name, repository, arch, filename)

    def rebuild(self) -> None:
        """Rebuild this package in every repository/architecture."""
        self.client.rebuild(self.project, RebuildFilters.only_package(self.name))

    def log(self, repository: str, arch: str) -> PackageLog:
        _validate_target(repository, arch)
        return PackageLog(self.client, self.project, self.name, repository, arch)


__all__ = ["ProjectHandle", "PackageHandle"]
