"""
Build operations for the OBS API.

This module handles the /build endpoints: build results, repositories,
job status and history, binaries and rebuild requests.
"""

from typing import Any, Callable, Iterator, Optional, Protocol, Type, TypeVar, runtime_checkable

import httpx
from pydantic import BaseModel

from ..models import (
    BinaryList,
    BuildHistory,
    BuildStatus,
    Directory,
    JobHistList,
    JobHistoryFilters,
    JobStatus,
    RebuildFilters,
    ResultList,
)

M = TypeVar("M", bound=BaseModel)


@runtime_checkable
class BuildManagerMixin(Protocol):
    """Protocol that provides /build operations for OBS."""

    # Required attributes
    _url: Callable[..., str]  # Method that constructs URLs
    session: Any  # httpx.Client
    timeout: float

    def _send(self, method: str, url: str, operation: str, *, stream: bool = False, **kwargs: Any) -> httpx.Response:
        """Send a request and check its response."""
        ...  # pragma: no cover - defined in implementation

    def _get_xml(self, url: str, model: Type[M], operation: str) -> M:
        """GET and decode an XML document."""
        ...  # pragma: no cover - defined in implementation

    def _stream(self, url: str, operation: str) -> Iterator[bytes]:
        """Stream the body of a GET request."""
        ...  # pragma: no cover - defined in implementation

    def get_result(self, project: str, package: Optional[str] = None) -> ResultList:
        """
        Get the build results of a project, optionally restricted to one package.

        Args:
            project: Project name
            package: Only report this package's status in every repository/arch
        """
        params = [("package", package)] if package is not None else None
        target = f"{project}/{package}" if package is not None else project
        return self._get_xml(self._url("build", project, "_result", params=params), ResultList, f"get results of {target}")

    def list_repositories(self, project: str) -> Directory:
        """List the repositories a project builds for."""
        return self._get_xml(self._url("build", project), Directory, f"list repositories of {project}")

    def list_arches(self, project: str, repository: str) -> Directory:
        """List the architectures of a repository."""
        return self._get_xml(
            self._url("build", project, repository), Directory, f"list architectures of {project}/{repository}"
        )

    def rebuild(self, project: str, filters: Optional[RebuildFilters] = None) -> None:
        """Trigger a rebuild of a project, or of the packages named by ``filters``."""
        params = [("cmd", "rebuild")]
        params.extend((filters or RebuildFilters()).query_params())
        self._send("POST", self._url("build", project, params=params), f"rebuild {project}")

    def get_jobhistory(
        self, project: str, repository: str, arch: str, filters: Optional[JobHistoryFilters] = None
    ) -> JobHistList:
        """Get the job history of a repository/architecture."""
        params = (filters or JobHistoryFilters()).query_params()
        return self._get_xml(
            self._url("build", project, repository, arch, "_jobhistory", params=params),
            JobHistList,
            f"get job history of {project}/{repository}/{arch}",
        )

    def get_jobstatus(self, project: str, package: str, repository: str, arch: str) -> JobStatus:
        """Get the status of the current build job of a package."""
        return self._get_xml(
            self._url("build", project, repository, arch, package, "_jobstatus"),
            JobStatus,
            f"get job status of {project}/{package} in {repository}/{arch}",
        )

    def get_build_history(self, project: str, package: str, repository: str, arch: str) -> BuildHistory:
        """Get the finished builds of a package."""
        return self._get_xml(
            self._url("build", project, repository, arch, package, "_history"),
            BuildHistory,
            f"get build history of {project}/{package} in {repository}/{arch}",
        )

    def get_build_status(self, project: str, package: str, repository: str, arch: str) -> BuildStatus:
        """Get the build state of a package in one repository/architecture."""
        return self._get_xml(
            self._url("build", project, repository, arch, package, "_status"),
            BuildStatus,
            f"get build status of {project}/{package} in {repository}/{arch}",
        )

    def list_binaries(self, project: str, package: str, repository: str, arch: str) -> BinaryList:
        """List the build artifacts of a package."""
        return self._get_xml(
            self._url("build", project, repository, arch, package),
            BinaryList,
            f"list binaries of {project}/{package} in {repository}/{arch}",
        )

    def stream_binary_file(self, project: str, package: str, repository: str, arch: str, filename: str) -> Iterator[bytes]:
        """Stream a build artifact."""
        return self._stream(
            self._url("build", project, repository, arch, package, filename),
            f"download {filename} of {project}/{package} in {repository}/{arch}",
        )


__all__ = ["BuildManagerMixin"]
