"""
Source management operations for the OBS API.

This module handles the /source endpoints: project and package listings,
meta documents, source files, commits and branches.
"""

from typing import Any, Callable, Iterator, Optional, Protocol, Type, TypeVar, Union, runtime_checkable

import httpx
from pydantic import BaseModel

from ..exceptions import ObsDecodeError
from ..models import (
    BranchOptions,
    BranchStatus,
    CommitFileList,
    CommitOptions,
    CommitResult,
    Directory,
    MissingEntries,
    PackageMeta,
    ProjectMeta,
    RevisionList,
    SourceDirectory,
)
from ..utils.constants import UPLOAD_FOR_COMMIT_REV
from ..utils.xml_codec import parse_document, validate_element

M = TypeVar("M", bound=BaseModel)

XML_HEADERS = {"Content-Type": "application/xml"}
OCTET_STREAM_HEADERS = {"Content-Type": "application/octet-stream"}


@runtime_checkable
class SourceManagerMixin(Protocol):
    """Protocol that provides /source operations for OBS.

    Methods take names that were already validated by the handles.
    """

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

    def _post_xml(self, url: str, model: Type[M], operation: str, **kwargs: Any) -> M:
        """POST and decode an XML document."""
        ...  # pragma: no cover - defined in implementation

    def _stream(self, url: str, operation: str) -> Iterator[bytes]:
        """Stream the body of a GET request."""
        ...  # pragma: no cover - defined in implementation

    # ------------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------------

    def list_packages(self, project: str) -> Directory:
        """List the packages of a project."""
        return self._get_xml(self._url("source", project), Directory, f"list packages of {project}")

    def delete_project(self, project: str) -> None:
        """Delete a project with all its packages."""
        self._send("DELETE", self._url("source", project), f"delete project {project}")

    def get_project_meta(self, project: str) -> ProjectMeta:
        """Get the meta document of a project."""
        return self._get_xml(self._url("source", project, "_meta"), ProjectMeta, f"get meta of {project}")

    def set_project_meta(self, project: str, meta: ProjectMeta) -> None:
        """
        Create or replace a project by uploading its meta document.

        Args:
            project: Project name
            meta: New meta; its name should match the project
        """
        self._send(
            "PUT",
            self._url("source", project, "_meta"),
            f"set meta of {project}",
            content=meta.to_xml(),
            headers=XML_HEADERS,
        )

    # ------------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------------

    def create_package(self, project: str, package: str) -> None:
        """Create an empty package by uploading a minimal meta document."""
        self.set_package_meta(project, package, PackageMeta(name=package, project=project))

    def delete_package(self, project: str, package: str) -> None:
        """Delete a package."""
        self._send("DELETE", self._url("source", project, package), f"delete package {project}/{package}")

    def get_package_meta(self, project: str, package: str) -> PackageMeta:
        """Get the meta document of a package."""
        return self._get_xml(
            self._url("source", project, package, "_meta"), PackageMeta, f"get meta of {project}/{package}"
        )

    def set_package_meta(self, project: str, package: str, meta: PackageMeta) -> None:
        """Create or replace a package by uploading its meta document."""
        self._send(
            "PUT",
            self._url("source", project, package, "_meta"),
            f"set meta of {project}/{package}",
            content=meta.to_xml(),
            headers=XML_HEADERS,
        )

    def list_revisions(self, project: str, package: str) -> RevisionList:
        """Get the source history of a package."""
        return self._get_xml(
            self._url("source", project, package, "_history"),
            RevisionList,
            f"get revisions of {project}/{package}",
        )

    def list_source(
        self, project: str, package: str, rev: Optional[str] = None, meta: bool = False
    ) -> SourceDirectory:
        """
        List the source files of a package revision.

        Args:
            project: Project name
            package: Package name
            rev: Revision number or srcmd5, defaults to the latest revision
            meta: List the meta files (``_meta``, ...) instead of the sources
        """
        params = []
        if rev is not None:
            params.append(("rev", rev))
        if meta:
            params.append(("meta", "1"))
        return self._get_xml(
            self._url("source", project, package, params=params),
            SourceDirectory,
            f"list files of {project}/{package}",
        )

    def stream_source_file(self, project: str, package: str, filename: str) -> Iterator[bytes]:
        """Stream the content of a source file of the latest revision."""
        return self._stream(self._url("source", project, package, filename), f"download {project}/{package}/{filename}")

    def upload_for_commit(self, project: str, package: str, filename: str, data: Union[bytes, str]) -> None:
        """
        Stage a file for the next commitfilelist.

        The file is stored on the server without creating a revision; it only
        becomes part of the package once a commit lists its MD5.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._send(
            "PUT",
            self._url("source", project, package, filename, params=[("rev", UPLOAD_FOR_COMMIT_REV)]),
            f"upload {project}/{package}/{filename}",
            content=data,
            headers=OCTET_STREAM_HEADERS,
        )

    def commit(
        self, project: str, package: str, filelist: CommitFileList, options: Optional[CommitOptions] = None
    ) -> CommitResult:
        """
        Create a new revision from a file list.

        Returns:
            CommitResult holding the new revision listing, or the entries the
            server doesn't have yet (upload them with upload_for_commit and
            commit again)

        Raises:
            ObsDecodeError: If the answer carries an error other than "missing"
        """
        params = [("cmd", "commitfilelist")]
        params.extend((options or CommitOptions()).query_params())
        response = self._send(
            "POST",
            self._url("source", project, package, params=params),
            f"commit {project}/{package}",
            content=filelist.to_xml(),
            headers=XML_HEADERS,
        )

        root = parse_document(response.content)
        error = root.get("error")
        if error is None:
            return CommitResult(directory=validate_element(root, SourceDirectory))
        if error == "missing":
            return CommitResult(missing=validate_element(root, MissingEntries))
        raise ObsDecodeError(f"Unsupported commit error: {error!r}")

    def branch(self, project: str, package: str, options: Optional[BranchOptions] = None) -> BranchStatus:
        """Branch a package, by default into the user's home project."""
        params = [("cmd", "branch")]
        params.extend((options or BranchOptions()).query_params())
        return self._post_xml(
            self._url("source", project, package, params=params), BranchStatus, f"branch {project}/{package}"
        )


__all__ = ["SourceManagerMixin"]
