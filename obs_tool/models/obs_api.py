"""
Pydantic models for OBS API documents.

This module provides type-safe models for the XML documents exchanged with
the OBS /source and /build endpoints. Decoding goes through
``obs_tool.utils.xml_codec``; models that are also sent to the server
(project and package meta) know how to encode themselves.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional

from lxml import etree
from pydantic import Field, field_validator, model_validator

from ..utils.checksum import md5_hexdigest
from ..utils.xml_codec import TEXT_KEY, add_text_element, serialize
from .base import ObsBaseModel


# ============================================================================
# Enumerations
# ============================================================================


class RebuildMode(str, Enum):
    """Repository rebuild strategy."""

    TRANSITIVE = "transitive"
    DIRECT = "direct"
    LOCAL = "local"

    def __str__(self) -> str:
        return self.value


class BlockMode(str, Enum):
    """Repository blocking strategy."""

    ALL = "all"
    LOCAL = "local"
    NEVER = "never"

    def __str__(self) -> str:
        return self.value


class RepositoryCode(str, Enum):
    """State of a repository/architecture build target."""

    UNKNOWN = "unknown"
    BROKEN = "broken"
    SCHEDULING = "scheduling"
    BLOCKED = "blocked"
    BUILDING = "building"
    FINISHED = "finished"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"

    def __str__(self) -> str:
        return self.value


class PackageCode(str, Enum):
    """Build state of a package in one repository/architecture."""

    UNRESOLVABLE = "unresolvable"
    SUCCEEDED = "succeeded"
    DISPATCHING = "dispatching"
    FAILED = "failed"
    BROKEN = "broken"
    DISABLED = "disabled"
    EXCLUDED = "excluded"
    BLOCKED = "blocked"
    LOCKED = "locked"
    UNKNOWN = "unknown"
    SCHEDULED = "scheduled"
    BUILDING = "building"
    FINISHED = "finished"

    @property
    def is_final(self) -> bool:
        """Check if no further state change is expected without new input."""
        return self in _FINAL_PACKAGE_CODES

    def __str__(self) -> str:
        return self.value


_FINAL_PACKAGE_CODES = frozenset(
    {
        PackageCode.BROKEN,
        PackageCode.DISABLED,
        PackageCode.EXCLUDED,
        PackageCode.FAILED,
        PackageCode.SUCCEEDED,
    }
)


# ============================================================================
# Errors
# ============================================================================


class StatusData(ObsBaseModel):
    """``<data name="...">value</data>`` item of a status document."""

    name: str
    value: str = Field(default="", alias=TEXT_KEY)


class ApiErrorStatus(ObsBaseModel):
    """OBS ``<status>`` document, returned for errors and some commands."""

    xml_root: ClassVar[str] = "status"

    code: str
    summary: Optional[str] = None
    details: Optional[str] = None
    data: List[StatusData] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.code}: {self.summary or ''}".rstrip()


# ============================================================================
# Meta Models
# ============================================================================


class RepositoryPath(ObsBaseModel):
    """Repository a build target takes its dependencies from."""

    project: str
    repository: str


class RepositoryMeta(ObsBaseModel):
    """``<repository>`` element of a project meta."""

    name: str
    rebuild: RebuildMode = RebuildMode.TRANSITIVE
    block: BlockMode = BlockMode.ALL
    paths: List[RepositoryPath] = Field(default_factory=list, alias="path")
    arches: List[str] = Field(default_factory=list, alias="arch")

    def to_element(self) -> etree._Element:
        element = etree.Element("repository", name=self.name)
        if self.rebuild != RebuildMode.TRANSITIVE:
            element.set("rebuild", self.rebuild.value)
        if self.block != BlockMode.ALL:
            element.set("block", self.block.value)
        for path in self.paths:
            etree.SubElement(element, "path", project=path.project, repository=path.repository)
        for arch in self.arches:
            add_text_element(element, "arch", arch)
        return element


class PersonRole(ObsBaseModel):
    """User holding a role in a project or package."""

    userid: str
    role: str


class BuildFlag(ObsBaseModel):
    """``<enable/>`` or ``<disable/>`` entry, optionally limited to a repository/arch."""

    repository: Optional[str] = None
    arch: Optional[str] = None

    def to_element(self, tag: str) -> etree._Element:
        element = etree.Element(tag)
        if self.repository is not None:
            element.set("repository", self.repository)
        if self.arch is not None:
            element.set("arch", self.arch)
        return element


class PackageBuildMeta(ObsBaseModel):
    """Flag section (``<build>``, ``<publish>``, ...) of a project or package meta."""

    enabled: List[BuildFlag] = Field(default_factory=list, alias="enable")
    disabled: List[BuildFlag] = Field(default_factory=list, alias="disable")

    def to_element(self, tag: str) -> etree._Element:
        element = etree.Element(tag)
        for flag in self.enabled:
            element.append(flag.to_element("enable"))
        for flag in self.disabled:
            element.append(flag.to_element("disable"))
        return element


# Flag sections in the order OBS writes them
FLAG_SECTIONS = ("build", "publish", "debuginfo", "useforbuild")


def _append_flags(element: etree._Element, meta: Any) -> None:
    for section in FLAG_SECTIONS:
        flags = getattr(meta, section)
        if flags is not None:
            element.append(flags.to_element(section))


class ProjectMeta(ObsBaseModel):
    """
    Project meta document (``/source/<project>/_meta``).

    Only the modelled elements are written back by ``to_xml``.
    """

    xml_root: ClassVar[str] = "project"

    name: str
    title: str = ""
    description: str = ""
    persons: List[PersonRole] = Field(default_factory=list, alias="person")
    build: Optional[PackageBuildMeta] = None
    publish: Optional[PackageBuildMeta] = None
    debuginfo: Optional[PackageBuildMeta] = None
    useforbuild: Optional[PackageBuildMeta] = None
    repositories: List[RepositoryMeta] = Field(default_factory=list, alias="repository")

    def get_repository(self, name: str) -> Optional[RepositoryMeta]:
        return next((repo for repo in self.repositories if repo.name == name), None)

    def to_element(self) -> etree._Element:
        element = etree.Element("project", name=self.name)
        add_text_element(element, "title", self.title)
        add_text_element(element, "description", self.description)
        for person in self.persons:
            etree.SubElement(element, "person", userid=person.userid, role=person.role)
        _append_flags(element, self)
        for repository in self.repositories:
            element.append(repository.to_element())
        return element

    def to_xml(self) -> bytes:
        return serialize(self.to_element())


class PackageMeta(ObsBaseModel):
    """Package meta document (``/source/<project>/<package>/_meta``)."""

    xml_root: ClassVar[str] = "package"

    name: str
    project: Optional[str] = None
    title: str = ""
    description: str = ""
    url: Optional[str] = None
    persons: List[PersonRole] = Field(default_factory=list, alias="person")
    build: PackageBuildMeta = Field(default_factory=PackageBuildMeta)
    publish: Optional[PackageBuildMeta] = None
    debuginfo: Optional[PackageBuildMeta] = None
    useforbuild: Optional[PackageBuildMeta] = None

    def to_element(self) -> etree._Element:
        element = etree.Element("package", name=self.name)
        if self.project is not None:
            element.set("project", self.project)
        add_text_element(element, "title", self.title)
        add_text_element(element, "description", self.description)
        for person in self.persons:
            etree.SubElement(element, "person", userid=person.userid, role=person.role)
        _append_flags(element, self)
        if self.url is not None:
            add_text_element(element, "url", self.url)
        return element

    def to_xml(self) -> bytes:
        return serialize(self.to_element())


# ============================================================================
# Directory Listings
# ============================================================================


class DirectoryEntry(ObsBaseModel):
    """Entry of a generic directory listing."""

    name: str


class Directory(ObsBaseModel):
    """Generic ``<directory>`` listing (projects, packages, repositories, arches)."""

    xml_root: ClassVar[str] = "directory"

    count: Optional[int] = None
    entries: List[DirectoryEntry] = Field(default_factory=list, alias="entry")

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]


class SourceDirectoryEntry(ObsBaseModel):
    """Source file in a package revision."""

    name: str
    size: int
    md5: str
    mtime: int
    originproject: Optional[str] = None
    hash: Optional[str] = None


class LinkInfo(ObsBaseModel):
    """Link of a branched/linked package to its origin."""

    project: str
    package: str
    srcmd5: Optional[str] = None
    xsrcmd5: Optional[str] = None
    lsrcmd5: Optional[str] = None
    baserev: Optional[str] = None
    error: Optional[str] = None
    missingok: bool = False


class SourceDirectory(ObsBaseModel):
    """Source listing of a package revision (``/source/<project>/<package>``)."""

    xml_root: ClassVar[str] = "directory"

    name: str
    rev: Optional[str] = None
    vrev: Optional[str] = None
    srcmd5: str
    entries: List[SourceDirectoryEntry] = Field(default_factory=list, alias="entry")
    linkinfo: List[LinkInfo] = Field(default_factory=list)

    def get_entry(self, name: str) -> Optional[SourceDirectoryEntry]:
        return next((entry for entry in self.entries if entry.name == name), None)


class Revision(ObsBaseModel):
    """Source revision of a package."""

    rev: str
    vrev: Optional[str] = None
    srcmd5: str
    version: Optional[str] = None
    time: int
    user: str
    comment: Optional[str] = None


class RevisionList(ObsBaseModel):
    """Source history of a package (``/source/<project>/<package>/_history``)."""

    xml_root: ClassVar[str] = "revisionlist"

    revisions: List[Revision] = Field(default_factory=list, alias="revision")


# ============================================================================
# Commit Models
# ============================================================================


class CommitEntry(ObsBaseModel):
    """File name and MD5 pair of a commit file list."""

    name: str
    md5: str

    @classmethod
    def from_contents(cls, name: str, contents: bytes) -> "CommitEntry":
        return cls(name=name, md5=md5_hexdigest(contents))


class MissingEntries(ObsBaseModel):
    """Answer to a commit referencing files the server doesn't have yet."""

    xml_root: ClassVar[str] = "directory"

    error: Literal["missing"]
    name: Optional[str] = None
    entries: List[CommitEntry] = Field(default_factory=list, alias="entry")


class CommitResult(ObsBaseModel):
    """Outcome of a commitfilelist: either the new revision or the missing files."""

    directory: Optional[SourceDirectory] = None
    missing: Optional[MissingEntries] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "CommitResult":
        if (self.directory is None) == (self.missing is None):
            raise ValueError("CommitResult needs exactly one of directory or missing")
        return self

    @property
    def is_success(self) -> bool:
        return self.directory is not None


class CommitFileList(ObsBaseModel):
    """
    File list sent with ``cmd=commitfilelist``.

    Supports both in-place and chained construction::

        filelist = CommitFileList().file_from_contents("hello.spec", data).file_md5("hello.tar.gz", md5)
    """

    xml_root: ClassVar[str] = "directory"

    entries: List[CommitEntry] = Field(default_factory=list, alias="entry")

    def add_entry(self, entry: CommitEntry) -> None:
        self.entries.append(entry)

    def add_file_md5(self, name: str, md5: str) -> None:
        self.add_entry(CommitEntry(name=name, md5=md5))

    def add_file_from_contents(self, name: str, contents: bytes) -> None:
        self.add_entry(CommitEntry.from_contents(name, contents))

    def entry(self, entry: CommitEntry) -> "CommitFileList":
        self.add_entry(entry)
        return self

    def file_md5(self, name: str, md5: str) -> "CommitFileList":
        self.add_file_md5(name, md5)
        return self

    def file_from_contents(self, name: str, contents: bytes) -> "CommitFileList":
        self.add_file_from_contents(name, contents)
        return self

    def to_element(self) -> etree._Element:
        element = etree.Element("directory")
        for entry in self.entries:
            etree.SubElement(element, "entry", name=entry.name, md5=entry.md5)
        return element

    def to_xml(self) -> bytes:
        return serialize(self.to_element())


class BranchStatus(ObsBaseModel):
    """
    Result of ``cmd=branch``.

    OBS answers with a ``<status>`` document listing the branch endpoints as
    ``<data name="targetproject">...</data>`` items.
    """

    xml_root: ClassVar[str] = "status"

    source_project: str = Field(alias="sourceproject")
    source_package: str = Field(alias="sourcepackage")
    target_project: str = Field(alias="targetproject")
    target_package: str = Field(alias="targetpackage")

    @model_validator(mode="before")
    @classmethod
    def _flatten_data(cls, data: Any) -> Any:
        if isinstance(data, dict) and "data" in data:
            items = data["data"] if isinstance(data["data"], list) else [data["data"]]
            flattened: Dict[str, Any] = {}
            for item in items:
                if isinstance(item, dict) and "name" in item:
                    flattened[item["name"]] = item.get(TEXT_KEY, "")
            return flattened
        return data


# ============================================================================
# Build Models
# ============================================================================


class JobStatus(ObsBaseModel):
    """Status of the current build job (``_jobstatus``)."""

    xml_root: ClassVar[str] = "jobstatus"

    code: Optional[str] = None
    details: Optional[str] = None
    workerid: Optional[str] = None
    starttime: Optional[int] = None
    endtime: Optional[int] = None
    lastduration: Optional[int] = None
    hostarch: Optional[str] = None
    arch: Optional[str] = None
    jobid: Optional[str] = None
    job: Optional[str] = None
    attempt: Optional[int] = None


class BuildStatus(ObsBaseModel):
    """Build state of one package in one repository/architecture."""

    xml_root: ClassVar[str] = "status"

    package: str
    code: PackageCode
    dirty: bool = False
    details: Optional[str] = None


class BuildHistoryEntry(ObsBaseModel):
    """One finished build of a package."""

    rev: str
    srcmd5: str
    versrel: str
    bcnt: str
    time: int
    duration: Optional[int] = None


class BuildHistory(ObsBaseModel):
    """Build history of a package (``_history``)."""

    xml_root: ClassVar[str] = "buildhistory"

    entries: List[BuildHistoryEntry] = Field(default_factory=list, alias="entry")


class ResultListResult(ObsBaseModel):
    """Build results of one repository/architecture."""

    project: str
    repository: str
    arch: str
    code: RepositoryCode
    state: Optional[RepositoryCode] = None
    dirty: bool = False
    statuses: List[BuildStatus] = Field(default_factory=list, alias="status")

    def get_status(self, package: str) -> Optional[BuildStatus]:
        return next((status for status in self.statuses if status.package == package), None)


class ResultList(ObsBaseModel):
    """Build results of a project or package (``/build/<project>/_result``)."""

    xml_root: ClassVar[str] = "resultlist"

    state: Optional[str] = None
    results: List[ResultListResult] = Field(default_factory=list, alias="result")


class Binary(ObsBaseModel):
    """Build artifact of a package."""

    filename: str
    size: int
    mtime: int


class BinaryList(ObsBaseModel):
    """Build artifacts of a package in one repository/architecture."""

    xml_root: ClassVar[str] = "binarylist"

    binaries: List[Binary] = Field(default_factory=list, alias="binary")

    def get_binary(self, filename: str) -> Optional[Binary]:
        return next((binary for binary in self.binaries if binary.filename == filename), None)


class JobHist(ObsBaseModel):
    """Entry of a repository job history."""

    package: str
    rev: str
    srcmd5: str
    versrel: str
    bcnt: str
    readytime: int
    starttime: int
    endtime: int
    code: PackageCode
    uri: Optional[str] = None
    workerid: Optional[str] = None
    hostarch: Optional[str] = None
    reason: Optional[str] = None
    verifymd5: Optional[str] = None


class JobHistList(ObsBaseModel):
    """Job history of a repository/architecture (``_jobhistory``)."""

    xml_root: ClassVar[str] = "jobhistlist"

    jobhist: List[JobHist] = Field(default_factory=list)


class LogEntryEntry(ObsBaseModel):
    """Size and modification time of a build log."""

    name: Optional[str] = None
    size: int
    mtime: int


class LogEntry(ObsBaseModel):
    """Answer to ``_log?view=entry``."""

    xml_root: ClassVar[str] = "directory"

    entries: List[LogEntryEntry] = Field(default_factory=list, alias="entry")

    @field_validator("entries", mode="after")
    @classmethod
    def _only_log(cls, value: List[LogEntryEntry]) -> List[LogEntryEntry]:
        return [entry for entry in value if entry.name in (None, "_log")]


__all__ = [
    "RebuildMode",
    "BlockMode",
    "RepositoryCode",
    "PackageCode",
    "StatusData",
    "ApiErrorStatus",
    "RepositoryPath",
    "RepositoryMeta",
    "PersonRole",
    "BuildFlag",
    "PackageBuildMeta",
    "ProjectMeta",
    "PackageMeta",
    "DirectoryEntry",
    "Directory",
    "SourceDirectoryEntry",
    "LinkInfo",
    "SourceDirectory",
    "Revision",
    "RevisionList",
    "CommitEntry",
    "MissingEntries",
    "CommitResult",
    "CommitFileList",
    "BranchStatus",
    "JobStatus",
    "BuildStatus",
    "BuildHistoryEntry",
    "BuildHistory",
    "ResultListResult",
    "ResultList",
    "Binary",
    "BinaryList",
    "JobHist",
    "JobHistList",
    "LogEntryEntry",
    "LogEntry",
]
