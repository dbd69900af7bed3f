"""
Tests for the OBS API document models.

Documents are decoded through the XML codec the same way the client does.
"""

import pytest
from lxml import etree

from obs_tool.exceptions import ObsDecodeError
from obs_tool.models import (
    ApiErrorStatus,
    BlockMode,
    BranchStatus,
    BuildFlag,
    BuildStatus,
    CommitEntry,
    CommitFileList,
    CommitResult,
    Directory,
    JobHistList,
    LogEntry,
    PackageBuildMeta,
    PackageCode,
    PackageMeta,
    ProjectMeta,
    RebuildMode,
    RepositoryCode,
    RepositoryMeta,
    RepositoryPath,
    ResultList,
    RevisionList,
    SourceDirectory,
)
from obs_tool.utils.xml_codec import parse_xml


class TestProjectMeta:
    """Test ProjectMeta decoding and encoding."""

    def test_decode(self, project_meta_xml):
        """Test decoding a full project meta."""
        meta = parse_xml(project_meta_xml, ProjectMeta)

        assert meta.name == "home:alice"
        assert meta.title == "Alice's home"
        assert meta.description == "Scratch space"
        assert meta.persons[0].userid == "alice"
        assert meta.build.disabled[0].repository == "openSUSE_Leap"
        assert meta.publish is None
        assert [repo.name for repo in meta.repositories] == ["openSUSE_Tumbleweed", "openSUSE_Leap"]

        tumbleweed = meta.get_repository("openSUSE_Tumbleweed")
        assert tumbleweed.rebuild == RebuildMode.LOCAL
        assert tumbleweed.block == BlockMode.ALL
        assert tumbleweed.paths == [RepositoryPath(project="openSUSE:Factory", repository="snapshot")]
        assert tumbleweed.arches == ["x86_64", "aarch64"]

        # A single <arch> still decodes into a list
        assert meta.get_repository("openSUSE_Leap").arches == ["x86_64"]
        assert meta.get_repository("openSUSE_Leap").block == BlockMode.NEVER
        assert meta.get_repository("missing") is None

    def test_round_trip(self):
        """Test encoding then decoding a project meta yields an equal value."""
        meta = ProjectMeta(
            name="home:alice:test",
            title="Test project",
            description="Used by tests",
            repositories=[
                RepositoryMeta(
                    name="standard",
                    rebuild=RebuildMode.DIRECT,
                    block=BlockMode.LOCAL,
                    paths=[RepositoryPath(project="openSUSE:Factory", repository="snapshot")],
                    arches=["x86_64", "i586"],
                ),
                RepositoryMeta(name="images", arches=["x86_64"]),
            ],
        )

        assert parse_xml(meta.to_xml(), ProjectMeta) == meta

    def test_round_trip_keeps_whitespace(self):
        """Test padded titles and multi-line descriptions come back unchanged."""
        meta = ProjectMeta(name="home:alice", title=" Title ", description="Line one\nLine two\n")

        decoded = parse_xml(meta.to_xml(), ProjectMeta)

        assert decoded.title == " Title "
        assert decoded.description == "Line one\nLine two\n"
        assert decoded == meta

    def test_round_trip_decoded_document(self, project_meta_xml):
        """Test a decoded meta survives being written back."""
        meta = parse_xml(project_meta_xml, ProjectMeta)

        assert parse_xml(meta.to_xml(), ProjectMeta) == meta

    def test_default_modes_are_not_written(self):
        """Test transitive/all repositories are encoded without rebuild/block attributes."""
        element = RepositoryMeta(name="standard", arches=["x86_64"]).to_element()

        assert element.get("rebuild") is None
        assert element.get("block") is None
        assert element.findtext("arch") == "x86_64"

    def test_element_order(self):
        """Test elements are written in the order OBS expects."""
        meta = ProjectMeta(
            name="p",
            build=PackageBuildMeta(disabled=[BuildFlag()]),
            repositories=[RepositoryMeta(name="r")],
        )
        root = etree.fromstring(meta.to_xml())

        assert [child.tag for child in root] == ["title", "description", "build", "repository"]

    def test_unknown_rebuild_mode(self):
        """Test an unknown rebuild mode is a decode error."""
        document = '<project name="p"><repository name="r" rebuild="sometimes"/></project>'

        with pytest.raises(ObsDecodeError):
            parse_xml(document, ProjectMeta)


class TestPackageMeta:
    """Test PackageMeta decoding and encoding."""

    def test_decode(self, package_meta_xml):
        """Test decoding a package meta with empty flags."""
        meta = parse_xml(package_meta_xml, PackageMeta)

        assert meta.name == "hello"
        assert meta.project == "home:alice"
        assert meta.description == ""
        assert meta.url == "https://example.com/hello"
        assert meta.build.disabled == [BuildFlag()]
        assert meta.build.enabled == [BuildFlag(repository="openSUSE_Tumbleweed", arch="x86_64")]

    def test_default_build_section(self):
        """Test a package without <build> gets an empty flag section."""
        meta = parse_xml('<package name="hello" project="home:alice"/>', PackageMeta)

        assert meta.build == PackageBuildMeta()

    def test_round_trip(self, package_meta_xml):
        """Test encoding then decoding a package meta yields an equal value."""
        meta = parse_xml(package_meta_xml, PackageMeta)

        assert parse_xml(meta.to_xml(), PackageMeta) == meta

    def test_round_trip_indented_description(self):
        """Test leading indentation and the trailing newline survive encoding."""
        meta = PackageMeta(name="hello", project="home:alice", description="  indented\n")

        assert parse_xml(meta.to_xml(), PackageMeta) == meta

    def test_encode_disable_flags(self):
        """Test disable flags keep their repository/arch restriction."""
        meta = PackageMeta(
            name="hello",
            project="home:alice",
            build=PackageBuildMeta(disabled=[BuildFlag(repository="openSUSE_Leap"), BuildFlag(arch="i586")]),
        )
        root = etree.fromstring(meta.to_xml())

        disables = root.findall("build/disable")
        assert [(d.get("repository"), d.get("arch")) for d in disables] == [("openSUSE_Leap", None), (None, "i586")]


class TestSourceModels:
    """Test source listings and revisions."""

    def test_source_directory(self):
        """Test a listing of a branched package with link information."""
        document = """
        <directory name="hello" rev="3" vrev="3" srcmd5="0123456789abcdef0123456789abcdef">
          <linkinfo project="openSUSE:Factory" package="hello" srcmd5="aaaa" lsrcmd5="bbbb" xsrcmd5="cccc"
                    baserev="aaaa"/>
          <entry name="hello.spec" md5="81deaf367eac68962a2f7fe6d1e7a2f0" size="25" mtime="1700000000"/>
          <entry name="hello-1.0.tar.gz" md5="d41d8cd98f00b204e9800998ecf8427e" size="0" mtime="1700000001"/>
        </directory>
        """
        listing = parse_xml(document, SourceDirectory)

        assert listing.rev == "3"
        assert len(listing.entries) == 2
        assert listing.get_entry("hello.spec").size == 25
        assert listing.get_entry("missing") is None
        link = listing.linkinfo[0]
        assert (link.project, link.package, link.xsrcmd5, link.missingok) == ("openSUSE:Factory", "hello", "cccc", False)

    def test_empty_package(self):
        """Test the zero revision of a new package has no entries."""
        listing = parse_xml('<directory name="hello" srcmd5="d41d8cd98f00b204e9800998ecf8427e"/>', SourceDirectory)

        assert listing.rev is None
        assert listing.entries == []

    def test_revision_list(self):
        """Test decoding the source history."""
        document = """
        <revisionlist>
          <revision rev="1" vrev="1">
            <srcmd5>aaaa</srcmd5><version>1.0</version><time>1700000000</time><user>alice</user>
            <comment>initial</comment>
          </revision>
          <revision rev="2" vrev="2">
            <srcmd5>bbbb</srcmd5><version>1.1</version><time>1700000100</time><user>bob</user>
          </revision>
        </revisionlist>
        """
        history = parse_xml(document, RevisionList)

        assert [revision.rev for revision in history.revisions] == ["1", "2"]
        assert history.revisions[0].comment == "initial"
        assert history.revisions[1].comment is None
        assert history.revisions[1].time == 1700000100

    def test_directory_names(self):
        """Test the generic directory listing."""
        listing = parse_xml('<directory count="2"><entry name="a"/><entry name="b"/></directory>', Directory)

        assert listing.count == 2
        assert listing.names == ["a", "b"]

    def test_wrong_root(self):
        """Test a document with another root element is rejected."""
        with pytest.raises(ObsDecodeError, match="Expected <revisionlist>"):
            parse_xml("<directory/>", RevisionList)


class TestCommitModels:
    """Test commit file lists and results."""

    def test_entry_from_contents(self, source_file):
        """Test the MD5 of a commit entry is the lowercase hex digest."""
        contents, md5 = source_file

        assert CommitEntry.from_contents("hello.spec", contents) == CommitEntry(name="hello.spec", md5=md5)

    def test_builders(self, source_file):
        """Test in-place and chained builders produce the same list."""
        contents, md5 = source_file
        chained = CommitFileList().file_from_contents("hello.spec", contents).file_md5("hello.tar.gz", "abcd")

        in_place = CommitFileList()
        in_place.add_file_md5("hello.spec", md5)
        in_place.add_entry(CommitEntry(name="hello.tar.gz", md5="abcd"))

        assert chained == in_place

    def test_encode(self):
        """Test the file list document."""
        filelist = CommitFileList().file_md5("a", "1111").file_md5("b", "2222")
        root = etree.fromstring(filelist.to_xml())

        assert root.tag == "directory"
        assert [(e.get("name"), e.get("md5")) for e in root.findall("entry")] == [("a", "1111"), ("b", "2222")]

    def test_result_needs_exactly_one_outcome(self):
        """Test CommitResult rejects neither or both outcomes."""
        with pytest.raises(ValueError):
            CommitResult()


class TestBranchStatus:
    """Test BranchStatus decoding."""

    def test_decode(self):
        """Test the <data> items are flattened into fields."""
        document = """
        <status code="ok">
          <summary>Ok</summary>
          <data name="targetproject">home:alice:branches:openSUSE:Factory</data>
          <data name="targetpackage">hello</data>
          <data name="sourceproject">openSUSE:Factory</data>
          <data name="sourcepackage">hello</data>
        </status>
        """
        status = parse_xml(document, BranchStatus)

        assert status.target_project == "home:alice:branches:openSUSE:Factory"
        assert status.target_package == "hello"
        assert status.source_project == "openSUSE:Factory"
        assert status.source_package == "hello"

    def test_missing_data(self):
        """Test a status without branch data is a decode error."""
        with pytest.raises(ObsDecodeError):
            parse_xml('<status code="ok"><summary>Ok</summary></status>', BranchStatus)


class TestBuildModels:
    """Test build result documents."""

    def test_result_list(self, result_list_xml):
        """Test decoding results of several targets."""
        results = parse_xml(result_list_xml, ResultList)

        first, second = results.results
        assert (first.repository, first.arch, first.code) == ("openSUSE_Tumbleweed", "x86_64", RepositoryCode.BUILDING)
        assert first.dirty is False
        assert first.get_status("hello").code == PackageCode.BUILDING
        assert second.dirty is True
        assert second.get_status("hello").details == "interrupted"
        assert second.get_status("other") is None

    def test_empty_result_list(self):
        """Test a project without repositories has no results."""
        assert parse_xml("<resultlist/>", ResultList).results == []

    def test_unknown_package_code(self):
        """Test build codes are a closed enumeration."""
        with pytest.raises(ObsDecodeError):
            parse_xml('<status package="hello" code="exploded"/>', BuildStatus)

    @pytest.mark.parametrize(
        "code,final",
        [
            (PackageCode.SUCCEEDED, True),
            (PackageCode.FAILED, True),
            (PackageCode.BROKEN, True),
            (PackageCode.DISABLED, True),
            (PackageCode.EXCLUDED, True),
            (PackageCode.BUILDING, False),
            (PackageCode.SCHEDULED, False),
            (PackageCode.UNRESOLVABLE, False),
            (PackageCode.UNKNOWN, False),
        ],
    )
    def test_is_final(self, code, final):
        """Test which package codes end a build."""
        assert code.is_final is final

    def test_job_history(self):
        """Test decoding a repository job history."""
        document = """
        <jobhistlist>
          <jobhist package="hello" rev="2" srcmd5="bbbb" versrel="1.1-1" bcnt="1" readytime="10"
                   starttime="20" endtime="80" code="succeeded" uri="http://worker" workerid="w:1"
                   hostarch="x86_64" reason="new build" verifymd5="bbbb"/>
        </jobhistlist>
        """
        history = parse_xml(document, JobHistList)

        assert history.jobhist[0].code == PackageCode.SUCCEEDED
        assert history.jobhist[0].endtime == 80

    def test_log_entry(self):
        """Test only the _log entry of the listing is kept."""
        document = '<directory><entry name="_log" size="13" mtime="0"/><entry name="other" size="1" mtime="1"/></directory>'
        entry = parse_xml(document, LogEntry)

        assert [(e.size, e.mtime) for e in entry.entries] == [(13, 0)]


class TestApiErrorStatus:
    """Test ApiErrorStatus decoding."""

    def test_decode(self, make_status):
        """Test code, summary and details are exposed."""
        status = parse_xml(make_status("unknown_package", "hello", "no such package"), ApiErrorStatus)

        assert status.code == "unknown_package"
        assert status.summary == "hello"
        assert status.details == "no such package"
        assert str(status) == "unknown_package: hello"
