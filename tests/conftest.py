"""
Test fixtures and mock data for obs-tool tests.

This module provides common fixtures, sample OBS documents, and utilities
for testing the obs-tool package.
"""

import textwrap
from pathlib import Path

import pytest
import respx

from obs_tool.api import ObsClient
from obs_tool.utils.constants import ENV_APIURL, ENV_PASSWORD, ENV_USER

API_URL = "https://api.example.com"
PROJECT = "home:alice"
PACKAGE = "hello"
REPOSITORY = "openSUSE_Tumbleweed"
ARCH = "x86_64"

SOURCE_FILE = b"Name: hello\nVersion: 1.0\n"
SOURCE_FILE_MD5 = "81deaf367eac68962a2f7fe6d1e7a2f0"

PROJECT_META_XML = """
<project name="home:alice">
  <title>Alice's home</title>
  <description>Scratch space</description>
  <person userid="alice" role="maintainer"/>
  <build>
    <disable repository="openSUSE_Leap"/>
  </build>
  <repository name="openSUSE_Tumbleweed" rebuild="local">
    <path project="openSUSE:Factory" repository="snapshot"/>
    <arch>x86_64</arch>
    <arch>aarch64</arch>
  </repository>
  <repository name="openSUSE_Leap" block="never">
    <path project="openSUSE:Leap:15.6" repository="standard"/>
    <arch>x86_64</arch>
  </repository>
</project>
"""

PACKAGE_META_XML = """
<package name="hello" project="home:alice">
  <title>Hello</title>
  <description/>
  <build>
    <disable/>
    <enable repository="openSUSE_Tumbleweed" arch="x86_64"/>
  </build>
  <url>https://example.com/hello</url>
</package>
"""

RESULT_LIST_XML = """
<resultlist state="c181538ad4ec4e5c4b6b8f3ab12d6da4">
  <result project="home:alice" repository="openSUSE_Tumbleweed" arch="x86_64" code="building" state="building">
    <status package="hello" code="building"/>
  </result>
  <result project="home:alice" repository="openSUSE_Tumbleweed" arch="aarch64" code="broken" state="broken" dirty="true">
    <status package="hello" code="broken">
      <details>interrupted</details>
    </status>
  </result>
</resultlist>
"""


def _result_list_xml(*targets):
    results = []
    for repository, arch, code, dirty in targets:
        flag = "true" if dirty else "false"
        results.append(
            f'<result project="{PROJECT}" repository="{repository}" arch="{arch}" code="published"'
            f' state="published" dirty="{flag}"><status package="{PACKAGE}" code="{code}"/></result>'
        )
    return "<resultlist>" + "".join(results) + "</resultlist>"


def _status_xml(code, summary, details=None):
    details_xml = f"<details>{details}</details>" if details else ""
    return f'<status code="{code}"><summary>{summary}</summary>{details_xml}</status>'


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep connection settings of the developer's environment out of the tests."""
    for name in (ENV_APIURL, ENV_USER, ENV_PASSWORD):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def httpx_mock():
    """Provide respx mock for HTTP mocking."""
    with respx.mock:
        yield respx


@pytest.fixture
def obs_client(httpx_mock):
    """ObsClient talking to the respx mock."""
    client = ObsClient(API_URL, "alice", "secret")
    yield client
    client.close()


@pytest.fixture
def no_sleep(mocker):
    """Skip retry backoff delays."""
    return mocker.patch("obs_tool.api.obs_client.time.sleep")


@pytest.fixture
def oscrc(tmp_path) -> Path:
    """osc configuration with plaintext credentials for the test API."""
    path = tmp_path / "oscrc"
    path.write_text(
        textwrap.dedent(
            f"""\
            [general]
            apiurl = {API_URL}

            [{API_URL}]
            user = alice
            pass = secret
            aliases = test

            [https://other.example.com/]
            user = bob
            passx = QlpoOTFBWSZTWSmhdgIAAAEJgBAAAkEWACAAIhpjUIYCXiB4u5IpwoSBTQuwEA==
            """
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def project_meta_xml():
    """Project meta with two repositories and a build flag."""
    return PROJECT_META_XML


@pytest.fixture
def package_meta_xml():
    """Package meta with a global disable and a targeted enable."""
    return PACKAGE_META_XML


@pytest.fixture
def result_list_xml():
    """Results of a project with one building and one dirty broken target."""
    return RESULT_LIST_XML


@pytest.fixture
def make_result_list():
    """Factory building a resultlist for the test package from (repository, arch, code, dirty) tuples."""
    return _result_list_xml


@pytest.fixture
def make_status():
    """Factory building an OBS error <status> document."""
    return _status_xml


@pytest.fixture
def source_file():
    """Content of the test source file and its MD5."""
    return SOURCE_FILE, SOURCE_FILE_MD5
