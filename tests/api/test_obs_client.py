"""
Tests for ObsClient request handling.

This module tests client construction, error responses, retries of GET
requests and streaming.
"""

import logging

import httpx
import pytest

from obs_tool.api import ObsClient, PackageHandle, ProjectHandle
from obs_tool.exceptions import CredentialsError, ObsDecodeError, ObsHttpError, ObsTransportError
from obs_tool.models import Directory

API_URL = "https://api.example.com"


class TestObsClientInit:
    """Test ObsClient construction."""

    def test_init(self):
        """Test the API URL is normalized."""
        with ObsClient(API_URL + "/", "alice", "secret") as client:
            assert client.base_url == API_URL
            assert client.username == "alice"
            assert client.auth.username == "alice"
            assert client.session.auth is client.auth

    def test_invalid_url(self):
        """Test a URL without scheme is rejected."""
        with pytest.raises(ValueError):
            ObsClient("api.example.com", "alice", "secret")

    def test_repr_redacts_password(self):
        """Test the password isn't shown."""
        with ObsClient(API_URL, "alice", "secret") as client:
            assert "secret" not in repr(client)

    def test_context_manager_closes_session(self):
        """Test leaving the context closes the session."""
        with ObsClient(API_URL, "alice", "secret") as client:
            pass

        assert client.session.is_closed

    def test_create_from_config_file(self, oscrc):
        """Test the default API URL and its credentials are used."""
        with ObsClient.create_from_config_file(str(oscrc)) as client:
            assert client.base_url == API_URL
            assert client.username == "alice"

    def test_create_from_config_file_alias(self, oscrc):
        """Test an osc alias selects its section."""
        with ObsClient.create_from_config_file(str(oscrc), apiurl="test") as client:
            assert client.base_url == API_URL

    def test_create_from_config_file_other_apiurl(self, oscrc):
        """Test another API URL with obfuscated password."""
        with ObsClient.create_from_config_file(str(oscrc), apiurl="https://other.example.com") as client:
            assert client.base_url == "https://other.example.com"
            assert client.username == "bob"

    def test_create_from_config_file_unknown_apiurl(self, oscrc):
        """Test an API URL without credentials."""
        with pytest.raises(CredentialsError):
            ObsClient.create_from_config_file(str(oscrc), apiurl="https://unknown.example.com")

    def test_create_from_missing_config_file(self, tmp_path):
        """Test a missing configuration file."""
        with pytest.raises(FileNotFoundError):
            ObsClient.create_from_config_file(str(tmp_path / "missing"))


class TestHandles:
    """Test handle creation."""

    def test_project_handle(self, obs_client):
        """Test valid names give handles."""
        project = obs_client.project("home:alice")

        assert isinstance(project, ProjectHandle)
        assert isinstance(project.package("hello"), PackageHandle)

    @pytest.mark.parametrize("name", ["", "bad name", "a/b"])
    def test_invalid_project_name(self, obs_client, name):
        """Test invalid project names are rejected before any request."""
        with pytest.raises(ValueError):
            obs_client.project(name)

    def test_invalid_package_name(self, obs_client):
        """Test invalid package names are rejected before any request."""
        with pytest.raises(ValueError):
            obs_client.project("home:alice").package("../etc")

    def test_list_projects(self, obs_client, httpx_mock):
        """Test GET /source."""
        httpx_mock.get(f"{API_URL}/source").mock(
            return_value=httpx.Response(
                200, text='<directory count="2"><entry name="home:alice"/><entry name="openSUSE:Factory"/></directory>'
            )
        )

        listing = obs_client.list_projects()

        assert isinstance(listing, Directory)
        assert listing.count == 2
        assert listing.names == ["home:alice", "openSUSE:Factory"]


class TestErrorResponses:
    """Test non-2xx responses."""

    def test_status_document(self, obs_client, httpx_mock, make_status):
        """Test the OBS <status> body is exposed on the error."""
        httpx_mock.get(f"{API_URL}/source/home:alice/nope/_meta").mock(
            return_value=httpx.Response(
                404, text=make_status("unknown_package", "Unknown package 'nope'", "404 unknown_package")
            )
        )

        with pytest.raises(ObsHttpError) as exc_info:
            obs_client.project("home:alice").package("nope").meta()

        error = exc_info.value
        assert error.status_code == 404
        assert error.code == "unknown_package"
        assert error.summary == "Unknown package 'nope'"
        assert error.details == "404 unknown_package"
        assert error.is_client_error
        assert error.response.status_code == 404

    def test_body_without_status(self, obs_client, httpx_mock):
        """Test a non-XML error body still raises ObsHttpError."""
        httpx_mock.get(f"{API_URL}/source").mock(return_value=httpx.Response(502, text="<html>Bad Gateway</html>"))

        with pytest.raises(ObsHttpError) as exc_info:
            obs_client.list_projects()

        assert exc_info.value.status_code == 502
        assert exc_info.value.code is None
        assert not exc_info.value.is_client_error

    def test_empty_error_body(self, obs_client, httpx_mock):
        """Test an empty error body."""
        httpx_mock.delete(f"{API_URL}/source/home:alice").mock(return_value=httpx.Response(403))

        with pytest.raises(ObsHttpError) as exc_info:
            obs_client.project("home:alice").delete()

        assert exc_info.value.status_code == 403
        assert exc_info.value.summary is None

    def test_server_error_logged_without_credentials(self, obs_client, httpx_mock, caplog, make_status):
        """Test 5xx responses are logged at error level with the Authorization header redacted."""
        httpx_mock.get(f"{API_URL}/source").mock(
            return_value=httpx.Response(500, text=make_status("internal_error", "boom"))
        )

        with pytest.raises(ObsHttpError):
            obs_client.list_projects()

        assert "SERVER ERROR (500) during list projects" in caplog.text
        assert "[REDACTED]" in caplog.text
        assert "YWxpY2U6c2VjcmV0" not in caplog.text

    def test_client_error_not_logged_as_error(self, obs_client, httpx_mock, caplog):
        """Test 4xx responses are left to the caller."""
        httpx_mock.get(f"{API_URL}/source").mock(return_value=httpx.Response(401))

        with pytest.raises(ObsHttpError):
            obs_client.list_projects()

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_malformed_success_body(self, obs_client, httpx_mock):
        """Test a 200 with garbage raises ObsDecodeError."""
        httpx_mock.get(f"{API_URL}/source").mock(return_value=httpx.Response(200, text="<directory"))

        with pytest.raises(ObsDecodeError):
            obs_client.list_projects()

    def test_wrong_document(self, obs_client, httpx_mock):
        """Test a well-formed but unexpected document raises ObsDecodeError."""
        httpx_mock.get(f"{API_URL}/source").mock(return_value=httpx.Response(200, text="<resultlist/>"))

        with pytest.raises(ObsDecodeError, match="Expected <directory>"):
            obs_client.list_projects()


class TestRetries:
    """Test transport failure handling."""

    def test_get_retried(self, obs_client, httpx_mock, no_sleep):
        """Test GET requests are retried with exponential backoff."""
        route = httpx_mock.get(f"{API_URL}/source").mock(
            side_effect=[
                httpx.ConnectError("connection refused"),
                httpx.ReadTimeout("timed out"),
                httpx.Response(200, text="<directory/>"),
            ]
        )

        assert obs_client.list_projects().names == []
        assert route.call_count == 3
        assert [call.args[0] for call in no_sleep.call_args_list] == [0.5, 1.0]

    def test_get_gives_up(self, obs_client, httpx_mock, no_sleep):
        """Test the last transport error is raised as ObsTransportError."""
        route = httpx_mock.get(f"{API_URL}/source").mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(ObsTransportError, match="list projects"):
            obs_client.list_projects()

        assert route.call_count == 3
        assert no_sleep.call_count == 2

    def test_post_not_retried(self, obs_client, httpx_mock, no_sleep):
        """Test commands are sent only once."""
        route = httpx_mock.post(f"{API_URL}/build/home:alice").mock(side_effect=httpx.ConnectError("reset"))

        with pytest.raises(ObsTransportError):
            obs_client.project("home:alice").rebuild()

        assert route.call_count == 1
        no_sleep.assert_not_called()

    def test_http_errors_not_retried(self, obs_client, httpx_mock, no_sleep):
        """Test an error response is final."""
        route = httpx_mock.get(f"{API_URL}/source").mock(return_value=httpx.Response(503))

        with pytest.raises(ObsHttpError):
            obs_client.list_projects()

        assert route.call_count == 1


class TestStreaming:
    """Test streamed downloads."""

    def test_lazy(self, obs_client, httpx_mock, source_file):
        """Test nothing is sent before iteration starts."""
        contents, _ = source_file
        route = httpx_mock.get(f"{API_URL}/source/home:alice/hello/hello.spec").mock(
            return_value=httpx.Response(200, content=contents)
        )

        stream = obs_client.project("home:alice").package("hello").source_file("hello.spec")
        assert route.call_count == 0

        assert b"".join(stream) == contents
        assert route.call_count == 1

    def test_error_status(self, obs_client, httpx_mock, make_status):
        """Test a failing download raises once iterated."""
        httpx_mock.get(f"{API_URL}/source/home:alice/hello/missing.spec").mock(
            return_value=httpx.Response(404, text=make_status("404", "missing.spec: no such file"))
        )

        stream = obs_client.project("home:alice").package("hello").source_file("missing.spec")

        with pytest.raises(ObsHttpError) as exc_info:
            list(stream)

        assert exc_info.value.summary == "missing.spec: no such file"
