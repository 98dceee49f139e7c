import base64

import httpx
import pytest

from circleci_provider.base.config import ProviderConfig
from circleci_provider.base.exceptions import (
    EncodingError,
    TransportError,
    UnexpectedStatusError,
)
from circleci_provider.client import (
    CircleCIClient,
    EnvironmentVariable,
    validate_environment_variable_name,
)

TOKEN = "1700000000000000000"
BASE = "https://circleci.com/api/v1.1/project/github/foo/bar/envvar"


def _basic_auth(request: httpx.Request) -> tuple[str, str]:
    scheme, _, encoded = request.headers["Authorization"].partition(" ")
    assert scheme == "Basic"
    username, _, password = base64.b64decode(encoded).decode().partition(":")
    return username, password


@pytest.fixture
def make_client():
    """Build a client whose requests are answered by *handler* and recorded."""
    clients = []

    def factory(handler):
        requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        config = ProviderConfig(token=TOKEN, vcs_type="github", organization="foo")
        client = CircleCIClient(config, http_client=httpx.Client(transport=httpx.MockTransport(record)))
        clients.append(client)
        return client, requests

    yield factory
    for client in clients:
        client.http.close()


# --- name validation ---


class TestValidateName:
    @pytest.mark.parametrize("name", ["a", "KEY", "key_1", "Deploy_KEY_2", "x__"])
    def test_valid(self, name):
        assert validate_environment_variable_name(name)

    @pytest.mark.parametrize(
        "name", ["", "1KEY", "_KEY", "-key", "$KEY", "KEY-1", "KEY 1", "KEY\n", "clé"]
    )
    def test_invalid(self, name):
        assert not validate_environment_variable_name(name)


# --- build_api_url ---


class TestBuildApiURL:
    @pytest.mark.parametrize(
        "vcs_type,project,endpoint,expected",
        [
            ("github", "project1", "test1",
             "https://circleci.com/api/v1.1/project/github/circleci/project1/test1"),
            ("bitbucket", "project2", "test2",
             "https://circleci.com/api/v1.1/project/bitbucket/circleci/project2/test2"),
        ],
    )
    def test_default_base_url(self, vcs_type, project, endpoint, expected):
        config = ProviderConfig(token="something", vcs_type=vcs_type, organization="circleci")
        with CircleCIClient(config) as client:
            assert client.build_api_url(project, endpoint) == expected

    def test_base_url_override(self):
        config = ProviderConfig(
            token="t", vcs_type="github", organization="acme",
            base_url="https://circleci.internal/api/v1.1/",
        )
        with CircleCIClient(config) as client:
            assert (
                client.build_api_url("web", "envvar")
                == "https://circleci.internal/api/v1.1/project/github/acme/web/envvar"
            )


# --- add_environment_variable ---


class TestAddEnvironmentVariable:
    def test_success(self, make_client):
        client, requests = make_client(lambda r: httpx.Response(201))
        client.add_environment_variable("bar", "key", "value")

        (request,) = requests
        assert request.method == "POST"
        assert str(request.url) == BASE
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/json; charset=utf-8"
        assert request.content == b'{"name":"key","value":"value"}'
        assert _basic_auth(request) == (TOKEN, "")

    @pytest.mark.parametrize("status", [200, 400, 409, 500])
    def test_wrong_status(self, make_client, status):
        client, _ = make_client(lambda r: httpx.Response(status))
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.add_environment_variable("bar", "key", "value")
        assert exc_info.value.status_code == status
        assert str(exc_info.value) == (
            f"circleci: wrong status code {status} creating environment variable"
        )

    def test_unencodable_value(self, make_client):
        client, requests = make_client(lambda r: httpx.Response(201))
        with pytest.raises(EncodingError):
            client.add_environment_variable("bar", "key", "\ud800")
        assert requests == []

    def test_transport_error(self, make_client):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(boom)
        with pytest.raises(TransportError) as exc_info:
            client.add_environment_variable("bar", "key", "value")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


# --- get_environment_variable ---


class TestGetEnvironmentVariable:
    def test_success(self, make_client):
        client, requests = make_client(
            lambda r: httpx.Response(200, content=b'{"name":"key","value":"value"}\n')
        )
        envvar = client.get_environment_variable("bar", "key")

        assert envvar == EnvironmentVariable(name="key", value="value")
        (request,) = requests
        assert request.method == "GET"
        assert str(request.url) == f"{BASE}/key"
        assert request.headers["Accept"] == "application/json"
        assert request.content == b""
        assert _basic_auth(request) == (TOKEN, "")

    def test_wrong_status(self, make_client):
        client, _ = make_client(lambda r: httpx.Response(400))
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.get_environment_variable("bar", "key")
        assert str(exc_info.value) == "circleci: wrong status code 400 getting environment variable"
        assert exc_info.value.project == "bar"
        assert exc_info.value.name == "key"

    @pytest.mark.parametrize("body", [b"not json", b"{}", b'{"name": 1}'])
    def test_undecodable_body(self, make_client, body):
        client, _ = make_client(lambda r: httpx.Response(200, content=body))
        with pytest.raises(EncodingError):
            client.get_environment_variable("bar", "key")


# --- delete_environment_variable ---


class TestDeleteEnvironmentVariable:
    def test_success(self, make_client):
        client, requests = make_client(lambda r: httpx.Response(200))
        client.delete_environment_variable("bar", "key")

        (request,) = requests
        assert request.method == "DELETE"
        assert str(request.url) == f"{BASE}/key"
        assert request.headers["Accept"] == "application/json"
        assert _basic_auth(request) == (TOKEN, "")

    def test_not_found(self, make_client):
        client, _ = make_client(lambda r: httpx.Response(404))
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.delete_environment_variable("bar", "key")
        assert str(exc_info.value) == "circleci: wrong status code 404 deleting environment variable"

    def test_second_delete_is_surfaced(self, make_client):
        statuses = iter([200, 404])
        client, requests = make_client(lambda r: httpx.Response(next(statuses)))

        client.delete_environment_variable("bar", "key")
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.delete_environment_variable("bar", "key")
        assert exc_info.value.status_code == 404
        assert len(requests) == 2


# --- environment_variable_exists ---


class TestEnvironmentVariableExists:
    def test_exists(self, make_client):
        client, requests = make_client(lambda r: httpx.Response(200))
        assert client.environment_variable_exists("bar", "key") is True

        (request,) = requests
        assert request.method == "HEAD"
        assert str(request.url) == f"{BASE}/key"
        assert _basic_auth(request) == (TOKEN, "")

    def test_missing(self, make_client):
        client, _ = make_client(lambda r: httpx.Response(404))
        assert client.environment_variable_exists("bar", "key") is False

    @pytest.mark.parametrize("status", [201, 401, 500])
    def test_unexpected_status(self, make_client, status):
        client, _ = make_client(lambda r: httpx.Response(status))
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.environment_variable_exists("bar", "key")
        assert str(exc_info.value) == (
            f"circleci: wrong status code {status} getting environment variable"
        )

    def test_transport_error(self, make_client):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_client(timeout)
        with pytest.raises(TransportError):
            client.environment_variable_exists("bar", "key")


class TestClientLifecycle:
    def test_owned_http_client_closed(self):
        config = ProviderConfig(token="t", vcs_type="github", organization="acme")
        with CircleCIClient(config) as client:
            pass
        assert client.http.is_closed

    def test_injected_http_client_left_open(self):
        config = ProviderConfig(token="t", vcs_type="github", organization="acme")
        http = httpx.Client()
        with CircleCIClient(config, http_client=http):
            pass
        assert not http.is_closed
        http.close()


class TestRequestLogging:
    def test_request_and_response_share_request_id(self, make_client, monkeypatch):
        from circleci_provider import client as client_module

        calls = []
        monkeypatch.setattr(
            client_module.cp_logger, "debug", lambda message, **kw: calls.append(kw)
        )
        client, _ = make_client(lambda r: httpx.Response(200))
        client.delete_environment_variable("bar", "key")

        sent, received = calls
        assert sent["request_id"] == received["request_id"]
        assert received["status_code"] == 200
        assert sent["resource"] == "key"

    def test_each_request_gets_its_own_id(self, make_client, monkeypatch):
        from circleci_provider import client as client_module

        calls = []
        monkeypatch.setattr(
            client_module.cp_logger, "debug", lambda message, **kw: calls.append(kw)
        )
        client, _ = make_client(lambda r: httpx.Response(404))
        client.environment_variable_exists("bar", "a")
        client.environment_variable_exists("bar", "b")

        assert calls[0]["request_id"] != calls[2]["request_id"]
