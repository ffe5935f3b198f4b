"""Unit tests for request construction.

No network traffic: requests are only built and inspected.
"""

import base64

import httpx
import pytest

from src.fisheye.config import ClientConfig
from src.fisheye.exceptions import InvalidArgumentError
from src.fisheye.request_builder import (
    basic_auth_header,
    build_request,
    build_request_with_body,
    build_url,
    quote_path_segment,
)


@pytest.fixture
def plain_client():
    client = httpx.Client()
    yield client
    client.close()


@pytest.fixture
def config():
    return ClientConfig(
        base_url="https://fe.example.com",
        api_token="key-1",
        username="admin",
        password="pw",
    )


class TestBuildUrl:
    def test_joins_base_and_path(self):
        assert (
            build_url("https://fe.example.com", "/rest-service-fecru/admin/repositories")
            == "https://fe.example.com/rest-service-fecru/admin/repositories"
        )

    def test_no_double_slash(self):
        assert build_url("https://fe.example.com/", "/a") == "https://fe.example.com/a"

    def test_quote_path_segment(self):
        """Slashes and spaces cannot break out of the segment."""
        assert quote_path_segment("a b/c") == "a%20b%2Fc"
        assert quote_path_segment("plain-name_1") == "plain-name_1"


class TestBasicAuthHeader:
    def test_credentials_encoding(self):
        """Credentials encoded as base64(username:password)."""
        header = basic_auth_header("user@example.com", "secret123")

        assert header.startswith("Basic ")
        decoded = base64.b64decode(header.removeprefix("Basic ")).decode()
        assert decoded == "user@example.com:secret123"

    def test_matches_httpx_basic_auth(self):
        """Same header httpx would produce."""
        request = httpx.Request("GET", "https://fe.example.com")
        flow = httpx.BasicAuth("admin", "pw").auth_flow(request)
        authed = next(flow)

        assert basic_auth_header("admin", "pw") == authed.headers["Authorization"]


class TestBuildRequest:
    """Bodiless requests."""

    def test_token_mode_headers(self, plain_client, config):
        request = build_request(
            plain_client, "GET", "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["Accept"] == "application/json"
        assert request.headers["X-Api-Key"] == "key-1"
        assert "Authorization" not in request.headers

    def test_credentials_mode_headers(self, plain_client, config):
        request = build_request(
            plain_client, "GET", "https://fe.example.com/x", config, use_api_token=False
        )

        assert request.headers["Accept"] == "application/json"
        assert request.headers["Authorization"] == basic_auth_header("admin", "pw")
        assert "X-Api-Key" not in request.headers

    def test_mode_is_explicit_not_inferred(self, plain_client):
        """Token mode is used even when credentials are populated, and vice versa."""
        config = ClientConfig(base_url="https://fe.example.com", api_token="", username="u", password="p")

        request = build_request(
            plain_client, "GET", "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["X-Api-Key"] == ""
        assert "Authorization" not in request.headers

    def test_no_body_headers(self, plain_client, config):
        request = build_request(
            plain_client, "GET", "https://fe.example.com/x", config, use_api_token=True
        )

        assert "Content-Type" not in request.headers
        assert request.content == b""

    def test_query_params(self, plain_client, config):
        request = build_request(
            plain_client,
            "GET",
            "https://fe.example.com/x",
            config,
            use_api_token=False,
            params={"start": 0, "limit": 1000},
        )

        assert str(request.url) == "https://fe.example.com/x?start=0&limit=1000"

    def test_missing_username(self, plain_client):
        config = ClientConfig(base_url="https://fe.example.com", api_token="k")

        with pytest.raises(InvalidArgumentError) as exc_info:
            build_request(plain_client, "GET", "https://fe.example.com/x", config, use_api_token=False)

        assert exc_info.value.argument == "username"
        assert "username" in str(exc_info.value)

    def test_missing_password(self, plain_client):
        config = ClientConfig(base_url="https://fe.example.com", api_token="k", username="u")

        with pytest.raises(InvalidArgumentError) as exc_info:
            build_request(plain_client, "GET", "https://fe.example.com/x", config, use_api_token=False)

        assert exc_info.value.argument == "password"

    def test_token_mode_ignores_missing_credentials(self, plain_client):
        config = ClientConfig(base_url="https://fe.example.com", api_token="k")

        request = build_request(
            plain_client, "GET", "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["X-Api-Key"] == "k"


class TestBuildRequestWithBody:
    """Body-bearing requests."""

    @pytest.mark.parametrize("method", ["PUT", "POST"])
    def test_empty_body_for_put_and_post(self, plain_client, config, method):
        request = build_request_with_body(
            plain_client, method, "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Content-Length"] == "0"
        assert request.content == b""

    def test_common_headers_applied(self, plain_client, config):
        request = build_request_with_body(
            plain_client, "PUT", "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["Accept"] == "application/json"
        assert request.headers["X-Api-Key"] == "key-1"

    def test_other_methods_get_content_type_only(self, plain_client, config):
        request = build_request_with_body(
            plain_client, "PATCH", "https://fe.example.com/x", config, use_api_token=True
        )

        assert request.headers["Content-Type"] == "application/json"

    def test_credentials_checked(self, plain_client):
        config = ClientConfig(base_url="https://fe.example.com", api_token="k")

        with pytest.raises(InvalidArgumentError):
            build_request_with_body(
                plain_client, "PUT", "https://fe.example.com/x", config, use_api_token=False
            )
