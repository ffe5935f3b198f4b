"""Request construction for the FishEye REST API.

Builds fully addressed, authenticated ``httpx.Request`` objects. Nothing in
this module touches the network; requests are handed to ``httpx.Client.send``
by the caller.

Two authentication modes exist and exactly one is used per request:
- token mode: ``X-Api-Key`` header carrying the REST API key
- credentials mode: HTTP Basic Auth with username/password
"""

import base64
from typing import Any
from urllib.parse import quote

import httpx

from .config import ClientConfig
from .exceptions import InvalidArgumentError

__all__ = [
    "basic_auth_header",
    "build_request",
    "build_request_with_body",
    "build_url",
    "quote_path_segment",
]

JSON_MEDIA_TYPE = "application/json"


def quote_path_segment(value: str) -> str:
    """Percent-encode ``value`` for use as a single URL path segment."""
    return quote(value, safe="")


def build_url(base_url: str, path: str) -> str:
    """Join the server base URL and an absolute API path."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def basic_auth_header(username: str, password: str) -> str:
    """Create Basic Auth header value: ``Basic base64(username:password)``."""
    credentials = f"{username}:{password}"
    encoded = base64.b64encode(credentials.encode()).decode()
    return f"Basic {encoded}"


def _auth_headers(config: ClientConfig, use_api_token: bool) -> dict[str, str]:
    if use_api_token:
        return {"X-Api-Key": config.api_token}

    if config.username is None:
        raise InvalidArgumentError("username")
    if config.password is None:
        raise InvalidArgumentError("password")
    return {"Authorization": basic_auth_header(config.username, config.password)}


def build_request(
    http_client: httpx.Client,
    method: str,
    url: str,
    config: ClientConfig,
    *,
    use_api_token: bool,
    params: dict[str, Any] | None = None,
) -> httpx.Request:
    """Build a bodiless request with the common headers.

    Args:
        http_client: Client whose defaults (timeout, base headers) apply
        method: HTTP method
        url: Absolute URL
        config: Effective client configuration
        use_api_token: Authenticate with the API key if True, otherwise with
            username/password
        params: Optional query parameters

    Returns:
        The prepared request.

    Raises:
        InvalidArgumentError: credentials mode requested without username or
            password
    """
    headers = {"Accept": JSON_MEDIA_TYPE}
    headers.update(_auth_headers(config, use_api_token))
    return http_client.build_request(method, url, params=params, headers=headers)


def build_request_with_body(
    http_client: httpx.Client,
    method: str,
    url: str,
    config: ClientConfig,
    *,
    use_api_token: bool,
    params: dict[str, Any] | None = None,
) -> httpx.Request:
    """Build a request that carries a JSON body.

    Same as :func:`build_request`, plus ``Content-Type: application/json``.
    POST and PUT always get an explicit empty body.

    Raises:
        InvalidArgumentError: credentials mode requested without username or
            password
    """
    headers = {"Accept": JSON_MEDIA_TYPE, "Content-Type": JSON_MEDIA_TYPE}
    headers.update(_auth_headers(config, use_api_token))

    content = None
    if method.upper() in ("POST", "PUT"):
        # IIS answers 411 when Content-Length is missing, even for empty bodies
        content = ""
        headers["Content-Length"] = "0"

    return http_client.build_request(
        method, url, params=params, headers=headers, content=content
    )
