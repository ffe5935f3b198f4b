"""FishEye/Crucible REST API client.

Provides a synchronous httpx-based client for the fecru admin API:
- incremental re-index of one repository (API key auth)
- listing of every repository with start/limit pagination (Basic Auth)

Reference: https://docs.atlassian.com/fisheye-crucible/latest/wadl/fecru.html
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .config import (
    ClientConfig,
    FisheyeGlobalConfig,
    FisheyeRepositoryConfig,
    get_config,
    merge_config,
)
from .exceptions import FisheyeClientError, FisheyeTransportError, InvalidArgumentError
from .models import Page, Repository
from .request_builder import (
    build_request,
    build_request_with_body,
    build_url,
    quote_path_segment,
)

logger = logging.getLogger("fisheye.client")

REPOSITORIES_PATH = "/rest-service-fecru/admin/repositories"
INCREMENTAL_INDEX_PATH = REPOSITORIES_PATH + "/{repository}/incremental-index"

# Maximum page size accepted by the admin listing endpoint
PAGE_LIMIT = 1000

# 202: index queued, 204: index finished synchronously
INDEX_SUCCESS_STATUS_CODES = frozenset({202, 204})


class FisheyeClient:
    """FishEye REST API client using httpx.

    The client works on an immutable ClientConfig snapshot. The snapshot is
    replaced by ``update_config_from_repository`` and ``set_credentials``;
    both are meant to be called during setup only. Calls are blocking and no
    request is ever retried.

    Attributes:
        client: Underlying httpx.Client (the transport)

    Example:
        >>> with FisheyeClient(FisheyeGlobalConfig(url="https://fe.example.com")) as client:
        ...     client.set_credentials("admin", "secret")
        ...     names = [repo.name for repo in client.list_repositories()]
    """

    def __init__(
        self,
        configuration: FisheyeGlobalConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client from the global configuration.

        Args:
            configuration: Global settings; defaults to ``get_config()``
            http_client: Optional transport. When omitted, the client creates
                (and later closes) its own httpx.Client.
        """
        if configuration is None:
            configuration = get_config()

        self._config = ClientConfig.from_global(configuration)
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(
            timeout=httpx.Timeout(configuration.timeout)
        )

    @property
    def config(self) -> ClientConfig:
        """Effective configuration used for the next request."""
        return self._config

    def update_config_from_repository(self, configuration: FisheyeRepositoryConfig) -> None:
        """Updates the client configuration from the repository configuration.

        Base URL and API key are replaced only if the repository configuration
        names a URL.

        Args:
            configuration: The repository configuration
        """
        self._config = merge_config(self._config, configuration)

    def set_credentials(self, username: str | None, password: str | None) -> None:
        """Sets the REST API credentials used for Basic Auth."""
        self._config = self._config.with_credentials(username, password)

    def index_repository(self, repository: str) -> bool:
        """Performs an incremental index on the given repository.

        Only status codes 202 and 204 count as success. Any other status is
        logged and reported as ``False``; it never raises.

        Args:
            repository: FishEye repository name

        Returns:
            True if the server accepted the index request.

        Raises:
            FisheyeClientError: If the request could not be sent at all
        """
        url = build_url(
            self._config.base_url,
            INCREMENTAL_INDEX_PATH.format(repository=quote_path_segment(repository)),
        )
        request = build_request_with_body(
            self.client, "PUT", url, self._config, use_api_token=True
        )
        response = self._send(request, "index_repository")

        if response.status_code in INDEX_SUCCESS_STATUS_CODES:
            logger.info(
                "fisheye_index_triggered",
                extra={"repository": repository, "status_code": response.status_code},
            )
            return True

        logger.warning(
            "fisheye_index_failed",
            extra={"repository": repository, "status_code": response.status_code},
        )
        return False

    def list_repositories(self) -> list[Repository]:
        """Lists all repositories known to the server.

        Follows start/limit pagination until the server reports the last page.
        The next page always starts at ``page.start + page.size``. The result
        is all-or-nothing: a failing page discards everything read before it.

        Returns:
            Every repository, in server order.

        Raises:
            InvalidArgumentError: If username or password is not set
            FisheyeTransportError: If a page request returns a status other than 200
            FisheyeClientError: If a request fails or a page cannot be decoded
        """
        if self._config.username is None:
            raise InvalidArgumentError("username")
        if self._config.password is None:
            raise InvalidArgumentError("password")

        url = build_url(self._config.base_url, REPOSITORIES_PATH)
        start = 0
        is_last_page = False
        result: list[Repository] = []

        while not is_last_page:
            request = build_request(
                self.client,
                "GET",
                url,
                self._config,
                use_api_token=False,
                params={"start": start, "limit": PAGE_LIMIT},
            )
            response = self._send(request, "list_repositories")

            if response.status_code != 200:
                raise FisheyeTransportError(
                    response.status_code,
                    f"Listing FishEye repositories failed with status code {response.status_code}",
                )

            page = self._decode_page(response)
            result.extend(page.values)
            is_last_page = page.is_last_page
            start = page.next_start

            logger.debug(
                "fisheye_list_repositories_page",
                extra={
                    "page_start": page.start,
                    "page_size": page.size,
                    "total_so_far": len(result),
                    "is_last_page": is_last_page,
                },
            )

        logger.info(
            "fisheye_list_repositories_complete",
            extra={"total_repositories": len(result)},
        )
        return result

    def _send(self, request: httpx.Request, operation: str) -> httpx.Response:
        """Send ``request`` once, translating transport failures."""
        try:
            return self.client.send(request)
        except httpx.TimeoutException as e:
            logger.error(
                "fisheye_request_timeout",
                extra={"operation": operation, "url": str(request.url), "error": str(e)},
            )
            raise FisheyeClientError(f"FISHEYE_{operation.upper()}_TIMEOUT") from e
        except httpx.HTTPError as e:
            logger.error(
                "fisheye_request_error",
                extra={"operation": operation, "url": str(request.url), "error": str(e)},
            )
            raise FisheyeClientError(f"FISHEYE_{operation.upper()}_ERROR: {e}") from e

    @staticmethod
    def _decode_page(response: httpx.Response) -> Page[Repository]:
        try:
            return Page[Repository].model_validate_json(response.content)
        except ValidationError as e:
            raise FisheyeClientError(f"Malformed repository page: {e}") from e

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "FisheyeClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
