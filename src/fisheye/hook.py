"""Push hook: re-index the FishEye repositories mapped to an SCM repository.

Indexing is best-effort. A repository that fails to index never stops the
remaining ones from being triggered.
"""

import logging

import httpx

from .client import FisheyeClient
from .config import FisheyeGlobalConfig, FisheyeRepositoryConfig, get_config
from .exceptions import FisheyeClientError

logger = logging.getLogger("fisheye.hook")


class FisheyeHook:
    """Triggers incremental indexing after an SCM repository received a push."""

    def __init__(
        self,
        configuration: FisheyeGlobalConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.configuration = configuration or get_config()
        self.http_client = http_client

    def on_push(self, repository_config: FisheyeRepositoryConfig) -> dict[str, bool]:
        """Index every FishEye repository named in ``repository_config``.

        Args:
            repository_config: Settings of the repository that was pushed to

        Returns:
            Mapping of FishEye repository name to index outcome, in
            configuration order. Empty when nothing is mapped.
        """
        if not repository_config.repositories:
            logger.debug("fisheye_hook_no_repositories")
            return {}

        results: dict[str, bool] = {}
        with FisheyeClient(self.configuration, http_client=self.http_client) as client:
            client.update_config_from_repository(repository_config)
            for name in repository_config.repositories:
                try:
                    results[name] = client.index_repository(name)
                except FisheyeClientError as e:
                    logger.warning(
                        "fisheye_hook_index_error",
                        extra={"repository": name, "error": str(e)},
                    )
                    results[name] = False

        logger.info(
            "fisheye_hook_complete",
            extra={
                "indexed": sum(results.values()),
                "failed": len(results) - sum(results.values()),
            },
        )
        return results
