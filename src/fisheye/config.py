"""Configuration management with pydantic-settings for the FishEye client.

Two configuration sources feed the client:
1. FisheyeGlobalConfig - server-wide defaults loaded from the environment / .env
2. FisheyeRepositoryConfig - optional per-repository settings

The client never mutates either of them. It works on a ClientConfig snapshot
produced by ``ClientConfig.from_global`` and ``merge_config``.
"""

import logging
from dataclasses import dataclass, replace
from dataclasses import field as dataclass_field
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("fisheye.config")

__all__ = [
    "ClientConfig",
    "FisheyeGlobalConfig",
    "FisheyeRepositoryConfig",
    "get_config",
    "merge_config",
    "reset_config",
]


def _strip_url(value: str) -> str:
    return value.strip().rstrip("/") if value else ""


class FisheyeGlobalConfig(BaseSettings):
    """Server-wide FishEye configuration.

    Loads from (in order of precedence):
    1. Environment variables prefixed with FISHEYE_ (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        url: FishEye/Crucible base URL (e.g., https://fe.example.com)
        api_token: REST API key sent as X-Api-Key for token-mode calls
        username: Optional user for Basic Auth (repository listing)
        password: Optional password for Basic Auth (repository listing)
        timeout: Transport timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="FISHEYE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    url: str = Field(
        default="",
        description="FishEye/Crucible base URL (e.g., https://fe.example.com)",
    )

    api_token: SecretStr = Field(
        default=SecretStr(""),
        description="REST API key used for the incremental index trigger",
    )

    username: str | None = Field(
        default=None,
        description="User for Basic Auth on the admin repository listing",
    )

    password: SecretStr | None = Field(
        default=None,
        description="Password for Basic Auth on the admin repository listing",
    )

    timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="HTTP timeout in seconds, enforced by the transport",
    )

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return _strip_url(v)


class FisheyeRepositoryConfig(BaseModel):
    """Per-repository FishEye settings.

    An empty ``url`` means "use the global server"; in that case ``api_token``
    is ignored as well.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    api_token: SecretStr = SecretStr("")
    repositories: list[str] = Field(
        default_factory=list,
        description="FishEye repository names to re-index on push",
    )

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return _strip_url(v)

    @field_validator("repositories", mode="before")
    @classmethod
    def parse_repositories(cls, v: Any) -> Any:
        """Accept a comma separated string as well as a list.

        Names are stripped and deduplicated, keeping first-seen order.
        """
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            names = (name.strip() if isinstance(name, str) else name for name in v)
            return list(dict.fromkeys(name for name in names if name))
        return v


@dataclass(frozen=True)
class ClientConfig:
    """Effective settings used by one FisheyeClient."""

    base_url: str
    api_token: str = dataclass_field(default="", repr=False)
    username: str | None = None
    password: str | None = dataclass_field(default=None, repr=False)

    @classmethod
    def from_global(cls, configuration: FisheyeGlobalConfig) -> "ClientConfig":
        password = configuration.password
        return cls(
            base_url=configuration.url,
            api_token=configuration.api_token.get_secret_value(),
            username=configuration.username,
            password=password.get_secret_value() if password is not None else None,
        )

    def with_credentials(self, username: str | None, password: str | None) -> "ClientConfig":
        return replace(self, username=username, password=password)


def merge_config(base: ClientConfig, override: FisheyeRepositoryConfig) -> ClientConfig:
    """Apply repository-scoped settings on top of ``base``.

    A non-empty override URL replaces both the base URL and the API token.
    An empty one leaves ``base`` untouched. Credentials are never merged.

    Args:
        base: Current effective configuration
        override: Repository configuration

    Returns:
        The effective ClientConfig (``base`` itself when nothing changes).
    """
    if not override.url:
        return base

    logger.debug("fisheye_config_override", extra={"base_url": override.url})
    return replace(
        base,
        base_url=override.url,
        api_token=override.api_token.get_secret_value(),
    )


@lru_cache(maxsize=1)
def get_config() -> FisheyeGlobalConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return the
    cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return FisheyeGlobalConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
