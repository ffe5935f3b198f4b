"""FishEye/Crucible REST client.

Provides:
- Configuration management with environment overrides
- Incremental index trigger for a single repository
- Paged listing of all repositories on the server
- Push hook that re-indexes mapped repositories

Python Version: 3.10+ required
"""

# Logging Configuration - configure before other imports
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .__version__ import __version__
from .client import FisheyeClient
from .config import (
    ClientConfig,
    FisheyeGlobalConfig,
    FisheyeRepositoryConfig,
    get_config,
    merge_config,
    reset_config,
)
from .exceptions import (
    FisheyeClientError,
    FisheyeTransportError,
    InvalidArgumentError,
)
from .hook import FisheyeHook
from .models import Page, Repository

__all__ = [
    "ClientConfig",
    "FisheyeClient",
    "FisheyeClientError",
    "FisheyeGlobalConfig",
    "FisheyeHook",
    "FisheyeRepositoryConfig",
    "FisheyeTransportError",
    "InvalidArgumentError",
    "Page",
    "Repository",
    "StructuredFormatter",
    "__version__",
    "configure_logging",
    "get_config",
    "merge_config",
    "reset_config",
]
