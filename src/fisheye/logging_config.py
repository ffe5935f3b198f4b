"""Logging setup for the FishEye client.

Every module logs an event name as the message and puts the details in
``extra``, e.g. ``fisheye_index_failed`` with ``repository`` and
``status_code``, or ``fisheye_list_repositories_page`` with the page offsets.
Loggers live under ``fisheye`` (``fisheye.client``, ``fisheye.hook``,
``fisheye.config``); FISHEYE_LOG_LEVEL and FISHEYE_LOG_FORMAT pick the level
and the output format.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

# Keys redacted from log context; the client logs URLs and status codes, never headers.
SENSITIVE_KEYS = {
    "password",
    "token",
    "api_token",
    "secret",
    "apikey",
    "api_key",
    "authorization",
    "credential",
    "auth",
    "key",
}

ROOT_LOGGER_NAME = "fisheye"

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def event_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra`` fields of ``record`` with secrets redacted."""
    return {
        k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
        for k, v in record.__dict__.items()
        if k not in _RECORD_FIELDS and not k.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Render one client event per line as JSON.

    A failed index trigger comes out as::

        {"timestamp": "...Z", "level": "WARNING", "logger": "fisheye.client",
         "message": "fisheye_index_failed",
         "context": {"repository": "core", "status_code": 404}}

    ``context`` holds the record's ``extra`` fields. Values under keys such as
    ``api_token`` or ``password`` are replaced with ``[REDACTED]`` so a
    misplaced ``extra`` cannot leak the API key or Basic Auth credentials.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = event_context(record)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text output for FISHEYE_LOG_FORMAT=text.

    The event context follows the event name as ``key=value`` pairs, e.g.
    ``fisheye_index_failed repository='core' status_code=404``.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = event_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v!r}" for k, v in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def configure_logging(level: Optional[str] = None) -> None:
    """Attach one stderr handler to the ``fisheye`` logger.

    Safe to call repeatedly. Records do not propagate to the root logger.

    Args:
        level: Log level override. Defaults to FISHEYE_LOG_LEVEL, then INFO.

    Environment Variables:
        FISHEYE_LOG_LEVEL: DEBUG shows every listing page; WARNING keeps only
            failed index triggers and transport errors. Default: INFO
        FISHEYE_LOG_FORMAT: json or text. Default: json
    """
    if level is None:
        level = os.getenv("FISHEYE_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    log_format = os.getenv("FISHEYE_LOG_FORMAT", "json").lower()

    if log_format == "text":
        formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Idempotent: repeated calls must not stack handlers
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
