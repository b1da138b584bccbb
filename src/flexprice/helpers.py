"""Debug logging shared by the HTTP client and the dashboard.

Nothing is logged unless ``FLEXPRICE_DEBUG`` is set, in which case records go
to ``~/.flexprice/debug.log``.  Logging never targets the terminal: the
dashboard owns it while running.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from . import auth

DEBUG_ENV = "FLEXPRICE_DEBUG"
DEBUG_LOG_NAME = "debug.log"

_SECRET_HEADERS = {"authorization", "x-api-key"}

logger = logging.getLogger("flexprice.http")


def configure_logging() -> None:
    """Attach a file handler to the ``flexprice`` logger when debugging."""
    if not os.environ.get(DEBUG_ENV):
        return
    root = logging.getLogger("flexprice")
    if root.handlers:
        return
    log_dir = auth.credentials_path().parent
    log_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / DEBUG_LOG_NAME, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def redact_headers(headers: dict[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {
        k: auth.mask_secret(v) if k.lower() in _SECRET_HEADERS else v
        for k, v in headers.items()
    }


def http_debug_log(source: str, event: str, **fields: Any) -> None:
    """Emit one structured DEBUG line describing an HTTP exchange."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if "headers" in fields:
        fields["headers"] = redact_headers(fields["headers"])
    fields.pop("payload", None)  # may carry passwords
    logger.debug("%s %s %s", source, event, json.dumps(fields, default=str, sort_keys=True))
