"""Credential store — ~/.flexprice/credentials.json.

The file holds a single JSON object::

    {
      "api_url": "http://localhost:8080",
      "api_key": null,
      "token": "eyJ...",
      "tenant_id": "tenant_01",
      "user_id": "user_01",
      "environment_id": null
    }

``token`` is only ever written by ``flexprice auth login``; ``api_key`` by
``flexprice auth set-api-key``.  The file carries secrets, so it is always
written with mode 0600 inside a 0700 directory, via a temp file that is
renamed over the target so a crash never leaves a half-written record.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .errors import CorruptCredentialsError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080"
CREDENTIALS_DIR_NAME = ".flexprice"
CREDENTIALS_FILE_NAME = "credentials.json"

# Older releases stored the session token under this key.
_LEGACY_FIELDS = {"auth_token": "token"}


@dataclass(frozen=True)
class Credentials:
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    token: Optional[str] = None
    tenant_id: Optional[str] = None
    user_id: Optional[str] = None
    environment_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api_key or self.token)

    @property
    def auth_kind(self) -> str:
        """Human label for the active auth material."""
        if self.api_key:
            return "API Key"
        if self.token:
            return "JWT Token"
        return "(none)"

    def auth_header(self) -> tuple[str, str] | None:
        """Return the (name, value) header that signs requests, or None.

        The api key wins when both are present; a record written by the CLI
        never carries both.
        """
        if self.api_key:
            return ("x-api-key", self.api_key)
        if self.token:
            return ("Authorization", f"Bearer {self.token}")
        return None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Credentials":
        """Build from a decoded JSON object; raises ValueError on bad types."""
        known = {f.name for f in fields(cls)}
        values: dict = {}
        for key, value in data.items():
            key = _LEGACY_FIELDS.get(key, key)
            if key not in known or value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string")
            values[key] = value
        if not values.get("api_url"):
            values["api_url"] = DEFAULT_API_URL
        return cls(**values)


# ── Paths ──────────────────────────────────────────────────


def _credentials_dir() -> Path:
    return Path.home() / CREDENTIALS_DIR_NAME


def _credentials_path() -> Path:
    return _credentials_dir() / CREDENTIALS_FILE_NAME


def credentials_path() -> Path:
    """Public accessor used by the CLI for display."""
    return _credentials_path()


# ── Load / save / clear ────────────────────────────────────


def load_credentials() -> Optional[Credentials]:
    """Read the credentials file.

    Returns None when the file does not exist.  Raises
    ``CorruptCredentialsError`` when it exists but cannot be decoded.
    """
    path = _credentials_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise CorruptCredentialsError(path, e.strerror or str(e)) from e
    _restrict_mode(path)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptCredentialsError(path, f"invalid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise CorruptCredentialsError(path, "expected a JSON object")

    try:
        return Credentials.from_dict(data)
    except ValueError as e:
        raise CorruptCredentialsError(path, str(e)) from e


def _restrict_mode(path: Path) -> None:
    """Drop group/other access from a credentials file written elsewhere."""
    mode = path.stat().st_mode & 0o777
    if not mode & 0o077:
        return
    try:
        os.chmod(path, 0o600)
    except OSError as e:
        logger.warning("credentials file %s has mode %o and could not be restricted: %s", path, mode, e)
    else:
        logger.warning("credentials file %s had mode %o; restricted to 600", path, mode)


def save_credentials(creds: Credentials) -> Path:
    """Atomically write *creds* with owner-only permissions."""
    directory = _credentials_dir()
    directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    path = directory / CREDENTIALS_FILE_NAME

    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".credentials-", suffix=".tmp")
    try:
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(creds.to_dict(), f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return path


def clear_credentials() -> bool:
    """Remove the credentials file. Returns True if one was removed."""
    try:
        _credentials_path().unlink()
    except FileNotFoundError:
        return False
    return True


# ── Display ────────────────────────────────────────────────


def mask_secret(value: Optional[str]) -> str:
    """Mask a secret for display: ``abcd...wxyz`` or all stars when short."""
    if value is None:
        return "(not set)"
    if len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "*" * len(value)
