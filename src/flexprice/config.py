"""Layered configuration resolution.

Every value the CLI needs is resolved from, in strict priority order:

    CLI flag → environment variable → .env in the cwd → credentials file → default

Each resolved value remembers which layer it came from (its provenance) so
``flexprice config`` and ``flexprice auth status`` can explain themselves.

The session ``token`` (and the ``tenant_id`` / ``user_id`` that come with
it) is session state rather than configuration: it is only ever read from
the credentials file.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from . import auth
from .auth import DEFAULT_API_URL, Credentials
from .errors import ConfigError, NoApiUrlError

ENV_API_URL = "FLEXPRICE_API_URL"
ENV_API_KEY = "FLEXPRICE_API_KEY"
ENV_ENVIRONMENT_ID = "FLEXPRICE_ENVIRONMENT_ID"

DOTENV_FILE_NAME = ".env"


class Source(enum.Enum):
    """Configuration layer a value was taken from."""

    CLI_FLAG = "flag"
    ENV_VAR = "env"
    DOTENV_FILE = ".env"
    CREDENTIALS_FILE = "credentials file"
    DEFAULT = "default"


@dataclass(frozen=True)
class Resolved:
    value: Optional[str]
    source: Source


# field name → (env var / .env key, accepted from CLI flags)
_LAYERED_FIELDS: dict[str, tuple[str, bool]] = {
    "api_url": (ENV_API_URL, True),
    "api_key": (ENV_API_KEY, True),
    "environment_id": (ENV_ENVIRONMENT_ID, False),
}
_SESSION_FIELDS = ("token", "tenant_id", "user_id")
_DEFAULTS: dict[str, Optional[str]] = {"api_url": DEFAULT_API_URL}


@dataclass(frozen=True)
class ResolvedConfig:
    """Effective configuration plus per-field provenance."""

    values: Mapping[str, Resolved] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Resolved:
        return self.values[name]

    def source(self, name: str) -> Source:
        return self.values[name].source

    @property
    def credentials(self) -> Credentials:
        return Credentials(**{name: r.value for name, r in self.values.items()})

    @property
    def api_url(self) -> str:
        return self.values["api_url"].value or ""

    @property
    def api_key(self) -> Optional[str]:
        return self.values["api_key"].value

    @property
    def token(self) -> Optional[str]:
        return self.values["token"].value

    @property
    def active_source(self) -> Optional[Source]:
        """Provenance of whichever credential signs requests."""
        if self.api_key:
            return self.source("api_key")
        if self.token:
            return self.source("token")
        return None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _first_non_empty(candidates: list[tuple[Source, Optional[str]]]) -> Resolved:
    for source, raw in candidates:
        value = _clean(raw)
        if value is not None:
            return Resolved(value, source)
    return Resolved(None, Source.DEFAULT)


def resolve(
    cli_flags: Mapping[str, Optional[str]],
    env: Mapping[str, str],
    dotenv: Mapping[str, Optional[str]],
    stored: Optional[Credentials],
) -> ResolvedConfig:
    """Merge the four layers into a ResolvedConfig. Pure; no I/O.

    Raises:
        NoApiUrlError: if no layer, including the default, yields a URL.
        ConfigError: if the URL is not http(s).
    """
    stored_values = stored.to_dict() if stored is not None else {}
    values: dict[str, Resolved] = {}

    for name, (env_key, from_flags) in _LAYERED_FIELDS.items():
        candidates: list[tuple[Source, Optional[str]]] = []
        if from_flags:
            candidates.append((Source.CLI_FLAG, cli_flags.get(name)))
        candidates += [
            (Source.ENV_VAR, env.get(env_key)),
            (Source.DOTENV_FILE, dotenv.get(env_key)),
            (Source.CREDENTIALS_FILE, stored_values.get(name)),
            (Source.DEFAULT, _DEFAULTS.get(name)),
        ]
        values[name] = _first_non_empty(candidates)

    for name in _SESSION_FIELDS:
        values[name] = _first_non_empty([(Source.CREDENTIALS_FILE, stored_values.get(name))])

    values["api_url"] = Resolved(normalize_api_url(values["api_url"].value), values["api_url"].source)
    return ResolvedConfig(values)


def normalize_api_url(url: Optional[str]) -> str:
    """Validate an API base URL and strip trailing slashes."""
    url = _clean(url)
    if not url:
        raise NoApiUrlError()
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid API URL {url!r}: expected an http:// or https:// URL.")
    return url.rstrip("/")


# ── Real inputs ────────────────────────────────────────────


def read_dotenv(directory: Path | None = None) -> dict[str, Optional[str]]:
    """Parse ``.env`` in *directory* (default: cwd) without touching os.environ."""
    path = (directory or Path.cwd()) / DOTENV_FILE_NAME
    if not path.is_file():
        return {}
    return dict(dotenv_values(path))


def load_config(
    api_url: str | None = None,
    api_key: str | None = None,
    *,
    use_stored: bool = True,
) -> ResolvedConfig:
    """Resolve configuration for this process from flags, env, .env and disk.

    Raises CorruptCredentialsError if the credentials file is unreadable.
    ``use_stored=False`` skips the file entirely (used by commands that are
    about to overwrite it).
    """
    return resolve(
        cli_flags={"api_url": api_url, "api_key": api_key},
        env=os.environ,
        dotenv=read_dotenv(),
        stored=auth.load_credentials() if use_stored else None,
    )
