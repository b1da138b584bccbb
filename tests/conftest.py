"""Shared fixtures for flexprice tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

_FLEXPRICE_ENV = (
    "FLEXPRICE_API_URL",
    "FLEXPRICE_API_KEY",
    "FLEXPRICE_ENVIRONMENT_ID",
    "FLEXPRICE_DEBUG",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temp dir, run from an empty cwd, drop FLEXPRICE_* vars."""
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    for name in _FLEXPRICE_ENV:
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture()
def creds_path(isolated_env: Path) -> Path:
    """Return the credentials.json path inside the temp home."""
    return isolated_env / ".flexprice" / "credentials.json"


def write_credentials(path: Path, data) -> None:
    """Write a credentials file for testing (raw, bypassing the store)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        path.write_text(data)
    else:
        path.write_text(json.dumps(data, indent=2))
