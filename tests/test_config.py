"""Tests for layered configuration resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from flexprice import auth
from flexprice.auth import DEFAULT_API_URL, Credentials
from flexprice.config import Source, load_config, normalize_api_url, read_dotenv, resolve
from flexprice.errors import ConfigError, CorruptCredentialsError

from .conftest import write_credentials

FLAG = {"api_url": "https://flag.test", "api_key": "key-flag"}
ENV = {"FLEXPRICE_API_URL": "https://env.test", "FLEXPRICE_API_KEY": "key-env"}
DOTENV = {"FLEXPRICE_API_URL": "https://dotenv.test", "FLEXPRICE_API_KEY": "key-dotenv"}
STORED = Credentials(api_url="https://file.test", api_key="key-file")


# ── Precedence ─────────────────────────────────────────────


@pytest.mark.parametrize(
    ("flags", "env", "dotenv", "stored", "url", "key", "source"),
    [
        (FLAG, ENV, DOTENV, STORED, "https://flag.test", "key-flag", Source.CLI_FLAG),
        ({}, ENV, DOTENV, STORED, "https://env.test", "key-env", Source.ENV_VAR),
        ({}, {}, DOTENV, STORED, "https://dotenv.test", "key-dotenv", Source.DOTENV_FILE),
        ({}, {}, {}, STORED, "https://file.test", "key-file", Source.CREDENTIALS_FILE),
    ],
    ids=["flag", "env", "dotenv", "file"],
)
def test_highest_priority_layer_wins(flags, env, dotenv, stored, url, key, source) -> None:
    config = resolve(flags, env, dotenv, stored)
    assert config.api_url == url
    assert config.api_key == key
    assert config.source("api_url") is source
    assert config.source("api_key") is source


def test_default_when_no_layer_sets_url() -> None:
    config = resolve({}, {}, {}, None)
    assert config.api_url == DEFAULT_API_URL
    assert config.source("api_url") is Source.DEFAULT
    assert config.api_key is None


def test_fields_resolve_independently() -> None:
    config = resolve(
        {"api_key": "key-flag"},
        {"FLEXPRICE_ENVIRONMENT_ID": "env_env"},
        {"FLEXPRICE_API_URL": "https://dotenv.test"},
        STORED,
    )
    assert config.api_url == "https://dotenv.test"
    assert config.api_key == "key-flag"
    assert config["environment_id"].value == "env_env"
    assert config.source("environment_id") is Source.ENV_VAR


def test_empty_values_fall_through() -> None:
    config = resolve(
        {"api_url": "", "api_key": None},
        {"FLEXPRICE_API_URL": "   ", "FLEXPRICE_API_KEY": ""},
        {"FLEXPRICE_API_URL": None},
        STORED,
    )
    assert config.api_url == "https://file.test"
    assert config.source("api_url") is Source.CREDENTIALS_FILE


def test_environment_id_is_not_a_flag() -> None:
    config = resolve({"environment_id": "nope"}, {}, {}, None)
    assert config["environment_id"].value is None


def test_token_only_comes_from_credentials_file() -> None:
    stored = Credentials(token="jwt", tenant_id="t1", user_id="u1")
    config = resolve(
        {"token": "flag-token"},
        {"FLEXPRICE_TOKEN": "env-token"},
        {"FLEXPRICE_TOKEN": "dotenv-token"},
        stored,
    )
    assert config.token == "jwt"
    assert config.source("token") is Source.CREDENTIALS_FILE
    assert config["tenant_id"].value == "t1"
    assert config["user_id"].value == "u1"


def test_trailing_slash_stripped() -> None:
    config = resolve({"api_url": "https://x.test/"}, {}, {}, None)
    assert config.api_url == "https://x.test"


def test_invalid_url_rejected() -> None:
    with pytest.raises(ConfigError, match="Invalid API URL"):
        resolve({"api_url": "ftp://x.test"}, {}, {}, None)


def test_normalize_rejects_empty() -> None:
    with pytest.raises(ConfigError, match="No API URL"):
        normalize_api_url("  ")


# ── Active credential ──────────────────────────────────────


def test_env_api_key_beats_stored_token() -> None:
    config = resolve({}, {"FLEXPRICE_API_KEY": "key-env"}, {}, Credentials(token="jwt"))
    creds = config.credentials
    assert creds.auth_header() == ("x-api-key", "key-env")
    assert config.active_source is Source.ENV_VAR


def test_stored_token_is_active_without_api_key() -> None:
    config = resolve({}, {}, {}, Credentials(token="jwt"))
    assert config.credentials.auth_header() == ("Authorization", "Bearer jwt")
    assert config.active_source is Source.CREDENTIALS_FILE


def test_no_active_source_when_unauthenticated() -> None:
    assert resolve({}, {}, {}, None).active_source is None


# ── Real inputs ────────────────────────────────────────────


class TestLoadConfig:
    def test_env_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLEXPRICE_API_URL", "https://x.test")
        config = load_config()
        assert config.api_url == "https://x.test"
        assert config.token is None
        assert config.api_key is None

    def test_dotenv_in_cwd(self) -> None:
        Path(".env").write_text(
            "# local overrides\n"
            "FLEXPRICE_API_URL=https://dotenv.test\n"
            'FLEXPRICE_API_KEY="fp_dotenv"\n'
        )
        config = load_config()
        assert config.api_url == "https://dotenv.test"
        assert config.api_key == "fp_dotenv"
        assert config.source("api_key") is Source.DOTENV_FILE

    def test_dotenv_does_not_touch_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import os

        Path(".env").write_text("FLEXPRICE_API_KEY=fp_dotenv\n")
        load_config()
        assert "FLEXPRICE_API_KEY" not in os.environ

    def test_env_beats_dotenv(self, monkeypatch: pytest.MonkeyPatch) -> None:
        Path(".env").write_text("FLEXPRICE_API_URL=https://dotenv.test\n")
        monkeypatch.setenv("FLEXPRICE_API_URL", "https://env.test")
        assert load_config().api_url == "https://env.test"

    def test_flag_beats_everything(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLEXPRICE_API_KEY", "key-env")
        auth.save_credentials(Credentials(api_key="key-file"))
        config = load_config(api_key="key-flag")
        assert config.api_key == "key-flag"
        assert config.source("api_key") is Source.CLI_FLAG

    def test_reads_credentials_file(self) -> None:
        auth.save_credentials(Credentials(api_url="https://file.test", token="jwt"))
        config = load_config()
        assert config.api_url == "https://file.test"
        assert config.token == "jwt"

    def test_corrupt_file_propagates(self, creds_path: Path) -> None:
        write_credentials(creds_path, "{oops")
        with pytest.raises(CorruptCredentialsError):
            load_config()

    def test_corrupt_file_skipped_when_not_used(self, creds_path: Path) -> None:
        write_credentials(creds_path, "{oops")
        assert load_config(use_stored=False).api_url == DEFAULT_API_URL

    def test_read_dotenv_missing_file(self, tmp_path: Path) -> None:
        assert read_dotenv(tmp_path) == {}
