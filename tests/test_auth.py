"""Tests for the credentials store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from flexprice import auth
from flexprice.auth import DEFAULT_API_URL, Credentials
from flexprice.errors import CorruptCredentialsError

from .conftest import write_credentials


class TestLoadSave:
    """Credential persistence tests."""

    def test_load_missing_returns_none(self, creds_path: Path) -> None:
        assert not creds_path.exists()
        assert auth.load_credentials() is None

    def test_save_and_load_roundtrip(self, creds_path: Path) -> None:
        creds = Credentials(
            api_url="https://api.flexprice.test",
            token="jwt-tok",
            tenant_id="tenant_1",
            user_id="user_1",
            environment_id="env_1",
        )
        auth.save_credentials(creds)

        assert auth.load_credentials() == creds

    def test_save_writes_to_fixed_path(self, creds_path: Path) -> None:
        path = auth.save_credentials(Credentials(api_key="k"))
        assert path == creds_path
        assert json.loads(creds_path.read_text())["api_key"] == "k"

    def test_clear_then_load_is_none(self, creds_path: Path) -> None:
        auth.save_credentials(Credentials(api_key="fp_live_1234"))
        assert auth.clear_credentials() is True
        assert auth.load_credentials() is None

    def test_clear_nonexistent_is_noop(self, creds_path: Path) -> None:
        assert auth.clear_credentials() is False

    def test_save_overwrites_previous_record(self, creds_path: Path) -> None:
        auth.save_credentials(Credentials(token="old"))
        auth.save_credentials(Credentials(api_key="new"))
        loaded = auth.load_credentials()
        assert loaded is not None
        assert loaded.api_key == "new"
        assert loaded.token is None

    def test_no_temp_files_left_behind(self, creds_path: Path) -> None:
        auth.save_credentials(Credentials(api_key="k"))
        assert [p.name for p in creds_path.parent.iterdir()] == ["credentials.json"]

    def test_file_permissions(self, creds_path: Path) -> None:
        auth.save_credentials(Credentials(api_key="secret"))
        assert creds_path.stat().st_mode & 0o777 == 0o600
        assert creds_path.parent.stat().st_mode & 0o777 == 0o700

    def test_load_restricts_loose_permissions(self, creds_path: Path) -> None:
        write_credentials(creds_path, {"api_key": "fp_live_1234"})
        creds_path.chmod(0o644)

        loaded = auth.load_credentials()

        assert loaded is not None
        assert creds_path.stat().st_mode & 0o777 == 0o600

    def test_missing_api_url_falls_back_to_default(self, creds_path: Path) -> None:
        write_credentials(creds_path, {"api_key": "k"})
        loaded = auth.load_credentials()
        assert loaded is not None
        assert loaded.api_url == DEFAULT_API_URL

    def test_legacy_auth_token_field(self, creds_path: Path) -> None:
        write_credentials(creds_path, {"api_url": "http://x.test", "auth_token": "legacy"})
        loaded = auth.load_credentials()
        assert loaded is not None
        assert loaded.token == "legacy"

    def test_unknown_fields_ignored(self, creds_path: Path) -> None:
        write_credentials(creds_path, {"api_key": "k", "theme": "dark"})
        loaded = auth.load_credentials()
        assert loaded is not None
        assert loaded.api_key == "k"


class TestCorrupt:
    """A broken file is an error, never an empty result."""

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "",
            "[1, 2, 3]",
            '"just a string"',
            '{"api_key": 12345}',
        ],
    )
    def test_corrupt_file_raises(self, creds_path: Path, content: str) -> None:
        write_credentials(creds_path, content)
        with pytest.raises(CorruptCredentialsError, match="auth login"):
            auth.load_credentials()

    def test_corrupt_error_names_path(self, creds_path: Path) -> None:
        write_credentials(creds_path, "{")
        with pytest.raises(CorruptCredentialsError) as exc_info:
            auth.load_credentials()
        assert exc_info.value.path == creds_path


class TestCredentials:
    def test_api_key_signs_when_both_present(self) -> None:
        creds = Credentials(api_key="key", token="tok")
        assert creds.auth_header() == ("x-api-key", "key")
        assert creds.auth_kind == "API Key"

    def test_token_signs_as_bearer(self) -> None:
        creds = Credentials(token="tok")
        assert creds.auth_header() == ("Authorization", "Bearer tok")
        assert creds.auth_kind == "JWT Token"

    def test_unauthenticated(self) -> None:
        creds = Credentials()
        assert creds.is_authenticated is False
        assert creds.auth_header() is None


class TestMaskSecret:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("fp_test_123", "fp_t..._123"),
            ("abcdefghij", "abcd...ghij"),
            ("short", "*****"),
            ("12345678", "********"),
            (None, "(not set)"),
        ],
    )
    def test_mask(self, value, expected: str) -> None:
        assert auth.mask_secret(value) == expected
