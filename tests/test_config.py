"""Tests for application settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, get_user_env_file


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self, settings):
        assert settings.signing_service == "s3"
        assert settings.signing_region == "us-east-1"
        assert settings.query_timeout_seconds is None
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.push_url is None
        assert settings.push_timeout_seconds == 5.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("UTAPI_SIGNING_REGION", "eu-west-1")
        monkeypatch.setenv("UTAPI_QUERY_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("UTAPI_LOG_FORMAT", "json")

        settings = AppSettings(_env_file=None)

        assert settings.signing_region == "eu-west-1"
        assert settings.query_timeout_seconds == 30.0
        assert settings.log_format == "json"

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("UTAPI_PUSH_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("UTAPI_PUSH_URL=http://metering.local/push\n", encoding="utf-8")

        settings = AppSettings(_env_file=env_file)

        assert settings.push_url == "http://metering.local/push"

    def test_rejects_invalid_values(self, monkeypatch):
        monkeypatch.setenv("UTAPI_LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_rejects_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("UTAPI_PUSH_TIMEOUT_SECONDS", "0")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)


class TestUserConfigDir:
    """Tests for the per-user configuration directory."""

    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setattr("core.config.sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_user_config_dir() == tmp_path / "utapi-tools"
        assert get_user_env_file() == tmp_path / "utapi-tools" / ".env"

    def test_default_linux_location(self, monkeypatch):
        monkeypatch.setattr("core.config.sys.platform", "linux")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

        assert get_user_config_dir() == Path.home() / ".config" / "utapi-tools"
