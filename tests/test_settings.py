from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcp_nextcloud.__main__ import main
from mcp_nextcloud.settings import Settings

REQUIRED = ("NEXTCLOUD_URL", "NEXTCLOUD_USERNAME", "NEXTCLOUD_PASSWORD")


def test_settings_load_from_env(monkeypatch) -> None:
    monkeypatch.setenv("NEXTCLOUD_URL", "https://cloud.example.com")
    monkeypatch.setenv("NEXTCLOUD_USERNAME", "alice")
    monkeypatch.setenv("NEXTCLOUD_PASSWORD", "secret")
    monkeypatch.setenv("MCP_PORT", "8080")
    s = Settings(_env_file=None)
    assert str(s.nextcloud_url).startswith("https://cloud.example.com")
    assert s.nextcloud_username == "alice"
    assert s.nextcloud_password == "secret"
    assert s.mcp_port == 8080
    assert s.mcp_api_key is None
    assert s.http_timeout_seconds is None


def test_settings_require_nextcloud_credentials(monkeypatch) -> None:
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_missing_configuration_is_fatal(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(SystemExit) as excinfo:
        main(["--transport", "stdio"])
    message = str(excinfo.value.code)
    assert "NEXTCLOUD_URL" in message
    assert "app password" in message
