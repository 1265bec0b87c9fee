"""Application settings (env/.env)."""

from __future__ import annotations

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the MCP server and the Nextcloud instance it talks to."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    nextcloud_url: AnyHttpUrl = Field(alias="NEXTCLOUD_URL")
    nextcloud_username: str = Field(alias="NEXTCLOUD_USERNAME", min_length=1)
    nextcloud_password: str = Field(alias="NEXTCLOUD_PASSWORD", min_length=1)

    mcp_api_key: str | None = Field(default=None, alias="MCP_API_KEY")
    mcp_host: str = Field(default="127.0.0.1", alias="MCP_HOST")
    mcp_port: int = Field(default=3000, alias="MCP_PORT", ge=1, le=65535)

    # Unset means httpx's own default timeout applies.
    http_timeout_seconds: float | None = Field(
        default=None,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
