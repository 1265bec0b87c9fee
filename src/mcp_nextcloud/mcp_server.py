"""MCP server definition: the composed Nextcloud tool catalog behind list/call."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .calendar_tools import calendar_tools
from .contact_tools import contact_tools
from .file_tools import file_tools
from .nextcloud_client import NextcloudClient
from .settings import Settings
from .toolkit import ToolCatalog

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    settings: Settings
    nextcloud: NextcloudClient
    catalog: ToolCatalog


def build_catalog(client: NextcloudClient) -> ToolCatalog:
    """Files, then calendar, then contacts; earlier modules win name clashes."""
    return ToolCatalog([file_tools(client), calendar_tools(client), contact_tools(client)])


def create_mcp_server(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Server:
    @asynccontextmanager
    async def lifespan(_: Server) -> AsyncIterator[AppContext]:
        nextcloud = NextcloudClient(
            base_url=str(settings.nextcloud_url),
            username=settings.nextcloud_username,
            password=settings.nextcloud_password,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )
        try:
            yield AppContext(
                settings=settings, nextcloud=nextcloud, catalog=build_catalog(nextcloud)
            )
        finally:
            await nextcloud.aclose()

    server = Server(
        "nextcloud-mcp",
        instructions=(
            "Access a Nextcloud instance: files over WebDAV, calendars over CalDAV and "
            "contacts over CardDAV. Every tool returns a JSON envelope with 'success' "
            "and either 'data' or 'error'."
        ),
        lifespan=lifespan,
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        app: AppContext = server.request_context.lifespan_context
        return app.catalog.list_tools()

    # Arguments are validated by the catalog, which reports field-level errors.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        app: AppContext = server.request_context.lifespan_context
        result = await app.catalog.call_tool(name, arguments)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.to_text())],
            isError=not result.success,
        )

    return server


async def run_stdio(settings: Settings) -> None:
    server = create_mcp_server(settings)
    logger.info("Nextcloud MCP server running on stdio for %s", settings.nextcloud_url)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
