"""CLI entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn
from pydantic import ValidationError

from .asgi import create_app
from .mcp_server import run_stdio
from .settings import Settings

CONFIG_HELP = """\
Required environment variables:
  NEXTCLOUD_URL - Base URL of your Nextcloud instance (e.g., https://cloud.example.com)
  NEXTCLOUD_USERNAME - Your Nextcloud username
  NEXTCLOUD_PASSWORD - Your Nextcloud app password

To create an app password, open your Nextcloud settings, go to Security
and create a new app password."""


def _config_error(exc: ValidationError) -> str:
    problems = "\n".join(
        f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return f"Error: missing or invalid configuration:\n{problems}\n\n{CONFIG_HELP}"


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="mcp-nextcloud", description="Nextcloud MCP server")
    parser.add_argument("--transport", choices=("stdio", "http"), default="stdio")
    parser.add_argument("--port", type=int, help="HTTP port (overrides MCP_PORT)")
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        sys.exit(_config_error(exc))

    # stdout carries the stdio protocol.
    logging.basicConfig(
        level=settings.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.transport == "http":
        uvicorn.run(
            create_app(settings),
            host=settings.mcp_host,
            port=args.port or settings.mcp_port,
            log_level=settings.log_level.lower(),
        )
    else:
        asyncio.run(run_stdio(settings))


if __name__ == "__main__":
    main()
