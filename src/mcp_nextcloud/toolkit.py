"""Tool catalog composed from independently declared tool modules.

Each ``ToolModule`` contributes a slice of the catalog. ``ToolCatalog`` keeps
the modules in registration order: listing concatenates their tools, and a
call goes to the first module that owns the requested name. Name clashes are
logged but not rejected, so a later module can never shadow an earlier one.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from mcp.types import Tool
from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from .errors import NotFoundError, TransportError
from .models import ToolResult

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


def _validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "(root)",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """One named tool: its input shape and the handler behind it."""

    name: str
    description: str
    args_model: type[BaseModel]
    handler: Handler

    def as_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.args_model.model_json_schema(),
        )

    async def invoke(self, arguments: dict[str, Any] | None) -> ToolResult:
        """Validate, run the handler and wrap whatever happens in a ``ToolResult``."""
        try:
            args = self.args_model.model_validate(arguments or {})
        except ValidationError as exc:
            details = _validation_details(exc)
            message = "Invalid arguments: " + "; ".join(
                f"{d['field']}: {d['message']}" for d in details
            )
            logger.warning("Tool %s rejected arguments: %s", self.name, message)
            return ToolResult.fail(message, code="validation_error", details=details)

        try:
            payload = await self.handler(args)
        except NotFoundError as exc:
            logger.warning("Tool %s: %s", self.name, exc)
            return ToolResult.fail(str(exc), code="not_found")
        except TransportError as exc:
            logger.warning("Tool %s: %s", self.name, exc)
            return ToolResult.fail(str(exc), code="transport_error")
        except ValueError as exc:
            logger.warning("Tool %s: %s", self.name, exc)
            return ToolResult.fail(str(exc), code="validation_error")
        except Exception as exc:
            logger.exception("Unexpected error in tool %s", self.name)
            return ToolResult.fail(f"Internal error: {exc}", code="internal_error")

        return ToolResult.ok(to_jsonable_python(payload, by_alias=True, exclude_none=True))


@dataclass(frozen=True, slots=True)
class ToolModule:
    """A named group of tools registered together."""

    name: str
    tools: tuple[ToolSpec, ...]

    @property
    def owned_names(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.tools)

    def get(self, name: str) -> ToolSpec | None:
        for spec in self.tools:
            if spec.name == name:
                return spec
        return None

    def list_tools(self) -> list[Tool]:
        return [spec.as_tool() for spec in self.tools]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult | None:
        """Handle ``name`` if this module owns it, otherwise return ``None``."""
        spec = self.get(name)
        if spec is None:
            return None
        return await spec.invoke(arguments)


class ToolCatalog:
    """Ordered registrations behind one list/call surface."""

    def __init__(self, modules: Iterable[ToolModule] = ()) -> None:
        self._modules: list[ToolModule] = []
        for module in modules:
            self.register(module)

    @property
    def modules(self) -> tuple[ToolModule, ...]:
        return tuple(self._modules)

    def register(self, module: ToolModule) -> None:
        for earlier in self._modules:
            clash = module.owned_names & earlier.owned_names
            if clash:
                # TODO: decide whether duplicate names should be rejected here
                # once every tool module is known not to depend on shadowing.
                logger.warning(
                    "Module %s declares tools already owned by %s (%s); calls stay with %s",
                    module.name,
                    earlier.name,
                    ", ".join(sorted(clash)),
                    earlier.name,
                )
        self._modules.append(module)
        logger.debug("Registered tool module %s (%d tools)", module.name, len(module.tools))

    def list_tools(self) -> list[Tool]:
        return [tool for module in self._modules for tool in module.list_tools()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        logger.info("Tool called: %s", name)
        for module in self._modules:
            result = await module.call_tool(name, arguments)
            if result is not None:
                return result
        logger.warning("Unknown tool: %s", name)
        return ToolResult.fail(f"Unknown tool: {name}", code="unknown_tool")
