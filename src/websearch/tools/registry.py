"""Name-indexed collection of tools."""

from typing import Any

from websearch.logging import get_logger
from websearch.service import WebSearchService
from websearch.tools.base import BaseTool, ToolResult
from websearch.tools.web import FetchWebPageTool, WebSearchTool

logger = get_logger("websearch.tools.registry")


class ToolRegistry:
    """Tools keyed by name, kept in registration order.

    Example:
        >>> registry = build_default_registry()
        >>> result = await registry.call("web_search", {"query": "python"})
    """

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Add a tool; names must be unique (ValueError otherwise)."""
        existing = self._tools.setdefault(tool.name, tool)
        if existing is not tool:
            raise ValueError(f"A tool named {tool.name!r} is already registered")
        logger.debug(f"Registered tool {tool.name}")

    def unregister(self, name: str) -> None:
        """Remove a tool; KeyError if there is none by that name."""
        try:
            del self._tools[name]
        except KeyError:
            raise KeyError(f"No tool named {name!r} is registered") from None
        logger.debug(f"Unregistered tool {name}")

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[BaseTool]:
        return [*self._tools.values()]

    def get_tool_names(self) -> list[str]:
        return [*self._tools]

    def get_schemas(self) -> list[dict[str, Any]]:
        return [tool.to_schema() for tool in self.list_tools()]

    async def call(self, name: str, raw_params: dict[str, Any]) -> ToolResult:
        """Dispatch to the named tool; unknown names give an error result."""
        if name not in self:
            logger.warning(f"Call to unknown tool {name}")
            return ToolResult.error_result(f"Unknown tool: {name}")
        return await self._tools[name].run(raw_params)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def build_default_registry(service: WebSearchService | None = None) -> ToolRegistry:
    """Registry with ``web_search`` and ``fetch_webpage`` sharing one service."""
    registry = ToolRegistry()
    for tool in (WebSearchTool(service), FetchWebPageTool(service)):
        registry.register(tool)
    return registry
