"""Tool layer exposing search and fetch to a tool-invocation consumer."""

from websearch.tools.base import BaseTool, ToolResult
from websearch.tools.registry import ToolRegistry, build_default_registry
from websearch.tools.web import (
    FetchWebPageParams,
    FetchWebPageTool,
    WebSearchParams,
    WebSearchTool,
)

__all__ = [
    # Base classes
    "BaseTool",
    "ToolResult",
    # Registry
    "ToolRegistry",
    "build_default_registry",
    # Tools
    "WebSearchTool",
    "WebSearchParams",
    "FetchWebPageTool",
    "FetchWebPageParams",
]
