"""Tests for tool registry."""

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from websearch.tools.base import BaseTool, ToolResult
from websearch.tools.registry import ToolRegistry, build_default_registry


class DummyParams(BaseModel):
    """Dummy parameters for test tools."""

    value: str


class DummyTool(BaseTool):
    """Dummy tool for testing."""

    name = "dummy"
    description = "A dummy tool"
    parameters_schema = DummyParams

    async def execute(self, params):
        return ToolResult.success_result(data=params.value)


class AnotherDummyTool(BaseTool):
    """Another dummy tool for testing."""

    name = "another_dummy"
    description = "Another dummy tool"
    parameters_schema = DummyParams

    async def execute(self, params):
        return ToolResult.success_result(data=params.value.upper())


class TestToolRegistry:
    """Test ToolRegistry class."""

    def test_register_tool(self):
        """Test registering a tool."""
        registry = ToolRegistry()

        registry.register(DummyTool())

        assert "dummy" in registry
        assert len(registry) == 1

    def test_register_duplicate(self):
        """Test that registering duplicate tool raises error."""
        registry = ToolRegistry()
        registry.register(DummyTool())

        with pytest.raises(ValueError, match="already registered"):
            registry.register(DummyTool())

    def test_unregister_tool(self):
        """Test unregistering a tool."""
        registry = ToolRegistry()
        registry.register(DummyTool())

        registry.unregister("dummy")

        assert "dummy" not in registry

    def test_unregister_unknown(self):
        """Test that unregistering an unknown tool raises KeyError."""
        with pytest.raises(KeyError):
            ToolRegistry().unregister("missing")

    def test_get_and_list(self):
        """Test lookups and listings."""
        registry = ToolRegistry()
        dummy = DummyTool()
        registry.register(dummy)
        registry.register(AnotherDummyTool())

        assert registry.get("dummy") is dummy
        assert registry.get("missing") is None
        assert registry.get_tool_names() == ["dummy", "another_dummy"]
        assert len(registry.list_tools()) == 2

    def test_get_schemas(self):
        """Test schema export for every tool."""
        registry = ToolRegistry()
        registry.register(DummyTool())

        schemas = registry.get_schemas()

        assert schemas[0]["name"] == "dummy"
        assert schemas[0]["inputSchema"]["required"] == ["value"]

    @pytest.mark.asyncio
    async def test_call(self):
        """Test calling a tool by name."""
        registry = ToolRegistry()
        registry.register(AnotherDummyTool())

        result = await registry.call("another_dummy", {"value": "abc"})

        assert result.success is True
        assert result.data == "ABC"

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self):
        """Test calling a tool that does not exist."""
        result = await ToolRegistry().call("missing", {})

        assert result.success is False
        assert result.error == "Unknown tool: missing"


class TestDefaultRegistry:
    """Test the default tool set."""

    def test_default_tools(self):
        registry = build_default_registry(MagicMock())

        assert registry.get_tool_names() == ["web_search", "fetch_webpage"]
