# tests/unit/infrastructure/test_tool_registry.py
"""Unit tests for tool registry."""

import pytest

from agent_template.domain import ToolExecutionFailed
from agent_template.domain.models import ToolDefinition
from agent_template.infrastructure.tools import ToolRegistry
from agent_template.infrastructure.tools.builtin import builtin_tools, echo_tool


def make_tool(tool_id: str = "add", execute=None) -> ToolDefinition:
    return ToolDefinition(
        id=tool_id,
        name=f"{tool_id}_tool",
        description="Adds two numbers",
        schema={
            "a": {"type": "number", "description": "First operand", "required": True},
            "b": "Second operand",
        },
        execute=execute or (lambda input: input["a"] + input.get("b", 0)),
    )


@pytest.mark.unit
class TestToolRegistry:
    """Test tool registry functionality."""

    def test_register_tool(self):
        """Test registering a tool."""
        registry = ToolRegistry()
        tool = make_tool()

        registry.register(tool)

        assert registry.get_tool("add") is tool
        assert registry.get_tool_by_name("add_tool") is tool
        assert registry.tool_exists("add") is True
        assert registry.get_all_tools() == [tool]

    def test_unregister_tool(self):
        """Test unregistering a tool reports whether something was removed."""
        registry = ToolRegistry()
        registry.register(make_tool())

        assert registry.unregister("add") is True
        assert registry.unregister("add") is False
        assert registry.get_tool("add") is None
        assert registry.get_tools_as_llm_tools() == []

    def test_get_tools_by_ids_skips_unknown(self):
        """Test unknown IDs are silently skipped."""
        registry = ToolRegistry()
        registry.register(make_tool("add"))
        registry.register(make_tool("sub"))

        tools = registry.get_tools_by_ids(["sub", "missing", "add"])

        assert [tool.id for tool in tools] == ["sub", "add"]

    def test_get_tool_schema(self):
        """Test the schema is returned for known tools only."""
        registry = ToolRegistry()
        registry.register(make_tool())

        assert set(registry.get_tool_schema("add")) == {"a", "b"}
        assert registry.get_tool_schema("missing") is None

    async def test_execute_sync_tool(self):
        """Test executing a plain function."""
        registry = ToolRegistry()
        registry.register(make_tool())

        assert await registry.execute("add", {"a": 2, "b": 3}) == 5

    async def test_execute_async_tool(self):
        """Test executing a coroutine function."""
        registry = ToolRegistry()
        registry.register(echo_tool())

        assert await registry.execute("echo", {"message": "hi"}) == "Echo: hi"

    async def test_execute_unknown_tool(self):
        """Test an unknown ID raises ToolExecutionFailed."""
        registry = ToolRegistry()

        with pytest.raises(ToolExecutionFailed) as exc_info:
            await registry.execute("missing", {})

        assert exc_info.value.message == 'Tool "missing" execution failed: Tool not found'

    async def test_execute_wraps_errors(self):
        """Test errors raised by a tool are wrapped with the tool name."""

        def explode(input):
            raise RuntimeError("boom")

        registry = ToolRegistry()
        registry.register(make_tool(execute=explode))

        with pytest.raises(ToolExecutionFailed) as exc_info:
            await registry.execute("add", {"a": 1})

        assert exc_info.value.tool_name == "add_tool"
        assert exc_info.value.reason == "boom"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_llm_tool_adapter(self):
        """Test the LangChain adapter runs the tool and returns JSON."""
        registry = ToolRegistry()
        registry.register(make_tool())

        [llm_tool] = registry.get_tools_as_llm_tools(["add"])
        result = await llm_tool.ainvoke({"a": 2, "b": 5})

        assert llm_tool.name == "add_tool"
        assert result == "7"
        assert set(llm_tool.args) == {"a", "b"}

    def test_openai_format(self):
        """Test export in OpenAI function calling format."""
        registry = ToolRegistry()
        registry.register(make_tool())

        [exported] = registry.to_openai_format()

        assert exported["type"] == "function"
        assert exported["function"]["name"] == "add_tool"
        parameters = exported["function"]["parameters"]
        assert parameters["required"] == ["a"]
        assert parameters["properties"]["a"] == {"type": "number", "description": "First operand"}
        assert parameters["properties"]["b"] == {"description": "Second operand"}

    def test_anthropic_format(self):
        """Test export in Anthropic tool use format."""
        registry = ToolRegistry()
        registry.register(echo_tool())

        [exported] = registry.to_anthropic_format()

        assert exported["name"] == "echo"
        assert exported["input_schema"]["required"] == ["message"]

    def test_builtin_tools(self):
        """Test the built-in tool set."""
        assert [tool.id for tool in builtin_tools()] == ["echo"]
