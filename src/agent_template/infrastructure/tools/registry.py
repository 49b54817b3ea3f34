# src/agent_template/infrastructure/tools/registry.py
"""
Tool registry for managing tool definitions.

Tools are stored by ID. Each registered tool also gets a LangChain
StructuredTool adapter so it can be handed to ``bind_tools`` directly.
"""
from __future__ import annotations

import inspect
import json
from typing import Any

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import Field, create_model

from agent_template.domain.exceptions import ToolExecutionFailed
from agent_template.domain.models import ToolDefinition
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.tool import IToolRegistry

logger = get_logger(__name__)


def _parameter_description(definition: Any) -> str | None:
    if isinstance(definition, dict):
        return definition.get("description")
    if isinstance(definition, str):
        return definition
    return None


def _parameters_json_schema(tool: ToolDefinition) -> dict[str, Any]:
    properties = {}
    for name, definition in tool.schema.items():
        if isinstance(definition, dict):
            properties[name] = {k: v for k, v in definition.items() if k != "required"}
        else:
            properties[name] = {"description": str(definition)}
    required = [
        name for name, definition in tool.schema.items()
        if isinstance(definition, dict) and definition.get("required")
    ]
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


class ToolRegistry(IToolRegistry):
    """
    Registry for tool definitions.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(ToolDefinition(
        ...     id="echo",
        ...     name="echo",
        ...     description="Echoes the input message back",
        ...     schema={"message": {"type": "string"}},
        ...     execute=lambda input: f"Echo: {input['message']}",
        ... ))
        >>> await registry.execute("echo", {"message": "hi"})
        'Echo: hi'
    """

    def __init__(self):
        self._tools: dict[str, ToolDefinition] = {}
        self._llm_tools: dict[str, BaseTool] = {}

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool, replacing any tool with the same ID.

        Args:
            tool: Tool definition
        """
        self._tools[tool.id] = tool
        self._llm_tools[tool.id] = self._to_llm_tool(tool)
        logger.debug("Tool registered", tool_id=tool.id, tool_name=tool.name)

    def unregister(self, tool_id: str) -> bool:
        """
        Unregister a tool by ID.

        Returns:
            True if a tool was removed
        """
        self._llm_tools.pop(tool_id, None)
        return self._tools.pop(tool_id, None) is not None

    def get_tool(self, tool_id: str) -> ToolDefinition | None:
        return self._tools.get(tool_id)

    def get_tool_by_name(self, name: str) -> ToolDefinition | None:
        for tool in self._tools.values():
            if tool.name == name:
                return tool
        return None

    def get_all_tools(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def get_tools_by_ids(self, tool_ids: list[str]) -> list[ToolDefinition]:
        return [self._tools[tool_id] for tool_id in tool_ids if tool_id in self._tools]

    def tool_exists(self, tool_id: str) -> bool:
        return tool_id in self._tools

    def get_tool_schema(self, tool_id: str) -> dict[str, Any] | None:
        tool = self._tools.get(tool_id)
        return dict(tool.schema) if tool else None

    async def execute(self, tool_id: str, input: dict[str, Any]) -> Any:
        """
        Execute a tool by ID.

        Args:
            tool_id: Tool ID
            input: Arguments passed to the tool's execute function

        Returns:
            Whatever the tool returns

        Raises:
            ToolExecutionFailed: If the tool is unknown or raises
        """
        tool = self._tools.get(tool_id)
        if tool is None:
            raise ToolExecutionFailed(tool_id, "Tool not found")

        try:
            result = tool.execute(input)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning("Tool execution failed", tool_id=tool_id, error=str(e))
            raise ToolExecutionFailed(tool.name, str(e)) from e

        return result

    def get_tools_as_llm_tools(self, tool_ids: list[str] | None = None) -> list[BaseTool]:
        if tool_ids is None:
            return list(self._llm_tools.values())
        return [self._llm_tools[tool_id] for tool_id in tool_ids if tool_id in self._llm_tools]

    def to_openai_format(self) -> list[dict[str, Any]]:
        """
        Export tools in OpenAI function calling format.

        Example:
            >>> tools = registry.to_openai_format()
            >>> tools[0]["function"]["name"]
            'echo'
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": _parameters_json_schema(tool),
                },
            }
            for tool in self._tools.values()
        ]

    def to_anthropic_format(self) -> list[dict[str, Any]]:
        """Export tools in Anthropic tool use format."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": _parameters_json_schema(tool),
            }
            for tool in self._tools.values()
        ]

    def clear(self) -> None:
        """Clear all registered tools (useful for testing)."""
        self._tools.clear()
        self._llm_tools.clear()

    def _to_llm_tool(self, tool: ToolDefinition) -> BaseTool:
        fields = {
            name: (Any, Field(default=None, description=_parameter_description(definition)))
            for name, definition in tool.schema.items()
        }
        args_schema = create_model(f"{tool.id}_args", **fields)
        tool_id = tool.id

        async def run(**kwargs: Any) -> str:
            arguments = {k: v for k, v in kwargs.items() if v is not None}
            result = await self.execute(tool_id, arguments)
            return json.dumps(result, default=str)

        return StructuredTool.from_function(
            coroutine=run,
            name=tool.name,
            description=tool.description,
            args_schema=args_schema,
        )
