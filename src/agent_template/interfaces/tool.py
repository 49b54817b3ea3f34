# src/agent_template/interfaces/tool.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any

from langchain_core.tools import BaseTool

from agent_template.domain.models import ToolDefinition


class IToolRegistry(ABC):
    """
    Port for the tool lookup table.

    Tools are keyed by their ``id``; ``name`` is what the LLM sees.
    """

    @abstractmethod
    def register(self, tool: ToolDefinition) -> None:
        pass

    @abstractmethod
    def unregister(self, tool_id: str) -> bool:
        """Remove a tool. Returns True if something was removed."""
        pass

    @abstractmethod
    def get_tool(self, tool_id: str) -> ToolDefinition | None:
        pass

    @abstractmethod
    def get_tool_by_name(self, name: str) -> ToolDefinition | None:
        pass

    @abstractmethod
    def get_all_tools(self) -> list[ToolDefinition]:
        pass

    @abstractmethod
    def get_tools_by_ids(self, tool_ids: list[str]) -> list[ToolDefinition]:
        """Look up several tools, silently skipping unknown IDs."""
        pass

    @abstractmethod
    def tool_exists(self, tool_id: str) -> bool:
        pass

    @abstractmethod
    def get_tool_schema(self, tool_id: str) -> dict[str, Any] | None:
        pass

    @abstractmethod
    async def execute(self, tool_id: str, input: dict[str, Any]) -> Any:
        """
        Run a tool.

        Raises:
            ToolExecutionFailed: If the tool is unknown or raises
        """
        pass

    @abstractmethod
    def get_tools_as_llm_tools(self, tool_ids: list[str] | None = None) -> list[BaseTool]:
        """LangChain tool adapters, for ``bind_tools``."""
        pass
