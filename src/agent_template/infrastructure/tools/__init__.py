"""Tool registry and built-in tools."""

from agent_template.infrastructure.tools.registry import ToolRegistry

__all__ = ["ToolRegistry"]
