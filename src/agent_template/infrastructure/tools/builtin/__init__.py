"""Built-in tools registered at startup."""

from agent_template.domain.models import ToolDefinition
from agent_template.infrastructure.tools.builtin.echo import echo_tool


def builtin_tools() -> list[ToolDefinition]:
    return [echo_tool()]


__all__ = ["builtin_tools", "echo_tool"]
