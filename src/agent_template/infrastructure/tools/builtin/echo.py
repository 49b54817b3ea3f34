"""
Echo tool.

The smallest useful tool: handy for wiring checks and as a template
for new tools.
"""
from typing import Any

from agent_template.domain.models import ToolDefinition


async def echo(input: dict[str, Any]) -> str:
    message = input.get("message")
    if message is None:
        raise ValueError("'message' is required")
    return f"Echo: {message}"


def echo_tool() -> ToolDefinition:
    return ToolDefinition(
        id="echo",
        name="echo",
        description="Echoes the input message back",
        schema={
            "message": {
                "type": "string",
                "description": "Message to echo",
                "required": True,
            }
        },
        execute=echo,
    )
