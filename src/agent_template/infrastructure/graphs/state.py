"""Shared LangGraph state for every agent graph."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from langchain_core.messages import AnyMessage
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict


def merge_dicts(left: Optional[dict[str, Any]], right: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Reducer that merges node updates into the existing mapping."""
    return {**(left or {}), **(right or {})}


class AgentState(TypedDict, total=False):
    """The state that flows through every graph.

    ``messages`` uses the LangGraph ``add_messages`` reducer so that each
    node appends instead of overwriting. ``tool_results`` and ``metadata``
    are merged key by key. Every other key keeps the last value written.
    """

    messages: Annotated[list[AnyMessage], add_messages]
    query: str
    tool_results: Annotated[dict[str, Any], merge_dicts]
    metadata: Annotated[dict[str, Any], merge_dicts]
    iterations: int
    error: Optional[str]
    output: Optional[str]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def initial_state(
    query: str,
    messages: Optional[list[AnyMessage]] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> AgentState:
    return {
        "messages": list(messages or []),
        "query": query,
        "tool_results": {},
        "metadata": {"started_at": utc_timestamp(), **(metadata or {})},
        "iterations": 0,
        "error": None,
        "output": None,
    }


def message_text(message: Any) -> str:
    """Plain text of a message whose content may be a list of blocks."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)
