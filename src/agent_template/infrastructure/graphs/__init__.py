"""LangGraph agent graphs and streaming helpers."""

from agent_template.infrastructure.graphs.basic import BasicAgentGraph
from agent_template.infrastructure.graphs.hitl import HITLAgentGraph
from agent_template.infrastructure.graphs.multi_agent import MultiAgentGraph
from agent_template.infrastructure.graphs.rag import RAGAgentGraph
from agent_template.infrastructure.graphs.state import AgentState
from agent_template.infrastructure.graphs.streaming import (
    StreamAggregator,
    StreamEvent,
    format_sse,
    stream_graph_events,
)

__all__ = [
    "AgentState",
    "BasicAgentGraph",
    "HITLAgentGraph",
    "MultiAgentGraph",
    "RAGAgentGraph",
    "StreamAggregator",
    "StreamEvent",
    "format_sse",
    "stream_graph_events",
]
