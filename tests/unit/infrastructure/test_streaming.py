# tests/unit/infrastructure/test_streaming.py
"""Unit tests for stream event helpers."""

import json

import pytest
from langchain_core.messages import AIMessage

from agent_template.infrastructure.graphs import (
    StreamAggregator,
    StreamEvent,
    format_sse,
    stream_graph_events,
)


async def updates(*items, fail_with: Exception | None = None):
    for item in items:
        yield item
    if fail_with is not None:
        raise fail_with


@pytest.mark.unit
class TestStreamGraphEvents:
    """Test wrapping LangGraph update streams."""

    async def test_event_sequence(self):
        """Test start, one node_update per node and end."""
        stream = updates({"agent": {"output": "hi"}}, {"tools": {}, "agent": {"output": "done"}})

        events = [event async for event in stream_graph_events(stream)]

        assert [e.type for e in events] == ["start", "node_update", "node_update", "node_update", "end"]
        assert [e.node_id for e in events[1:4]] == ["agent", "tools", "agent"]
        assert events[-1].data == {"events_processed": 2}

    async def test_error_ends_stream(self):
        """Test a failing stream yields a single error event."""
        stream = updates({"agent": {}}, fail_with=RuntimeError("graph blew up"))

        events = [event async for event in stream_graph_events(stream)]

        assert [e.type for e in events] == ["start", "node_update", "error"]
        assert events[-1].error == "graph blew up"


@pytest.mark.unit
class TestFormatSSE:
    def test_frame(self):
        event = StreamEvent(type="node_update", node_id="agent", data={"output": "hi"})

        frame = format_sse(event)

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        payload = json.loads(frame[len("data: "):])
        assert payload["type"] == "node_update"
        assert payload["node_id"] == "agent"
        assert "error" not in payload

    def test_messages_are_serialized(self):
        event = StreamEvent(type="node_update", data={"messages": [AIMessage(content="hi")]})

        payload = json.loads(format_sse(event)[len("data: "):])

        assert payload["data"]["messages"][0]["content"] == "hi"


@pytest.mark.unit
class TestStreamAggregator:
    async def test_aggregate(self):
        """Test totals, errors and duration from a finished stream."""
        stream = stream_graph_events(updates({"agent": {}}, {"tools": {}}))

        result = await StreamAggregator().aggregate(stream)

        assert result["total_events"] == 2
        assert result["has_errors"] is False
        assert result["start_time"] and result["end_time"]
        assert result["duration_ms"] >= 0

    async def test_aggregate_with_error(self):
        stream = stream_graph_events(updates(fail_with=RuntimeError("x")))

        result = await StreamAggregator().aggregate(stream)

        assert result["error_count"] == 1
        assert result["end_time"] is None
        assert result["duration_ms"] == 0.0
