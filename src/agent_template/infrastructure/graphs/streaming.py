"""
Turn LangGraph ``updates`` streams into client-facing events.

A stream always opens with ``start`` and closes with either ``end`` or a
single ``error`` event, so SSE clients never see a stream just stop.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, AsyncIterable, AsyncIterator, Literal, Optional

from pydantic import BaseModel, Field

from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

EventType = Literal["start", "node_update", "data_update", "error", "end"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StreamEvent(BaseModel):
    """One event in an agent run stream."""

    type: EventType
    timestamp: str = Field(default_factory=_now)
    node_id: Optional[str] = None
    data: Any = None
    error: Optional[str] = None


def _json_default(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return str(value)


async def stream_graph_events(graph_stream: AsyncIterable[dict[str, Any]]) -> AsyncIterator[StreamEvent]:
    """
    Wrap a LangGraph ``stream_mode="updates"`` iterator.

    Yields one ``node_update`` per node key in each update. Failures of the
    underlying stream end it with an ``error`` event.
    """
    yield StreamEvent(type="start", data={"message": "Stream started"})

    event_count = 0
    try:
        async for update in graph_stream:
            event_count += 1
            for node_id, node_data in (update or {}).items():
                yield StreamEvent(type="node_update", node_id=node_id, data=node_data)
    except Exception as e:
        logger.warning("Graph stream failed", error=str(e), events_processed=event_count)
        yield StreamEvent(type="error", error=str(e))
        return

    yield StreamEvent(type="end", data={"events_processed": event_count})


def format_sse(event: StreamEvent) -> str:
    """Server-Sent Events frame for one event."""
    payload = json.dumps(event.model_dump(exclude_none=True), default=_json_default)
    return f"data: {payload}\n\n"


class StreamAggregator:
    """
    Collect a finished stream into totals.

    Example:
        >>> result = await StreamAggregator().aggregate(stream_graph_events(graph.stream("hi")))
        >>> result["has_errors"]
        False
    """

    def __init__(self):
        self.events: list[StreamEvent] = []
        self.errors: list[StreamEvent] = []
        self.start_time: Optional[str] = None
        self.end_time: Optional[str] = None

    def add(self, event: StreamEvent) -> None:
        if event.type == "start":
            self.start_time = event.timestamp
        elif event.type == "end":
            self.end_time = event.timestamp
        elif event.type == "error":
            self.errors.append(event)
        else:
            self.events.append(event)

    async def aggregate(self, stream: AsyncIterable[StreamEvent]) -> dict[str, Any]:
        async for event in stream:
            self.add(event)
        return self.result()

    def result(self) -> dict[str, Any]:
        return {
            "total_events": len(self.events),
            "error_count": len(self.errors),
            "has_errors": bool(self.errors),
            "duration_ms": self._duration_ms(),
            "events": list(self.events),
            "errors": list(self.errors),
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    def _duration_ms(self) -> float:
        if not self.start_time or not self.end_time:
            return 0.0
        start = datetime.fromisoformat(self.start_time)
        end = datetime.fromisoformat(self.end_time)
        return (end - start).total_seconds() * 1000
