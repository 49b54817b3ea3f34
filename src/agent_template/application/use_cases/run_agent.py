"""Run agent use case.

Opens (or resumes) a session, runs the agent's ReAct graph with its LLM
and tools, and records the outcome on the session.
"""
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Optional

from langchain_core.messages import AIMessage, AnyMessage, HumanMessage, SystemMessage

from agent_template.config.settings import Settings
from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import (
    AgentNotFound,
    AgentTimeout,
    InvalidAgentConfig,
    SessionNotFound,
    ValidationError,
)
from agent_template.domain.models import AgentExecutionResult
from agent_template.domain.session import Session
from agent_template.infrastructure.graphs.basic import BasicAgentGraph
from agent_template.infrastructure.graphs.streaming import StreamEvent, stream_graph_events
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.llm import ILLMService
from agent_template.interfaces.memory import IMemoryService
from agent_template.interfaces.repository import IAgentRepository, ISessionRepository
from agent_template.interfaces.tool import IToolRegistry

logger = get_logger(__name__)


class RunAgent:
    """
    Execute one turn of a conversation with an agent.

    A new session is opened when ``session_id`` is not given. Sessions of
    agents with memory enabled stay active after a successful run so the
    caller can continue the conversation; all others are completed.
    """

    def __init__(
        self,
        agent_repository: IAgentRepository,
        session_repository: ISessionRepository,
        llm_service: ILLMService,
        tool_registry: IToolRegistry,
        memory_service: IMemoryService,
        settings: Settings,
    ):
        self._agents = agent_repository
        self._sessions = session_repository
        self._llm = llm_service
        self._tools = tool_registry
        self._memory = memory_service
        self._settings = settings

    async def execute(
        self,
        agent_id: str,
        query: str,
        session_id: Optional[str] = None,
    ) -> AgentExecutionResult:
        agent = await self._load_agent(agent_id)
        graph = self._build_graph(agent)
        session = await self._open_session(agent, session_id)
        config = agent.config
        history = await self._history(agent, session)
        timeout_ms = self._timeout_ms(agent)

        log = logger.bind(agent_id=agent.id, session_id=session.session_id)
        log.info("Agent run started", timeout_ms=timeout_ms)
        started = time.perf_counter()

        try:
            state = await asyncio.wait_for(
                graph.run(query, system_prompt=config.system_prompt, history=history),
                timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            session.interrupt("timeout")
            await self._sessions.update(session)
            log.warning("Agent run timed out", timeout_ms=timeout_ms)
            raise AgentTimeout(
                f"Agent run exceeded {timeout_ms} ms",
                details={
                    "agent_id": agent.id,
                    "session_id": session.session_id,
                    "timeout_ms": timeout_ms,
                },
            )

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        error = state.get("error")
        capped = bool(state.get("metadata", {}).get("max_iterations_reached"))

        await self._settle(agent, session, error, state.get("messages", []), capped)

        log.info(
            "Agent run finished",
            success=error is None,
            iterations=state.get("iterations", 0),
            max_iterations_reached=capped,
            duration_ms=duration_ms,
        )

        return AgentExecutionResult(
            session_id=session.session_id,
            success=error is None,
            output=state.get("output"),
            iterations=state.get("iterations", 0),
            duration_ms=duration_ms,
            error=error,
            metadata={
                "agent_id": agent.id,
                "tool_results": state.get("tool_results", {}),
                "session_status": session.status.value,
                "max_iterations_reached": capped,
            },
        )

    async def stream(
        self,
        agent_id: str,
        query: str,
        session_id: Optional[str] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Validate the request and return the event stream of the run.

        Lookups happen before the stream starts so missing agents and
        disabled streaming surface as regular errors.
        """
        agent = await self._load_agent(agent_id)
        if not (self._settings.enable_streaming and agent.config.enable_streaming):
            raise InvalidAgentConfig(
                "Streaming is not enabled for this agent",
                details={"agent_id": agent.id},
            )

        graph = self._build_graph(agent)
        session = await self._open_session(agent, session_id)
        history = await self._history(agent, session)

        return self._stream_events(agent, session, graph, query, history)

    async def _stream_events(
        self,
        agent: Agent,
        session: Session,
        graph: BasicAgentGraph,
        query: str,
        history: list[AnyMessage],
    ) -> AsyncIterator[StreamEvent]:
        """
        Relay graph events, bounded by the agent's timeout.

        The session is settled however the stream ends: completed or
        failed after the last event, interrupted on timeout or when the
        consumer stops reading early.
        """
        config = agent.config
        timeout_ms = self._timeout_ms(agent)
        deadline = time.monotonic() + timeout_ms / 1000
        log = logger.bind(agent_id=agent.id, session_id=session.session_id)

        turn: list[AnyMessage] = [*history, HumanMessage(content=query)]
        failure: Optional[str] = None
        capped = False
        finished = False
        timed_out = False

        # One task drives the graph so its context stays in a single task
        queue: asyncio.Queue[Optional[StreamEvent]] = asyncio.Queue()

        async def produce() -> None:
            try:
                updates = graph.stream(query, system_prompt=config.system_prompt, history=history)
                async for graph_event in stream_graph_events(updates):
                    await queue.put(graph_event)
            finally:
                queue.put_nowait(None)

        producer = asyncio.create_task(produce())
        try:
            yield StreamEvent(type="data_update", data={"session_id": session.session_id})
            while True:
                try:
                    event = await asyncio.wait_for(
                        queue.get(),
                        timeout=max(deadline - time.monotonic(), 0),
                    )
                except asyncio.TimeoutError:
                    timed_out = True
                    log.warning("Agent stream timed out", timeout_ms=timeout_ms)
                    yield StreamEvent(type="error", error=f"Agent run exceeded {timeout_ms} ms")
                    break
                if event is None:
                    break

                if event.type == "node_update" and isinstance(event.data, dict):
                    turn.extend(event.data.get("messages") or [])
                    failure = event.data.get("error") or failure
                    capped = capped or bool((event.data.get("metadata") or {}).get("max_iterations_reached"))
                elif event.type == "error":
                    failure = event.error
                yield event
            finished = True
        finally:
            producer.cancel()
            if timed_out:
                session.interrupt("timeout")
                await self._sessions.update(session)
            elif not finished:
                log.info("Agent stream closed by consumer")
                session.interrupt("stream_closed")
                await self._sessions.update(session)

        if not timed_out:
            await self._settle(agent, session, failure, turn, capped)

    async def _settle(
        self,
        agent: Agent,
        session: Session,
        error: Optional[str],
        messages: list[AnyMessage],
        capped: bool,
    ) -> None:
        if error:
            session.fail(error)
        else:
            await self._remember(agent, session, messages)
            if capped:
                session.update_metadata({"max_iterations_reached": True})
            if not agent.config.enable_memory:
                session.complete()
        await self._sessions.update(session)

    def _timeout_ms(self, agent: Agent) -> int:
        return agent.config.timeout_ms or self._settings.agent_timeout_ms

    async def _load_agent(self, agent_id: str) -> Agent:
        agent = await self._agents.find_by_id(agent_id)
        if agent is None:
            raise AgentNotFound(agent_id)
        if not agent.is_active:
            raise InvalidAgentConfig("Agent is not active", details={"agent_id": agent_id})
        return agent

    async def _open_session(self, agent: Agent, session_id: Optional[str]) -> Session:
        if session_id is None:
            session = Session(
                agent_id=agent.id,
                expires_at=datetime.now(timezone.utc)
                + timedelta(minutes=self._settings.session_expiry_minutes),
                metadata={"agent_name": agent.name},
            )
            return await self._sessions.save(session)

        session = await self._sessions.find_by_id(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        if session.agent_id != agent.id:
            raise ValidationError(
                "Session belongs to a different agent",
                details={"session_id": session_id, "agent_id": agent.id},
            )
        if not session.is_active():
            raise ValidationError(
                "Session is no longer active",
                details={"session_id": session_id, "status": session.status.value},
            )
        return session

    def _build_graph(self, agent: Agent) -> BasicAgentGraph:
        config = agent.config
        return BasicAgentGraph(
            llm=self._llm.get_llm(config.llm_config),
            tools=self._tools.get_tools_as_llm_tools(config.tools),
            max_iterations=config.max_iterations or self._settings.agent_max_iterations,
        )

    async def _history(self, agent: Agent, session: Session) -> list[AnyMessage]:
        if not agent.config.enable_memory:
            return []
        return await self._memory.get_memory(session.session_id)

    async def _remember(self, agent: Agent, session: Session, messages: list[AnyMessage]) -> None:
        if not agent.config.enable_memory:
            return
        conversation = conversation_window(messages, self._settings.memory_max_messages)
        await self._memory.save_messages(session.session_id, conversation)


def conversation_window(messages: list[AnyMessage], max_messages: int) -> list[AnyMessage]:
    """
    History that is safe to send back to a provider.

    Keeps at most ``max_messages`` of the newest non-system messages and
    starts the window on a human message, so a tool result is never kept
    without the AI message that requested it. A trailing AI message whose
    tool calls were never answered (the iteration cap stopped the loop)
    is dropped.
    """
    conversation = [m for m in messages if not isinstance(m, SystemMessage)]
    while conversation and isinstance(conversation[-1], AIMessage) and conversation[-1].tool_calls:
        conversation.pop()

    window = conversation[-max_messages:] if max_messages > 0 else []
    for index, message in enumerate(window):
        if isinstance(message, HumanMessage):
            return window[index:]
    return []
