"""Supervisor/worker agent graph.

Routing:
    START → supervisor → (reply names a worker, under the cap?) → <worker> → supervisor
                       → (otherwise)                            → END
"""

from __future__ import annotations

from typing import Any, Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langgraph.graph import END, START, StateGraph

from agent_template.infrastructure.graphs.state import AgentState, initial_state, message_text
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SUPERVISOR_PROMPT = (
    "You are a supervisor agent. Based on the query, decide which worker to "
    "delegate to: {workers}, or 'end' to finish.\n"
    "Query: {query}\n"
    "Previous iterations: {iterations}\n"
    "Completed work: {completed}"
)


class WorkerAgent(Protocol):
    """Anything with an async ``run(query)`` can be a worker."""

    async def run(self, query: str) -> Any: ...


class MultiAgentGraph:
    """
    A supervisor LLM delegating to named workers.

    Workers must be registered before the first run; registering a worker
    later rebuilds the graph. ``iterations`` counts finished delegations.

    Example:
        >>> graph = MultiAgentGraph(supervisor_llm, max_iterations=3)
        >>> graph.register_worker("researcher", researcher)
        >>> graph.register_worker("writer", writer)
        >>> state = await graph.run("Write a short report on LangGraph")
        >>> state["tool_results"]["researcher"]
    """

    def __init__(self, supervisor_llm: BaseChatModel, max_iterations: int = 10):
        self._llm = supervisor_llm
        self._max_iterations = max_iterations
        self._workers: dict[str, WorkerAgent] = {}
        self._compiled = None

    @property
    def workers(self) -> list[str]:
        return list(self._workers)

    def register_worker(self, name: str, worker: WorkerAgent) -> None:
        if name in ("supervisor", "end"):
            raise ValueError(f"'{name}' is reserved and cannot be used as a worker name")
        self._workers[name] = worker
        self._compiled = None

    @property
    def graph(self):
        """The compiled runnable, built on first use after worker changes."""
        if self._compiled is None:
            self._compiled = self._build().compile()
        return self._compiled

    def _build(self) -> StateGraph:
        workflow = StateGraph(AgentState)
        workflow.add_node("supervisor", self._supervisor_node)

        routes: dict[str, Any] = {"end": END}
        for name in self._workers:
            workflow.add_node(name, self._make_worker_node(name))
            workflow.add_edge(name, "supervisor")
            routes[name] = name

        workflow.add_edge(START, "supervisor")
        workflow.add_conditional_edges("supervisor", self.route_work, routes)
        return workflow

    async def _supervisor_node(self, state: AgentState) -> dict:
        prompt = SUPERVISOR_PROMPT.format(
            workers=", ".join(self._workers) or "none",
            query=state.get("query", ""),
            iterations=state.get("iterations", 0),
            completed=", ".join(state.get("tool_results", {})) or "none",
        )

        try:
            response = await self._llm.ainvoke([*state.get("messages", []), HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning("Supervisor decision failed", error=str(e))
            return {"error": str(e), "metadata": {"supervisor_error": True}}

        decision = message_text(response)
        return {
            "messages": [response],
            "output": decision,
            "metadata": {"last_node_run": "supervisor", "supervisor_decision": decision},
        }

    def _make_worker_node(self, name: str):
        async def worker_node(state: AgentState) -> dict:
            iterations = state.get("iterations", 0) + 1
            worker = self._workers[name]
            try:
                result = await worker.run(state.get("query", ""))
            except Exception as e:
                logger.warning("Worker failed", worker=name, error=str(e))
                return {
                    "iterations": iterations,
                    "tool_results": {name: {"error": str(e)}},
                    "metadata": {"last_worker": name, "worker_status": "failed"},
                }

            return {
                "iterations": iterations,
                "tool_results": {name: result},
                "metadata": {"last_worker": name, "worker_status": "success"},
            }

        return worker_node

    def route_work(self, state: AgentState) -> str:
        """Pick the first worker named in the supervisor's reply."""
        if state.get("error"):
            return "end"

        if state.get("iterations", 0) >= self._max_iterations:
            return "end"

        messages = state.get("messages") or []
        content = message_text(messages[-1]).lower() if messages else ""
        for name in self._workers:
            if name.lower() in content:
                return name

        return "end"

    async def run(self, query: str) -> AgentState:
        state = initial_state(
            query,
            metadata={"agent_type": "multi-agent", "workers": self.workers},
        )
        return await self.graph.ainvoke(
            state,
            config={"recursion_limit": self._max_iterations * 2 + 5},
        )
