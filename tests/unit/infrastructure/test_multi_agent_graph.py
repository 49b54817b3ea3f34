# tests/unit/infrastructure/test_multi_agent_graph.py
"""Unit tests for the supervisor/worker graph."""

import pytest
from langchain_core.messages import AIMessage

from agent_template.infrastructure.graphs import MultiAgentGraph


class Worker:
    def __init__(self, name: str, fail: bool = False):
        self.name = name
        self.fail = fail
        self.calls = 0

    async def run(self, query: str):
        self.calls += 1
        if self.fail:
            raise RuntimeError(f"{self.name} crashed")
        return f"{self.name} handled: {query}"


@pytest.mark.unit
class TestMultiAgentGraph:
    """Test delegation and routing."""

    async def test_delegates_until_end(self, make_llm):
        """Test workers named by the supervisor run in turn."""
        llm = make_llm("Delegate to Researcher", "Now the writer", "end")
        graph = MultiAgentGraph(llm)
        researcher, writer = Worker("researcher"), Worker("writer")
        graph.register_worker("researcher", researcher)
        graph.register_worker("writer", writer)

        state = await graph.run("Report on LangGraph")

        assert state["tool_results"] == {
            "researcher": "researcher handled: Report on LangGraph",
            "writer": "writer handled: Report on LangGraph",
        }
        assert state["iterations"] == 2
        assert state["metadata"]["workers"] == ["researcher", "writer"]
        assert state["metadata"]["supervisor_decision"] == "end"

    async def test_iteration_cap(self, make_llm):
        """Test delegation stops once max_iterations workers have run."""
        llm = make_llm("researcher again")
        graph = MultiAgentGraph(llm, max_iterations=2)
        researcher = Worker("researcher")
        graph.register_worker("researcher", researcher)

        state = await graph.run("Dig deeper")

        assert state["iterations"] == 2
        assert researcher.calls == 2

    async def test_failing_worker(self, make_llm):
        """Test a worker exception is stored as its result."""
        llm = make_llm("researcher", "end")
        graph = MultiAgentGraph(llm)
        graph.register_worker("researcher", Worker("researcher", fail=True))

        state = await graph.run("Dig")

        assert state["tool_results"]["researcher"] == {"error": "researcher crashed"}
        assert state["metadata"]["worker_status"] == "failed"

    async def test_supervisor_error_ends_run(self, make_llm):
        """Test an LLM failure ends the run with state error."""
        llm = make_llm("x")
        llm.ainvoke.side_effect = RuntimeError("no quota")
        graph = MultiAgentGraph(llm)
        graph.register_worker("researcher", Worker("researcher"))

        state = await graph.run("Dig")

        assert state["error"] == "no quota"
        assert state["tool_results"] == {}

    def test_reserved_names(self, make_llm):
        """Test reserved node names cannot be used for workers."""
        graph = MultiAgentGraph(make_llm("x"))

        for name in ("supervisor", "end"):
            with pytest.raises(ValueError, match="reserved"):
                graph.register_worker(name, Worker(name))

    def test_registering_rebuilds_graph(self, make_llm):
        """Test the compiled graph is replaced after a new worker."""
        graph = MultiAgentGraph(make_llm("x"))
        first = graph.graph

        graph.register_worker("writer", Worker("writer"))

        assert graph.graph is not first
        assert "writer" in graph.graph.get_graph().nodes

    def test_route_work(self, make_llm):
        """Test the routing predicate."""
        graph = MultiAgentGraph(make_llm("x"), max_iterations=3)
        graph.register_worker("researcher", Worker("researcher"))
        graph.register_worker("writer", Worker("writer"))

        def state(content, iterations=0, **extra):
            return {"messages": [AIMessage(content=content)], "iterations": iterations, **extra}

        assert graph.route_work(state("Ask the WRITER")) == "writer"
        assert graph.route_work(state("researcher then writer")) == "researcher"
        assert graph.route_work(state("nobody")) == "end"
        assert graph.route_work(state("writer", iterations=3)) == "end"
        assert graph.route_work(state("writer", error="boom")) == "end"
