"""ReAct style agent graph.

Routing:
    START → agent → (tool calls and under the iteration cap?) → tools → agent
                  → (otherwise)                               → END
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AnyMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import BaseTool
from langgraph.graph import END, START, StateGraph

from agent_template.infrastructure.graphs.state import (
    AgentState,
    initial_state,
    message_text,
    utc_timestamp,
)
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class BasicAgentGraph:
    """
    LLM plus tools in a loop, capped at ``max_iterations`` LLM calls.

    Example:
        >>> graph = BasicAgentGraph(llm, tools=registry.get_tools_as_llm_tools(["echo"]))
        >>> state = await graph.run("Say hi", system_prompt="Be brief")
        >>> state["output"]
        'Hi!'
    """

    def __init__(
        self,
        llm: BaseChatModel,
        tools: Sequence[BaseTool] = (),
        max_iterations: int = 10,
    ):
        self._tools = {tool.name: tool for tool in tools}
        self._model = llm.bind_tools(list(tools)) if tools else llm
        self._max_iterations = max_iterations
        self._graph = self._build().compile()

    @property
    def graph(self):
        """The compiled LangGraph runnable."""
        return self._graph

    def _build(self) -> StateGraph:
        workflow = StateGraph(AgentState)
        workflow.add_node("agent", self._agent_node)
        workflow.add_node("tools", self._tools_node)
        workflow.add_edge(START, "agent")
        workflow.add_conditional_edges(
            "agent",
            self.should_use_tools,
            {"tools": "tools", "end": END},
        )
        workflow.add_edge("tools", "agent")
        return workflow

    async def _agent_node(self, state: AgentState) -> dict:
        try:
            response = await self._model.ainvoke(state["messages"])
        except Exception as e:
            logger.warning("Agent node failed", error=str(e))
            return {"error": str(e), "metadata": {"agent_error": True}}

        iterations = state.get("iterations", 0) + 1
        metadata: dict[str, Any] = {"last_node_run": "agent", "timestamp": utc_timestamp()}
        if getattr(response, "tool_calls", None) and iterations >= self._max_iterations:
            # The loop ends here with the tool calls unanswered
            logger.warning("Agent stopped at max iterations", max_iterations=self._max_iterations)
            metadata["max_iterations_reached"] = True

        return {
            "messages": [response],
            "iterations": iterations,
            "output": message_text(response),
            "metadata": metadata,
        }

    async def _tools_node(self, state: AgentState) -> dict:
        last_message = state["messages"][-1]
        if not isinstance(last_message, AIMessage):
            return {}

        results: dict[str, Any] = {}
        tool_messages: list[ToolMessage] = []

        for call in last_message.tool_calls:
            call_id = call.get("id") or call["name"]
            tool = self._tools.get(call["name"])

            if tool is None:
                result: Any = {"error": f"Tool {call['name']} not found"}
            else:
                try:
                    result = await tool.ainvoke(call.get("args") or {})
                except Exception as e:
                    logger.warning("Tool call failed", tool_name=call["name"], error=str(e))
                    result = {"error": str(e)}

            results[call_id] = result
            tool_messages.append(
                ToolMessage(
                    content=result if isinstance(result, str) else json.dumps(result, default=str),
                    tool_call_id=call_id,
                    name=call["name"],
                    status="error" if isinstance(result, dict) and "error" in result else "success",
                )
            )

        return {
            "messages": tool_messages,
            "tool_results": results,
            "metadata": {"last_node_run": "tools", "tool_calls": len(last_message.tool_calls)},
        }

    def should_use_tools(self, state: AgentState) -> str:
        """Route to ``tools`` when the last AI message asked for one."""
        if state.get("error"):
            return "end"

        if state.get("iterations", 0) >= self._max_iterations:
            return "end"

        messages = state.get("messages") or []
        last_message = messages[-1] if messages else None
        if isinstance(last_message, AIMessage) and last_message.tool_calls:
            return "tools"

        return "end"

    def _initial_state(
        self,
        query: str,
        system_prompt: Optional[str],
        history: Optional[Sequence[AnyMessage]],
    ) -> AgentState:
        messages: list[AnyMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.extend(history or [])
        messages.append(HumanMessage(content=query))
        return initial_state(query, messages)

    def _run_config(self) -> dict:
        # Each iteration is two supersteps (agent + tools).
        return {"recursion_limit": self._max_iterations * 2 + 5}

    async def run(
        self,
        query: str,
        system_prompt: Optional[str] = None,
        history: Optional[Sequence[AnyMessage]] = None,
    ) -> AgentState:
        state = self._initial_state(query, system_prompt, history)
        return await self._graph.ainvoke(state, config=self._run_config())

    def stream(
        self,
        query: str,
        system_prompt: Optional[str] = None,
        history: Optional[Sequence[AnyMessage]] = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Per-node state updates (LangGraph ``updates`` stream mode)."""
        state = self._initial_state(query, system_prompt, history)
        return self._graph.astream(state, config=self._run_config(), stream_mode="updates")
