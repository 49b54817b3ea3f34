"""Human-in-the-loop agent graph.

Routing:
    START → plan → [interrupt] → human_review → approved       → execute → END
                                              → rejected       → END
                                              → needs_revision → plan
                                              → pending        → END

The graph pauses before ``human_review`` using a LangGraph checkpointer.
Each conversation is a checkpoint thread; feedback is written into the
thread's state and the run resumes from the interrupt.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph

from agent_template.infrastructure.graphs.state import (
    AgentState,
    initial_state,
    message_text,
    utc_timestamp,
)
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

Feedback = Literal["approved", "rejected", "needs_revision"]
FEEDBACK_VALUES = ("approved", "rejected", "needs_revision")


def process_human_feedback(feedback: Feedback, notes: Optional[str] = None) -> dict[str, Any]:
    """State update recording a reviewer's decision."""
    if feedback not in FEEDBACK_VALUES:
        raise ValueError(f"Unknown feedback {feedback!r}; expected one of {FEEDBACK_VALUES}")
    return {
        "metadata": {
            "human_approval": feedback,
            "human_feedback_notes": notes,
            "feedback_received_at": utc_timestamp(),
        }
    }


class HITLAgentGraph:
    """
    Plan, wait for a human decision, then execute.

    Example:
        >>> graph = HITLAgentGraph(llm)
        >>> state = await graph.start("Migrate the billing database", thread_id="t-1")
        >>> state["metadata"]["plan"]
        '1. Take a backup ...'
        >>> state = await graph.submit_feedback("t-1", "approved")
        >>> state["output"]
    """

    def __init__(self, llm: BaseChatModel, max_iterations: int = 10):
        self._llm = llm
        self._max_iterations = max_iterations
        self._checkpointer = MemorySaver()
        self._graph = self._build().compile(
            checkpointer=self._checkpointer,
            interrupt_before=["human_review"],
        )

    @property
    def graph(self):
        return self._graph

    def _build(self) -> StateGraph:
        workflow = StateGraph(AgentState)
        workflow.add_node("plan", self._plan_node)
        workflow.add_node("human_review", self._human_review_node)
        workflow.add_node("execute", self._execute_node)
        workflow.add_edge(START, "plan")
        workflow.add_edge("plan", "human_review")
        workflow.add_conditional_edges(
            "human_review",
            self.process_approval,
            {
                "approved": "execute",
                "rejected": END,
                "needs_revision": "plan",
                "pending": END,
            },
        )
        workflow.add_edge("execute", END)
        return workflow

    async def _plan_node(self, state: AgentState) -> dict:
        prompt = f"Create a detailed action plan for: {state.get('query', '')}\n\nBe specific about each step."
        notes = state.get("metadata", {}).get("human_feedback_notes")
        if notes:
            prompt += f"\n\nReviewer feedback on the previous plan: {notes}"

        try:
            response = await self._llm.ainvoke([*state.get("messages", []), HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning("Plan generation failed", error=str(e))
            return {"error": str(e), "metadata": {"plan_error": True}}

        return {
            "messages": [response],
            "iterations": state.get("iterations", 0) + 1,
            "metadata": {
                "last_node_run": "plan",
                "plan_generated": True,
                "plan": message_text(response),
                "human_approval": "pending",
            },
        }

    def _human_review_node(self, state: AgentState) -> dict:
        metadata = state.get("metadata", {})
        approval = metadata.get("human_approval")
        return {
            "metadata": {
                "last_node_run": "human_review",
                "requires_approval": True,
                "pending_plan": metadata.get("plan", "No plan generated"),
                "human_approval": approval if approval in FEEDBACK_VALUES else "pending",
            }
        }

    async def _execute_node(self, state: AgentState) -> dict:
        plan = state.get("metadata", {}).get("pending_plan", "")
        try:
            response = await self._llm.ainvoke(
                [*state.get("messages", []), HumanMessage(content=f"Execute this plan step by step: {plan}")]
            )
        except Exception as e:
            logger.warning("Plan execution failed", error=str(e))
            return {
                "error": str(e),
                "metadata": {"execution_status": "failed", "execution_error": True},
            }

        result = message_text(response)
        return {
            "messages": [response],
            "output": result,
            "metadata": {
                "last_node_run": "execute",
                "execution_status": "completed",
                "execution_result": result,
            },
        }

    def process_approval(self, state: AgentState) -> str:
        if state.get("error"):
            return "rejected"

        approval = state.get("metadata", {}).get("human_approval")
        if approval == "needs_revision" and state.get("iterations", 0) >= self._max_iterations:
            logger.info("Revision limit reached", iterations=state.get("iterations"))
            return "rejected"
        if approval in FEEDBACK_VALUES:
            return approval
        return "pending"

    @staticmethod
    def _thread_config(thread_id: str) -> dict:
        return {"configurable": {"thread_id": thread_id}}

    async def start(self, query: str, thread_id: str) -> AgentState:
        """Run until the graph pauses for review."""
        state = initial_state(query, metadata={"agent_type": "hitl"})
        return await self._graph.ainvoke(state, config=self._thread_config(thread_id))

    async def submit_feedback(
        self,
        thread_id: str,
        feedback: Feedback,
        notes: Optional[str] = None,
    ) -> AgentState:
        """Record a decision and resume the paused run."""
        config = self._thread_config(thread_id)
        snapshot = await self._graph.aget_state(config)
        if "human_review" not in snapshot.next:
            raise ValueError(f"Thread {thread_id!r} is not waiting for review")

        await self._graph.aupdate_state(config, process_human_feedback(feedback, notes))
        return await self._graph.ainvoke(None, config=config)

    async def get_state(self, thread_id: str) -> AgentState:
        snapshot = await self._graph.aget_state(self._thread_config(thread_id))
        return snapshot.values

    async def is_waiting_for_review(self, thread_id: str) -> bool:
        snapshot = await self._graph.aget_state(self._thread_config(thread_id))
        return "human_review" in snapshot.next
