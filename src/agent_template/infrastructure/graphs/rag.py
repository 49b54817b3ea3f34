"""Retrieval-augmented agent graph.

Routing:
    START → retrieve → grade_documents → (no relevant docs, < 2 rewrites?) → rewrite_query → retrieve
                                       → (otherwise)                        → generate → END
"""

from __future__ import annotations

from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.retrievers import BaseRetriever
from langgraph.graph import END, START, StateGraph

from agent_template.infrastructure.graphs.state import AgentState, initial_state, message_text
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MAX_QUERY_REWRITES = 2


def grade_documents(query: str, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep documents that contain at least one lower-cased query term."""
    terms = [term for term in query.lower().split() if term]
    return [
        doc for doc in docs
        if any(term in str(doc.get("content", "")).lower() for term in terms)
    ]


class RAGAgentGraph:
    """
    Retrieve, grade, optionally rewrite the query, then answer.

    Works without a retriever: retrieval is reported as ``not_configured``
    and the answer is generated from the conversation alone.
    """

    def __init__(self, llm: BaseChatModel, retriever: Optional[BaseRetriever] = None):
        self._llm = llm
        self._retriever = retriever
        self._graph = self._build().compile()

    @property
    def graph(self):
        return self._graph

    def _build(self) -> StateGraph:
        workflow = StateGraph(AgentState)
        workflow.add_node("retrieve", self._retrieve_node)
        workflow.add_node("grade_documents", self._grade_documents_node)
        workflow.add_node("generate", self._generate_node)
        workflow.add_node("rewrite_query", self._rewrite_query_node)
        workflow.add_edge(START, "retrieve")
        workflow.add_edge("retrieve", "grade_documents")
        workflow.add_conditional_edges(
            "grade_documents",
            self.should_rewrite_query,
            {"generate": "generate", "rewrite": "rewrite_query"},
        )
        workflow.add_edge("rewrite_query", "retrieve")
        workflow.add_edge("generate", END)
        return workflow

    async def _retrieve_node(self, state: AgentState) -> dict:
        if self._retriever is None:
            return {"metadata": {"retriever_status": "not_configured"}}

        try:
            documents = await self._retriever.ainvoke(state.get("query", ""))
        except Exception as e:
            logger.warning("Retrieval failed", error=str(e))
            return {"error": str(e), "metadata": {"retrieval_error": True}}

        return {
            "tool_results": {
                "retrieved_docs": [
                    {"content": doc.page_content, "metadata": doc.metadata}
                    for doc in documents
                ]
            },
            "metadata": {"retrieval_method": "retriever", "docs_retrieved": len(documents)},
        }

    def _grade_documents_node(self, state: AgentState) -> dict:
        docs = state.get("tool_results", {}).get("retrieved_docs") or []
        if not docs:
            return {
                "tool_results": {"graded_docs": []},
                "metadata": {"document_grading": "no_documents", "relevant_docs_count": 0},
            }

        graded = grade_documents(state.get("query", ""), docs)
        return {
            "tool_results": {"graded_docs": graded},
            "metadata": {
                "relevant_docs_count": len(graded),
                "document_grade_pass": bool(graded),
            },
        }

    async def _generate_node(self, state: AgentState) -> dict:
        docs = state.get("tool_results", {}).get("graded_docs") or []
        context = "\n---\n".join(str(doc.get("content", "")) for doc in docs)
        prompt = (
            f"Use the following documents to answer the question:\n{context}\n\n"
            f"Question: {state.get('query', '')}"
        )

        try:
            response = await self._llm.ainvoke([*state.get("messages", []), HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning("Generation failed", error=str(e))
            return {"error": str(e), "metadata": {"generation_error": True}}

        return {
            "messages": [response],
            "output": message_text(response),
            "metadata": {"last_node_run": "generate", "generation_status": "success"},
        }

    async def _rewrite_query_node(self, state: AgentState) -> dict:
        rewrites = state.get("metadata", {}).get("query_rewrite_count", 0) + 1
        prompt = (
            "Rewrite the following query to be more specific and retrieval-friendly: "
            f"{state.get('query', '')}"
        )

        try:
            response = await self._llm.ainvoke([*state.get("messages", []), HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning("Query rewrite failed", error=str(e))
            return {
                "error": str(e),
                "metadata": {"rewrite_error": True, "query_rewrite_count": rewrites},
            }

        return {
            "query": message_text(response).strip() or state.get("query", ""),
            "metadata": {"last_node_run": "rewrite_query", "query_rewrite_count": rewrites},
        }

    def should_rewrite_query(self, state: AgentState) -> str:
        metadata = state.get("metadata", {})
        if metadata.get("retriever_status") == "not_configured":
            return "generate"

        relevant = metadata.get("relevant_docs_count", 0)
        rewrites = metadata.get("query_rewrite_count", 0)
        if relevant == 0 and rewrites < MAX_QUERY_REWRITES:
            return "rewrite"

        return "generate"

    async def run(self, query: str) -> AgentState:
        return await self._graph.ainvoke(initial_state(query, metadata={"agent_type": "rag"}))
