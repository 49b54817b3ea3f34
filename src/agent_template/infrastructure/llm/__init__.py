"""LLM client construction."""

from agent_template.infrastructure.llm.service import LLMService, cache_key

__all__ = ["LLMService", "cache_key"]
