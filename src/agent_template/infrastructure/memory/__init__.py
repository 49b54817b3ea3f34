"""Conversation memory implementations."""

from agent_template.infrastructure.memory.in_memory import InMemoryMemoryService

__all__ = ["InMemoryMemoryService"]
