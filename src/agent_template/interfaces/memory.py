# src/agent_template/interfaces/memory.py
from __future__ import annotations
from abc import ABC, abstractmethod

from langchain_core.messages import BaseMessage


class IMemoryService(ABC):
    """Port for per-session conversation history."""

    @abstractmethod
    async def get_memory(self, session_id: str) -> list[BaseMessage]:
        pass

    @abstractmethod
    async def save_messages(self, session_id: str, messages: list[BaseMessage]) -> None:
        """Replace the history of a session."""
        pass

    @abstractmethod
    async def add_message(self, session_id: str, message: BaseMessage) -> None:
        pass

    @abstractmethod
    async def clear_memory(self, session_id: str) -> None:
        pass

    @abstractmethod
    async def get_memory_summary(self, session_id: str) -> str:
        """One ``"{type}: {content}"`` line per message."""
        pass

    @abstractmethod
    async def has_memory(self, session_id: str) -> bool:
        pass

    @abstractmethod
    async def get_memory_size(self, session_id: str) -> int:
        pass

    @abstractmethod
    async def trim_memory(self, session_id: str, max_messages: int) -> None:
        """Keep only the last ``max_messages`` messages."""
        pass
