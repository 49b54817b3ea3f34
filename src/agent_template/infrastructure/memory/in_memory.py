"""In-memory conversation history keyed by session ID."""
import json

from langchain_core.messages import BaseMessage

from agent_template.interfaces.memory import IMemoryService


class InMemoryMemoryService(IMemoryService):
    """
    Keeps LangChain messages per session in a dict.

    Histories are copied on the way in and out so callers cannot mutate
    stored state by accident.
    """

    def __init__(self):
        self._memory: dict[str, list[BaseMessage]] = {}

    async def get_memory(self, session_id: str) -> list[BaseMessage]:
        return list(self._memory.get(session_id, []))

    async def save_messages(self, session_id: str, messages: list[BaseMessage]) -> None:
        self._memory[session_id] = list(messages)

    async def add_message(self, session_id: str, message: BaseMessage) -> None:
        self._memory.setdefault(session_id, []).append(message)

    async def clear_memory(self, session_id: str) -> None:
        self._memory.pop(session_id, None)

    async def get_memory_summary(self, session_id: str) -> str:
        lines = []
        for message in self._memory.get(session_id, []):
            content = message.content
            if not isinstance(content, str):
                content = json.dumps(content, default=str)
            lines.append(f"{message.type}: {content}")
        return "\n".join(lines)

    async def has_memory(self, session_id: str) -> bool:
        return bool(self._memory.get(session_id))

    async def get_memory_size(self, session_id: str) -> int:
        return len(self._memory.get(session_id, []))

    async def trim_memory(self, session_id: str, max_messages: int) -> None:
        messages = self._memory.get(session_id)
        if messages is None:
            return
        self._memory[session_id] = messages[-max_messages:] if max_messages > 0 else []
