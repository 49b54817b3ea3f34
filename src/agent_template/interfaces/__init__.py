# src/agent_template/interfaces/__init__.py
from .repository import IAgentRepository, ISessionRepository
from .llm import ILLMService
from .memory import IMemoryService
from .tool import IToolRegistry

__all__ = [
    "IAgentRepository",
    "ISessionRepository",
    "ILLMService",
    "IMemoryService",
    "IToolRegistry",
]
