# src/agent_template/interfaces/llm.py
from __future__ import annotations
from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel

from agent_template.domain.models import LLMModelConfig, LLMProvider


class ILLMService(ABC):
    """
    Port for obtaining chat model clients.

    Implementations decide how clients are built and cached; callers only
    ever see a LangChain BaseChatModel.
    """

    @abstractmethod
    def get_llm(self, config: LLMModelConfig) -> BaseChatModel:
        """
        Return a chat model for the given configuration.

        Raises:
            InvalidAgentConfig: If the configuration is out of range
            LLMError: If the provider cannot be used (e.g. missing API key)
        """
        pass

    @abstractmethod
    async def is_available(self, config: LLMModelConfig) -> bool:
        """Return True if the model answers a trivial prompt."""
        pass

    @abstractmethod
    async def test_connection(self, config: LLMModelConfig) -> None:
        """Send a trivial prompt. Raises LLMError on failure."""
        pass

    @abstractmethod
    def list_models(self, provider: LLMProvider) -> list[str]:
        """Known model names for a provider."""
        pass

    @abstractmethod
    def clear_cache(self) -> int:
        """Drop cached clients and return how many were dropped."""
        pass
