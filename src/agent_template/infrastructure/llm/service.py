"""
Chat model construction and caching.

One client is built per (provider, model, temperature, max_tokens) and
reused for every agent that asks for the same combination.

Supported providers:
    - "openai"    → langchain_openai.ChatOpenAI
    - "azure"     → langchain_openai.AzureChatOpenAI
    - "anthropic" → langchain_anthropic.ChatAnthropic
"""

from __future__ import annotations

from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import AzureChatOpenAI, ChatOpenAI

from agent_template.config.settings import Settings
from agent_template.domain.exceptions import AppError, InvalidAgentConfig, LLMError
from agent_template.domain.models import LLMModelConfig, LLMProvider
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.llm import ILLMService

logger = get_logger(__name__)


MODEL_CATALOGUE: dict[LLMProvider, list[str]] = {
    LLMProvider.OPENAI: ["gpt-4-turbo", "gpt-4", "gpt-3.5-turbo", "gpt-3.5-turbo-16k"],
    LLMProvider.AZURE: ["gpt-4-turbo", "gpt-4", "gpt-35-turbo"],
    LLMProvider.ANTHROPIC: [
        "claude-3-opus-20240229",
        "claude-3-sonnet-20240229",
        "claude-3-haiku-20240307",
    ],
}


def cache_key(config: LLMModelConfig) -> str:
    """
    Build the client cache key for a model configuration.

    Example:
        >>> cache_key(LLMModelConfig(model_name="gpt-4", temperature=0.2))
        'openai:gpt-4:0.2:default'
    """
    temperature = config.temperature if config.temperature is not None else "default"
    max_tokens = config.max_tokens if config.max_tokens is not None else "default"
    return f"{config.provider.value}:{config.model_name}:{temperature}:{max_tokens}"


def validate_model_config(config: LLMModelConfig) -> None:
    """
    Check numeric ranges before a client is built.

    Raises:
        InvalidAgentConfig: If any value is out of range
    """
    if not config.model_name:
        raise InvalidAgentConfig("Model name is required")

    if config.temperature is not None and not 0 <= config.temperature <= 2:
        raise InvalidAgentConfig("Temperature must be between 0 and 2")

    if config.max_tokens is not None and config.max_tokens <= 0:
        raise InvalidAgentConfig("Max tokens must be greater than 0")

    if config.top_p is not None and not 0 <= config.top_p <= 1:
        raise InvalidAgentConfig("Top P must be between 0 and 1")


class LLMService(ILLMService):
    """
    Builds and caches LangChain chat models from settings and per-agent config.

    Example:
        >>> service = LLMService(get_settings())
        >>> llm = service.get_llm(LLMModelConfig(model_name="gpt-4"))
        >>> llm is service.get_llm(LLMModelConfig(model_name="gpt-4"))
        True
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._cache: dict[str, BaseChatModel] = {}

    def get_llm(self, config: LLMModelConfig) -> BaseChatModel:
        validate_model_config(config)

        key = cache_key(config)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        llm = self._build(config)
        self._cache[key] = llm
        logger.info(
            "LLM client created",
            provider=config.provider.value,
            model=config.model_name,
            cache_key=key,
        )
        return llm

    async def is_available(self, config: LLMModelConfig) -> bool:
        try:
            await self.test_connection(config)
        except AppError as e:
            logger.warning("LLM not available", model=config.model_name, error=e.message)
            return False
        return True

    async def test_connection(self, config: LLMModelConfig) -> None:
        llm = self.get_llm(config)
        try:
            response = await llm.ainvoke([HumanMessage(content="test")])
        except Exception as e:
            raise LLMError(
                f"Connection test failed for {config.provider.value}:{config.model_name}: {e}",
                details={"provider": config.provider.value, "model": config.model_name},
            ) from e

        if not response.content:
            raise LLMError(
                "Connection test returned an empty response",
                details={"provider": config.provider.value, "model": config.model_name},
            )

    def list_models(self, provider: LLMProvider) -> list[str]:
        return list(MODEL_CATALOGUE.get(provider, []))

    def clear_cache(self) -> int:
        count = len(self._cache)
        self._cache.clear()
        return count

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def _build(self, config: LLMModelConfig) -> BaseChatModel:
        settings = self._settings
        kwargs: dict[str, Any] = {
            "temperature": (
                config.temperature
                if config.temperature is not None
                else settings.llm_default_temperature
            ),
            "timeout": settings.llm_request_timeout,
            "max_retries": settings.llm_max_retries,
        }
        if config.max_tokens is not None:
            kwargs["max_tokens"] = config.max_tokens
        if config.top_p is not None:
            kwargs["top_p"] = config.top_p

        if config.provider == LLMProvider.OPENAI:
            if not settings.openai_api_key:
                raise LLMError("OPENAI_API_KEY is required when the provider is 'openai'")
            return ChatOpenAI(
                model=config.model_name,
                api_key=settings.openai_api_key.get_secret_value(),
                **kwargs,
            )

        if config.provider == LLMProvider.AZURE:
            if not settings.azure_openai_api_key or not settings.azure_openai_endpoint:
                raise LLMError(
                    "AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT are required "
                    "when the provider is 'azure'"
                )
            return AzureChatOpenAI(
                azure_deployment=config.model_name,
                azure_endpoint=settings.azure_openai_endpoint,
                api_version=settings.azure_openai_api_version,
                api_key=settings.azure_openai_api_key.get_secret_value(),
                **kwargs,
            )

        if config.provider == LLMProvider.ANTHROPIC:
            if not settings.anthropic_api_key:
                raise LLMError("ANTHROPIC_API_KEY is required when the provider is 'anthropic'")
            return ChatAnthropic(
                model=config.model_name,
                api_key=settings.anthropic_api_key.get_secret_value(),
                **kwargs,
            )

        raise InvalidAgentConfig(f"Unsupported LLM provider: {config.provider}")
