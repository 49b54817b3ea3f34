# tests/unit/infrastructure/test_llm_service.py
"""Unit tests for the LLM service."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage
from langchain_openai import AzureChatOpenAI, ChatOpenAI
from pydantic import SecretStr

from agent_template.domain import InvalidAgentConfig, LLMError
from agent_template.domain.models import LLMModelConfig, LLMProvider
from agent_template.infrastructure.llm import LLMService, cache_key


@pytest.fixture
def service(test_settings) -> LLMService:
    return LLMService(test_settings)


@pytest.mark.unit
class TestCacheKey:
    def test_defaults(self):
        assert cache_key(LLMModelConfig(model_name="gpt-4")) == "openai:gpt-4:default:default"

    def test_zero_temperature_is_kept(self):
        key = cache_key(LLMModelConfig(model_name="gpt-4", temperature=0.0, max_tokens=256))
        assert key == "openai:gpt-4:0.0:256"


@pytest.mark.unit
class TestLLMService:
    """Test client construction and caching."""

    def test_builds_openai_client(self, service):
        """Test the OpenAI provider yields a ChatOpenAI client."""
        llm = service.get_llm(LLMModelConfig(model_name="gpt-4", temperature=0.3, max_tokens=128))

        assert isinstance(llm, ChatOpenAI)
        assert llm.model_name == "gpt-4"
        assert llm.temperature == 0.3
        assert llm.max_tokens == 128

    def test_builds_anthropic_client(self, service):
        """Test the Anthropic provider yields a ChatAnthropic client."""
        llm = service.get_llm(
            LLMModelConfig(provider=LLMProvider.ANTHROPIC, model_name="claude-3-haiku-20240307")
        )

        assert isinstance(llm, ChatAnthropic)

    def test_builds_azure_client(self, test_settings):
        """Test the Azure provider yields an AzureChatOpenAI client."""
        test_settings.azure_openai_api_key = SecretStr("azure-test-key")
        test_settings.azure_openai_endpoint = "https://example.openai.azure.com"

        llm = LLMService(test_settings).get_llm(
            LLMModelConfig(provider=LLMProvider.AZURE, model_name="gpt-4")
        )

        assert isinstance(llm, AzureChatOpenAI)

    def test_same_key_returns_same_instance(self, service):
        """Test cache hits return the cached client."""
        config = LLMModelConfig(model_name="gpt-4", temperature=0.5)

        first = service.get_llm(config)
        second = service.get_llm(LLMModelConfig(model_name="gpt-4", temperature=0.5))
        other = service.get_llm(LLMModelConfig(model_name="gpt-4", temperature=0.9))

        assert first is second
        assert other is not first
        assert service.cache_size == 2

    def test_clear_cache(self, service):
        """Test clearing the cache reports how many clients were dropped."""
        service.get_llm(LLMModelConfig(model_name="gpt-4"))

        assert service.clear_cache() == 1
        assert service.cache_size == 0

    def test_missing_api_key(self, test_settings):
        """Test a missing provider key raises LLMError."""
        test_settings.openai_api_key = None

        with pytest.raises(LLMError, match="OPENAI_API_KEY"):
            LLMService(test_settings).get_llm(LLMModelConfig(model_name="gpt-4"))

    @pytest.mark.parametrize(
        "config, message",
        [
            (LLMModelConfig(model_name=""), "Model name is required"),
            (LLMModelConfig(model_name="gpt-4", temperature=2.5), "Temperature must be between 0 and 2"),
            (LLMModelConfig(model_name="gpt-4", temperature=-0.1), "Temperature must be between 0 and 2"),
            (LLMModelConfig(model_name="gpt-4", max_tokens=0), "Max tokens must be greater than 0"),
            (LLMModelConfig(model_name="gpt-4", top_p=1.5), "Top P must be between 0 and 1"),
        ],
    )
    def test_invalid_config(self, service, config, message):
        """Test out-of-range values are rejected before construction."""
        with pytest.raises(InvalidAgentConfig) as exc_info:
            service.get_llm(config)

        assert exc_info.value.reason == message
        assert service.cache_size == 0

    def test_list_models(self, service):
        """Test the static catalogue per provider."""
        assert "gpt-4" in service.list_models(LLMProvider.OPENAI)
        assert all(m.startswith("claude") for m in service.list_models(LLMProvider.ANTHROPIC))


@pytest.mark.unit
class TestConnectionChecks:
    """Test connectivity probes with a mock client."""

    async def test_available(self, service):
        """Test a non-empty response means available."""
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content="ok"))

        with patch.object(service, "_build", return_value=llm):
            assert await service.is_available(LLMModelConfig(model_name="gpt-4")) is True

    async def test_provider_error(self, service):
        """Test provider failures are wrapped in LLMError."""
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("401 unauthorized"))
        config = LLMModelConfig(model_name="gpt-4")

        with patch.object(service, "_build", return_value=llm):
            with pytest.raises(LLMError, match="401 unauthorized"):
                await service.test_connection(config)
            assert await service.is_available(config) is False

    async def test_empty_response(self, service):
        """Test an empty answer counts as a failed connection."""
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content=""))

        with patch.object(service, "_build", return_value=llm):
            with pytest.raises(LLMError, match="empty response"):
                await service.test_connection(LLMModelConfig(model_name="gpt-4"))
