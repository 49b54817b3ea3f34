# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Async test support (pytest-asyncio auto mode)
- Settings override for the test environment
- Mock chat models that never reach a provider
- Application container, FastAPI app and async HTTP client
"""

from typing import AsyncGenerator, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage

from agent_template.api.app import create_app
from agent_template.config.settings import Settings
from agent_template.container import Container
from agent_template.interfaces import ILLMService


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest-asyncio to use auto mode."""
    config.option.asyncio_mode = "auto"


# ============================================================================
# Settings and Configuration
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """
    Test settings with overrides for test environment.

    ``.env`` files are ignored so the developer's local configuration never
    leaks into tests.
    """
    return Settings(
        _env_file=None,
        app_name="Agent Template Test",
        environment="test",
        openai_api_key="sk-test-key",
        anthropic_api_key="sk-ant-test-key",
        agent_timeout_ms=5000,
        session_expiry_minutes=30,
        log_level=40,  # ERROR level to reduce noise in tests
    )


# ============================================================================
# Mock LLMs
# ============================================================================

def _fresh(response):
    if isinstance(response, str):
        return AIMessage(content=response)
    return response.model_copy()


@pytest.fixture
def make_llm() -> Callable[..., MagicMock]:
    """
    Factory for mock chat models.

    With one argument every call answers with a new copy of it; with several
    the calls answer in order.

    Usage:
        llm = make_llm("Hello!")
        llm = make_llm(AIMessage(content="", tool_calls=[...]), "done")
    """

    def factory(*responses) -> MagicMock:
        llm = MagicMock()
        if len(responses) == 1:
            llm.ainvoke = AsyncMock(side_effect=lambda *args, **kwargs: _fresh(responses[0]))
        else:
            llm.ainvoke = AsyncMock(side_effect=[_fresh(r) for r in responses])
        llm.bind_tools.return_value = llm
        return llm

    return factory


@pytest.fixture
def mock_llm(make_llm) -> MagicMock:
    return make_llm("Hello from the agent")


@pytest.fixture
def llm_service(mock_llm) -> MagicMock:
    """LLM service stub that hands out ``mock_llm`` for every config."""
    service = MagicMock(spec=ILLMService)
    service.get_llm.return_value = mock_llm
    return service


# ============================================================================
# Application
# ============================================================================

@pytest.fixture
def container(test_settings: Settings, llm_service: MagicMock) -> Container:
    return Container(settings=test_settings, llm_service=llm_service)


@pytest.fixture
def app(container: Container) -> FastAPI:
    """
    Create FastAPI application for testing.

    This creates a fresh app instance with test configuration.
    """
    return create_app(container=container)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/agents/health/ping")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============================================================================
# Payloads
# ============================================================================

@pytest.fixture
def agent_config_data() -> dict:
    """AgentConfig mapping accepted by CreateAgent."""
    return {
        "name": "support-bot",
        "type": "general",
        "description": "Answers support questions",
        "llm_config": {"provider": "openai", "model_name": "gpt-4", "temperature": 0.2},
        "max_iterations": 5,
        "timeout_ms": 10000,
        "system_prompt": "You are a helpful assistant.",
    }


@pytest.fixture
def create_agent_body() -> dict:
    """Request body for POST /agents."""
    return {
        "name": "support-bot",
        "type": "general",
        "llm_provider": "openai",
        "llm_model": "gpt-4",
        "temperature": 0.2,
        "system_prompt": "You are a helpful assistant.",
        "max_iterations": 5,
        "timeout_ms": 10000,
        "tools": ["echo"],
    }
