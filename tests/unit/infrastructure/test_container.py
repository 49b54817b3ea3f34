# tests/unit/infrastructure/test_container.py
"""Unit tests for application wiring."""

import pytest

from agent_template.container import Container
from agent_template.infrastructure.llm import LLMService


@pytest.mark.unit
class TestContainer:
    def test_default_wiring(self, test_settings):
        """Test defaults are built and built-in tools registered."""
        container = Container(settings=test_settings)

        assert isinstance(container.llm_service, LLMService)
        assert container.tool_registry.tool_exists("echo")
        assert container.run_agent is not None

    def test_unsupported_memory_backend(self, test_settings):
        """Test only the in-memory backend can be wired."""
        test_settings.memory_backend = "postgresql"

        with pytest.raises(ValueError, match="postgresql"):
            Container(settings=test_settings)

    async def test_seed_agents(self, test_settings, tmp_path):
        """Test agents are seeded from agent_config_dir."""
        (tmp_path / "bot.yaml").write_text(
            "name: bot\ntype: general\nllm_config:\n  model_name: gpt-4\n"
        )
        test_settings.agent_config_dir = str(tmp_path)
        container = Container(settings=test_settings)

        assert await container.seed_agents() == 1
        assert (await container.agent_repository.find_by_name("bot")) is not None

    async def test_seed_agents_without_directory(self, test_settings):
        assert await Container(settings=test_settings).seed_agents() == 0
