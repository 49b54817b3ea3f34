# tests/unit/infrastructure/test_config_loader.py
"""Unit tests for seeding agents from YAML files."""

import pytest

from agent_template.infrastructure.config_loader import AgentConfigLoader

VALID = """\
name: {name}
type: general
llm_config:
  provider: openai
  model_name: gpt-4
tools: [echo]
"""


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "a.yaml").write_text(VALID.format(name="alpha"))
    (tmp_path / "b.yml").write_text(VALID.format(name="beta"))
    (tmp_path / "notes.txt").write_text("not an agent")
    return tmp_path


@pytest.mark.unit
class TestAgentConfigLoader:
    """Test loading and seeding."""

    def test_load_all(self, config_dir):
        """Test every YAML file is parsed in name order."""
        configs = AgentConfigLoader(config_dir).load_all()

        assert [config.name for config in configs] == ["alpha", "beta"]
        assert configs[0].tools == ["echo"]

    def test_invalid_files_are_skipped(self, config_dir):
        """Test malformed files do not stop the others from loading."""
        (config_dir / "broken.yaml").write_text("name: [oops\n")
        (config_dir / "wrong.yaml").write_text("name: x\ntype: robot\n")

        configs = AgentConfigLoader(config_dir).load_all()

        assert [config.name for config in configs] == ["alpha", "beta"]

    async def test_seed_creates_agents(self, config_dir, container):
        """Test seeding goes through CreateAgent."""
        created = await AgentConfigLoader(config_dir).seed(container.create_agent)

        assert {agent.name for agent in created} == {"alpha", "beta"}
        assert await container.agent_repository.count() == 2

    async def test_seed_skips_rejected_configs(self, config_dir, container):
        """Test configs rejected by CreateAgent are skipped."""
        (config_dir / "c.yaml").write_text(VALID.format(name="alpha"))
        (config_dir / "d.yaml").write_text("name: no-model\ntype: general\n")

        created = await AgentConfigLoader(config_dir).seed(container.create_agent)

        assert len(created) == 2

    async def test_missing_directory(self, tmp_path, container):
        """Test a missing directory seeds nothing."""
        loader = AgentConfigLoader(tmp_path / "missing")

        assert loader.files() == []
        assert await loader.seed(container.create_agent) == []
