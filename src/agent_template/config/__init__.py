"""Configuration management for the agent template."""

from agent_template.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
