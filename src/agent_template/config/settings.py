from functools import lru_cache
from typing import Literal
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Values come from the process environment or a local ``.env`` file.
    Secrets use SecretStr so they never end up in logs or reprs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "LangGraph Agent Template"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # LLM provider
    llm_provider: Literal["openai", "anthropic", "azure"] = "openai"
    llm_model: str = "gpt-4"
    openai_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None
    azure_openai_api_key: SecretStr | None = None
    azure_openai_endpoint: str | None = None
    azure_openai_api_version: str = "2024-02-01"
    llm_default_temperature: float = 0.7
    llm_request_timeout: float = 60.0  # seconds
    llm_max_retries: int = 3

    # Agent defaults
    agent_max_iterations: int = Field(default=10, ge=1)
    agent_timeout_ms: int = Field(default=30000, ge=1)
    agent_config_dir: str | None = None  # directory of *.yaml agent definitions

    # Feature flags
    enable_streaming: bool = True
    enable_memory_persistence: bool = False

    # Memory / sessions
    memory_backend: Literal["in-memory", "postgresql", "mongodb"] = "in-memory"
    memory_max_messages: int = 100
    session_expiry_minutes: int = 60

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
