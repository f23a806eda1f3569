"""Environment-bound configuration objects.

Pydantic BaseSettings-based configuration loaded from environment variables and
an optional .env file. Several settings accept more than one variable name
(e.g. OPENAI_API_KEY and MODEL_API_KEY both work).

Example:
    from researchAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    root = settings.storage.workspace_root
    max_loops = settings.governance.max_loops
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelSettings(BaseSettings):
    """Chat model provider and credentials.

    - AI_PROVIDER: provider name (only "openai" and OpenAI-compatible endpoints)
    - MODEL_ID / OPENAI_MODEL: model identifier
    - OPENAI_API_KEY / MODEL_API_KEY: credentials
    - OPENAI_BASE_URL / MODEL_BASE_URL: optional compatible endpoint
    """

    provider: str = Field(default="openai", validation_alias=AliasChoices("AI_PROVIDER", "MODEL_PROVIDER"))
    model: str = Field(default="gpt-4o", validation_alias=AliasChoices("MODEL_ID", "OPENAI_MODEL"))
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "MODEL_API_KEY"),
    )
    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "MODEL_BASE_URL"),
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class StorageSettings(BaseSettings):
    """Document store and durable state configuration.

    - workspace_root: prefix shared by every agent workspace in the bucket
    - specialist_prefix: sub-prefix holding one folder per specialist
    - max_retries / retry_*_delay: bounded backoff for transient bucket errors
    - state_dir: directory for JSON actor state (in-memory when unset)
    """

    workspace_root: str = Field(default="memory/", alias="AGENT_WORKSPACE_ROOT")
    specialist_prefix: str = Field(default="research_agents/")
    max_retries: int = Field(default=3, ge=0, le=10, alias="STORAGE_MAX_RETRIES")
    retry_base_delay: float = Field(default=1.0, ge=0.0)
    retry_max_delay: float = Field(default=5.0, ge=0.0)
    state_dir: Optional[str] = Field(default=None, alias="AGENT_STATE_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("workspace_root", "specialist_prefix")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip("/")
        return f"{value}/" if value else ""

    def specialist_root(self, agent_id: str) -> str:
        """Bucket prefix owned by one specialist."""
        return f"{self.workspace_root}{self.specialist_prefix}{agent_id}/"


class GovernanceSettings(BaseSettings):
    """Runtime governance.

    - max_loops: agent ⇄ tools iterations allowed per turn (1-200, default: 25)
    - orchestrator_name: identity of the human-facing orchestrator
    """

    max_loops: int = Field(default=25, ge=1, le=200, alias="MAX_LOOPS")
    orchestrator_name: str = Field(default="default", alias="ORCHESTRATOR_NAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def recursion_limit(self) -> int:
        # Each loop is an agent step plus a tools step
        return self.max_loops * 2 + 1


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings.

    Nested groups:
    - models: chat model provider (ModelSettings)
    - storage: document store and actor state (StorageSettings)
    - governance: loop limits and orchestrator identity (GovernanceSettings)
    - observability: logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    models: ModelSettings = Field(default_factory=ModelSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    return Settings()
