"""Application settings using Pydantic."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from harbourmaster.models.enums import Tier


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HARBOURMASTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ollama LLM Configuration
    llm_ollama_base_url: str = "http://localhost:11434"
    llm_model_name: str = "gpt-oss:20b"
    llm_request_timeout: int = 120
    llm_num_ctx: int = 8192
    llm_num_predict: int = 1024

    # Near-zero temperatures keep the structured JSON replies deterministic
    classifier_temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    cleaner_temperature: float = Field(default=0.2, ge=0.0, le=1.0)

    # Embeddings
    embedding_model_name: str = "nomic-embed-text"
    embedding_max_attempts: int = Field(default=3, ge=1)
    embedding_retry_min_wait: float = Field(default=2.0, ge=0.0)
    embedding_retry_max_wait: float = Field(default=30.0, ge=0.0)

    # Ingestion policy
    confidence_threshold: float = Field(default=0.90, ge=0.0, le=1.0)
    default_tier: Tier = Tier.PRO

    # Storage
    database_url: str = "sqlite:///data/harbourmaster.db"

    # Internal endpoints (embed trigger). None disables the key check.
    internal_api_key: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("default_tier", mode="before")
    @classmethod
    def _lowercase_tier(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
