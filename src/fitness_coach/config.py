"""Configuration settings for the Fitness Coach backend."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/fitness_coach/config.py
PACKAGE_ROOT = Path(__file__).parent  # src/fitness_coach/
PROJECT_ROOT = PACKAGE_ROOT.parent.parent  # repository root

ZHIPU_BASE_URL = "https://open.bigmodel.cn/api/paas/v4"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Completion endpoint (OpenAI-compatible)
    zhipu_api_key: str = ""
    zhipu_model: str = "glm-3-turbo"  # most compatible GLM model
    llm_base_url: str = ZHIPU_BASE_URL

    # Ask the provider for a JSON object on structured calls
    llm_json_mode: bool = False

    # Optional retry wrapper around the gateway; 0 disables it
    llm_max_retries: int = 0
    llm_retry_base_delay: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
