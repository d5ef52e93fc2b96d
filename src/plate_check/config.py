"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_max_output_tokens: int = 4096
    openai_store: bool = False
    image_max_dimension: int = 1024
    image_jpeg_quality: int = 85
    relay_base_url: str = "http://localhost:8000"
    relay_timeout_seconds: float = 60.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def has_model_credentials(self) -> bool:
        """Return true when an upstream model API key is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())
