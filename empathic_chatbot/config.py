"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025", alias="GEMINI_MODEL"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    max_output_tokens: int = Field(default=500, alias="MAX_OUTPUT_TOKENS")
    temperature: float = Field(default=0.1, alias="TEMPERATURE")
    relay_timeout: float | None = Field(
        default=None, alias="RELAY_TIMEOUT", description="Seconds"
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    @property
    def generate_content_url(self) -> str:
        base = self.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.gemini_model}:generateContent"


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
