"""Configuration settings for the working paper agent."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OUTPUT_DIR = "./output"


class FlatSettings(BaseSettings):
    """Flat settings read from environment variables or a local .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM
    google_api_key: SecretStr = Field(..., validation_alias="GOOGLE_API_KEY")
    gemini_model: str = Field(
        default="gemini-2.0-flash", validation_alias="GEMINI_MODEL"
    )
    llm_max_tokens: int = Field(default=8192, validation_alias="LLM_MAX_TOKENS")
    llm_temperature: float = Field(default=0.2, validation_alias="LLM_TEMPERATURE")

    # Agent
    output_dir: str = Field(default=DEFAULT_OUTPUT_DIR, validation_alias="WPA_OUTPUT_DIR")
    max_iterations: int = Field(default=10, validation_alias="WPA_MAX_ITERATIONS")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="LOG_FORMAT"
    )


@lru_cache
def get_settings() -> FlatSettings:
    """Get cached settings instance."""
    return FlatSettings()
