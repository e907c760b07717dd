import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using an absolute path for the local SQLite file."""
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "companion.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.debug(f"Using default database path: {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    plan_generator_provider: str = Field(
        default="openai",
        validation_alias="PLAN_GENERATOR_PROVIDER",
        description="LLM provider for program generation: openai, or test for offline dry runs",
    )
    plan_generator_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="PLAN_GENERATOR_MODEL",
        description="OpenAI model used to generate program text",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    advance_delay_seconds: float = Field(
        default=0.6,
        ge=0,
        validation_alias="ADVANCE_DELAY_SECONDS",
        description="Pause before moving focus to the next exercise (presentation only)",
    )
    finalize_delay_seconds: float = Field(
        default=0.3,
        ge=0,
        validation_alias="FINALIZE_DELAY_SECONDS",
        description="Pause before showing the finished session (presentation only)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("openai_api_key")
    @classmethod
    def warn_missing_api_key(cls, value: str) -> str:
        """Plan generation is optional; an empty key only disables it."""
        if not value:
            logger.debug("OPENAI_API_KEY is not set. Program generation will be unavailable.")
        return value


settings = Settings()
