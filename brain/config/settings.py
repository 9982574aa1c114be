from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_MODES = ("student", "freelancer", "creator")


class Settings(BaseSettings):
    app_name: str = Field(default="Assistant Brain", validation_alias="APP_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="Optional path for a rotating log file",
    )
    default_mode: str = Field(
        default="student",
        validation_alias="DEFAULT_MODE",
        description="Mode used when an assistant request does not name one",
    )
    register_internal_executors: bool = Field(
        default=True,
        validation_alias="REGISTER_INTERNAL_EXECUTORS",
        description="Register first-party action executors at startup",
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

    @field_validator("default_mode")
    @classmethod
    def validate_default_mode(cls, value: str) -> str:
        """Fall back to student mode when DEFAULT_MODE is not a known mode."""
        lowered = value.strip().lower()
        if lowered not in VALID_MODES:
            logger.warning(f"Invalid DEFAULT_MODE '{value}'. Valid modes are: {', '.join(VALID_MODES)}. Defaulting to student.")
            return "student"
        return lowered

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
