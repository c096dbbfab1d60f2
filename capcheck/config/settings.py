"""Configuration settings using Pydantic."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..probes.reporter import DEFAULT_TITLE, ReportStyle


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Report
    report_title: str = Field(default=DEFAULT_TITLE, alias="CAPCHECK_REPORT_TITLE")
    environment_name: str | None = Field(
        default=None,
        alias="CAPCHECK_ENV_NAME",
        description="Name shown in the report header (defaults to the environment's own name)",
    )
    report_style: ReportStyle = Field(
        default=ReportStyle.EMOJI,
        alias="CAPCHECK_REPORT_STYLE",
        description="Report markers: emoji or ascii",
    )

    # Execution
    sync_in_thread: bool = Field(
        default=False,
        alias="CAPCHECK_SYNC_IN_THREAD",
        description="Run non-async probe callbacks in worker threads",
    )

    # Logging
    log_level: str = Field(default="WARNING", alias="CAPCHECK_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()
