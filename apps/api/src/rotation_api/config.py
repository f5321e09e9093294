from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rotation_scheduler import (
    DEFAULT_MAX_STEPS,
    DEFAULT_MAX_TIME_IN_SECONDS,
    SearchConfig,
)


class Settings(BaseSettings):
    """Application settings"""

    # API Configuration
    api_title: str = "Rotation Scheduler API"
    api_version: str = "0.1.0"
    api_description: str = "Fair rotation scheduling with memoized branch-and-bound search"

    # Server Configuration
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8000
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root logging level")

    # Default search budget; request options override these
    search_strict: bool = Field(
        default=False, description="Keep every bound-passing branch (optimal, slower)"
    )
    search_stop_at_floor: bool = True
    search_max_steps: int | None = Field(
        default=DEFAULT_MAX_STEPS, description="Expansion budget per request"
    )
    search_max_time_seconds: float | None = Field(
        default=DEFAULT_MAX_TIME_IN_SECONDS, description="Wall-clock budget per request"
    )
    search_log_progress: bool = False

    # Environment
    environment: str = Field(
        default="development", pattern="^(development|staging|production|test)$"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level name"""
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("search_max_steps", "search_max_time_seconds")
    @classmethod
    def validate_budget(cls, v):
        """Budgets must be positive when set"""
        if v is not None and v <= 0:
            raise ValueError("Search budget must be positive")
        return v

    def search_config(self) -> SearchConfig:
        return SearchConfig(
            strict=self.search_strict,
            stop_at_floor=self.search_stop_at_floor,
            max_steps=self.search_max_steps,
            max_time_in_seconds=self.search_max_time_seconds,
            log_search_progress=self.search_log_progress,
        )

    model_config = SettingsConfigDict(
        env_prefix="ROTATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Global settings instance
settings = Settings()
