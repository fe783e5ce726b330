"""Configuration loading for the trellis test runner.

This module provides centralized configuration management:
- Load settings from TRELLIS_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runner configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRELLIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Report configuration
    verbose: bool = Field(
        default=False,
        description="Report passing units and scopes, not only failures",
    )
    indent_per_level: int = Field(
        default=2,
        description="Spaces added to the report per describe() level",
    )
    show_tracebacks: bool = Field(
        default=True,
        description="Include full tracebacks in failure diagnostics",
    )
    reporter: Literal["stdout", "logging"] = Field(
        default="stdout",
        description="Where the finished report is written",
    )

    # Suites to run when none are given on the command line
    suites: list[str] = Field(
        default_factory=list,
        description="Suite references in module:attribute form",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("indent_per_level")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        """Ensure indentation step is positive."""
        if v <= 0:
            raise ValueError("indent_per_level must be positive")
        return v

    @field_validator("suites")
    @classmethod
    def validate_suites(cls, v: list[str]) -> list[str]:
        """Ensure every suite reference names a module and an attribute."""
        for ref in v:
            module, _, attribute = ref.partition(":")
            if not module or not attribute:
                raise ValueError(f"suite reference must be module:attribute, got {ref!r}")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load runner settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
