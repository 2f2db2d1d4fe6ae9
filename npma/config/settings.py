import codecs
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from npma.services.logparser.constants import SENTINEL


class LogSettings(BaseSettings):
    """Diagnostic logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    rich_tracebacks: bool = Field(default=True, description="Render tracebacks with rich")


class ScanSettings(BaseSettings):
    """Log scanning configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SCAN_", env_file=".env", extra="ignore")

    encoding: str = Field(default="utf-8", description="Encoding used to read log files")
    sentinel: str = Field(
        default=SENTINEL,
        description="Substring marking the end of a log record",
    )
    default_top: int | None = Field(
        default=None,
        description="Number of groups shown when grouping without --top. None shows all.",
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        """Ensure the encoding is known to the codec registry."""
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {value}") from e
        return value

    @model_validator(mode="after")
    def validate_default_top(self) -> "ScanSettings":
        """Ensure the default group limit is positive when set."""
        if self.default_top is not None and self.default_top < 1:
            raise ValueError(f"default_top must be positive, got {self.default_top}")
        return self

    @model_validator(mode="after")
    def validate_sentinel(self) -> "ScanSettings":
        """Ensure the record sentinel is not blank."""
        if not self.sentinel.strip():
            raise ValueError("sentinel must not be empty")
        return self


class Settings(BaseSettings):
    """Main application settings.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values

    Example .env file:
        LOG_LEVEL=DEBUG
        SCAN_ENCODING=latin-1
        SCAN_DEFAULT_TOP=20
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log: LogSettings = Field(default_factory=LogSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
