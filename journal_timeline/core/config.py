from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from pydantic import AnyUrl, Field
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_env: str = Field(default="development", alias="APP_ENV")
    frontend_url: AnyUrl = Field(
        default="http://localhost:3000", alias="FRONTEND_URL", validate_default=True
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Observability
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")
    sentry_traces_sample_rate: float = Field(
        default=0.0, alias="SENTRY_TRACES_SAMPLE_RATE"
    )

    # Limits
    max_section_chars: int = Field(default=5000, alias="MAX_SECTION_CHARS")

    @model_validator(mode="after")
    def validate_runtime_constraints(self) -> "Settings":
        frontend_origin = urlparse(str(self.frontend_url))
        frontend_host = (frontend_origin.hostname or "").lower()
        if self.is_production() and frontend_host in {"localhost", "127.0.0.1"}:
            raise ValueError(
                "Invalid FRONTEND_URL for production: localhost is not allowed. "
                "Set FRONTEND_URL to your public web domain."
            )

        if not (1 <= self.max_section_chars <= 100_000):
            raise ValueError("MAX_SECTION_CHARS must be 1..100000")
        if self.log_level.strip().upper() not in {
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        }:
            raise ValueError("LOG_LEVEL must be a standard logging level name")

        return self

    def is_production(self) -> bool:
        return (self.app_env or "").strip().lower() in {"production", "prod"}


settings = Settings()  # singleton import via env settings
