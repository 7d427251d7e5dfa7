"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voicebridge.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    version: str = "0.1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # Translation provider (server side of POST /translate)
    translation_provider: Literal["mymemory", "stub"] = "mymemory"
    mymemory_base_url: str = Field(
        default="https://api.mymemory.translated.net",
        description="Base URL of the MyMemory translation API",
    )
    provider_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout in seconds for upstream translation calls",
    )

    # Live pipeline
    live_translate_base_url: str = Field(
        default="",
        description=(
            "Base URL the live pipeline uses to reach POST /translate. "
            "Empty means call this app in-process."
        ),
    )
    debounce_window_ms: int = Field(
        default=200,
        description="Quiet period after the last final transcript before translating",
    )
    default_source_lang: str = "en"
    default_region: str = Field(
        default="IN",
        description="Region suffix appended to the source language for recognition",
    )
    voice_fallback_languages: str = Field(
        default="hi,en",
        description="Comma-separated language prefixes tried when no voice matches",
    )

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    otel_enabled: bool = False
    otlp_endpoint: str = ""  # OTLP collector endpoint (e.g., http://localhost:4317)
    otel_service_name: str = "voicebridge"
    prometheus_enabled: bool = True

    # CORS
    cors_allow_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (production only)",
    )

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field
    @property
    def debounce_window_seconds(self) -> float:
        return self.debounce_window_ms / 1000.0

    @computed_field
    @property
    def voice_fallback_list(self) -> list[str]:
        """Parse voice_fallback_languages into a list of lowercase prefixes."""
        return [
            lang.strip().lower()
            for lang in self.voice_fallback_languages.split(",")
            if lang.strip()
        ]

    @computed_field
    @property
    def cors_allow_origins_list(self) -> list[str]:
        """Parse cors_allow_origins into a list."""
        if not self.cors_allow_origins:
            return []
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    def log_config_summary(self) -> None:
        """Log a summary of the effective configuration."""
        logger.info(
            "Configuration loaded",
            extra={
                "environment": self.environment,
                "port": self.port,
                "translation_provider": self.translation_provider,
                "provider_timeout_seconds": self.provider_timeout_seconds,
                "live_translate_base_url": self.live_translate_base_url or "in-process",
                "debounce_window_ms": self.debounce_window_ms,
                "default_region": self.default_region,
                "voice_fallback": self.voice_fallback_list,
                "log_level": self.log_level,
                "otel_enabled": self.otel_enabled,
                "prometheus_enabled": self.prometheus_enabled,
            },
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
