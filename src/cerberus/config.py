"""Application configuration using pydantic-settings.

Every option can be set from the environment (upper-case field name) or a
local .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_csv(value: str) -> list[str]:
    """Split a comma-separated option, dropping blanks."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=4000, description="API server port")
    cors_origins: str = Field(default="*", description="Comma-separated allowed CORS origins")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    # ======================
    # Upstream aggregator
    # ======================
    quote_backends: str = Field(
        default="https://quote-api.jup.ag/v6,https://lite-api.jup.ag/swap/v1",
        description="Ordered, comma-separated quote API base URLs",
    )
    build_url: str = Field(
        default="https://quote-api.jup.ag/v6/swap",
        description="Swap transaction build endpoint",
    )
    jup_api_key: str = Field(default="", description="Optional API key sent to the build endpoint")
    lite_base: str = Field(
        default="https://lite-api.jup.ag", description="Token list / shield passthrough base URL"
    )
    shield_base: str = Field(
        default="", description="Risk signal base URL for the safety gate (empty = disabled)"
    )
    upstream_timeout: float = Field(default=10.0, description="Upstream HTTP timeout in seconds")
    upstream_max_attempts: int = Field(default=3, ge=1, description="Attempts per quote backend")
    upstream_backoff_ms: int = Field(
        default=120, ge=0, description="Linear backoff step between quote attempts"
    )

    # ======================
    # Caching
    # ======================
    quote_cache_ttl_ms: int = Field(default=15_000, ge=0, description="Quote cache TTL")
    quote_cache_max: int = Field(default=500, ge=1, description="Maximum cached fingerprints")
    redis_url: Optional[str] = Field(
        default=None, description="Shared cache URL (unset = process-local only)"
    )

    # ======================
    # Safety Gate
    # ======================
    blocked_mints: str = Field(default="", description="Comma-separated denylist of mints")
    allowed_mints: str = Field(
        default="", description="Comma-separated allowlist of mints (empty = allow all)"
    )
    shield_cache_ttl: int = Field(default=60, ge=1, description="Risk signal memo TTL in seconds")

    # ======================
    # Rate limiting
    # ======================
    rate_limit_per_minute: int = Field(
        default=60, ge=0, description="Per-IP /order requests per minute (0 = disabled)"
    )

    @property
    def backend_list(self) -> list[str]:
        """Quote backends in priority order, without trailing slashes."""
        return [url.rstrip("/") for url in parse_csv(self.quote_backends)]

    @property
    def blocked_set(self) -> frozenset[str]:
        return frozenset(parse_csv(self.blocked_mints))

    @property
    def allowed_set(self) -> frozenset[str]:
        return frozenset(parse_csv(self.allowed_mints))

    @property
    def cors_origin_list(self) -> list[str]:
        return parse_csv(self.cors_origins)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "upstream": {
                "backends": self.backend_list,
                "build_url": self.build_url,
                "api_key": "***" if self.jup_api_key else "(not set)",
                "lite_base": self.lite_base,
                "shield_base": self.shield_base or "(disabled)",
                "timeout": self.upstream_timeout,
                "max_attempts": self.upstream_max_attempts,
                "backoff_ms": self.upstream_backoff_ms,
            },
            "cache": {
                "ttl_ms": self.quote_cache_ttl_ms,
                "max_entries": self.quote_cache_max,
                "shared": self._redact_url(self.redis_url) if self.redis_url else "(process-local)",
            },
            "safety": {
                "blocked": len(self.blocked_set),
                "allowed": len(self.allowed_set),
                "shield_cache_ttl": self.shield_cache_ttl,
            },
            "rate_limit_per_minute": self.rate_limit_per_minute,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact the password part of a connection URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
