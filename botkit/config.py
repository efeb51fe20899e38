"""Library configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from botkit.constants import (
    GRAPH_API_BASE_URL,
    GRAPH_API_TIMEOUT_SECONDS,
    GRAPH_API_VERSION,
)
from botkit.models.context import BotContext


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Graph API
    graph_api_base_url: str = Field(
        default=GRAPH_API_BASE_URL, description="Graph API host"
    )
    graph_api_version: str = Field(
        default=GRAPH_API_VERSION, description="Graph API version path segment"
    )
    graph_api_timeout_seconds: float = Field(
        default=GRAPH_API_TIMEOUT_SECONDS,
        description="Timeout for Graph API calls (seconds)",
    )

    # Environment
    env: Literal["local", "staging", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Observability
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token"
    )
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # ==========================================================================
    # Single-bot bootstrap (optional)
    # ==========================================================================
    # When page_id is set, the app registers a context built from these
    # fields at startup. Multi-bot hosts leave them unset and register
    # contexts themselves.

    page_id: str | None = Field(default=None, description="Page ID")
    page_access_token: str | None = Field(
        default=None, description="Page access token"
    )
    app_secret: str | None = Field(
        default=None, description="App secret for signature verification"
    )
    verify_token: str | None = Field(
        default=None, description="Webhook verification token"
    )
    webhook_url: str | None = Field(
        default=None, description="Public URL of the webhook"
    )
    validate_signatures: bool = Field(
        default=True, description="Verify x-hub-signature on deliveries"
    )
    debug: bool = Field(default=False, description="Log raw Graph API payloads")

    @property
    def graph_api_url(self) -> str:
        return f"{self.graph_api_base_url.rstrip('/')}/{self.graph_api_version}"

    def bot_context(self) -> BotContext | None:
        """Build the bootstrap BotContext, or None when no page is configured.

        Raises:
            ConfigurationError: page_id is set but another field is missing
        """
        if not self.page_id:
            return None
        return BotContext(
            page_id=self.page_id,
            page_access_token=self.page_access_token,
            app_secret=self.app_secret,
            verify_token=self.verify_token,
            webhook_url=self.webhook_url,
            validate_signatures=self.validate_signatures,
            debug=self.debug,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
