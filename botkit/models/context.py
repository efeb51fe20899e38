"""Bot configuration models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from botkit.exceptions import ConfigurationError

_REQUIRED_FIELDS = (
    "page_id",
    "page_access_token",
    "app_secret",
    "verify_token",
    "webhook_url",
)


class BotContext(BaseModel):
    """Configuration of a single bot.

    Immutable once constructed. Every string field is required and must be
    non-empty, otherwise construction raises ConfigurationError.
    """

    model_config = ConfigDict(frozen=True)

    page_id: str = Field(..., description="Page ID the bot answers for")
    page_access_token: str = Field(..., description="Page access token")
    app_secret: str = Field(..., description="App secret used to sign webhooks")
    verify_token: str = Field(..., description="Webhook handshake token")
    webhook_url: str = Field(..., description="Public URL of the webhook")
    validate_signatures: bool = Field(
        default=True,
        description="Reject webhook deliveries with a bad x-hub-signature",
    )
    debug: bool = Field(
        default=False,
        description="Log raw Graph API payloads (tokens redacted)",
    )

    @model_validator(mode="before")
    @classmethod
    def _require_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for name in _REQUIRED_FIELDS:
                value = data.get(name)
                if not isinstance(value, str) or not value:
                    raise ConfigurationError(name)
        return data
