"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire
from fastapi import FastAPI

from botkit.config import Settings, get_settings

SENSITIVE_KEYS = (
    "token",
    "access_token",
    "app_secret",
    "verify_token",
    "secret",
    "authorization",
    "phone_number",
)


def setup_logfire(app: FastAPI, settings: Settings | None = None) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - FastAPI instrumentation (webhook request/response tracing)
    - httpx instrumentation (Graph API calls)
    - Console formatting locally, bare messages elsewhere
    """
    settings = settings or get_settings()

    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)
    logfire.instrument_fastapi(app)
    logfire.instrument_httpx()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.env == "local":
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Logfire handles structured formatting
        logging.basicConfig(level=log_level, format="%(message)s")


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Shows the first and last two characters and masks the rest.
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """
    Redact tokens, secrets and phone numbers from log data.

    Nested dicts are redacted recursively; the input is not modified.
    """
    redacted = data.copy()

    for key, value in redacted.items():
        if isinstance(value, dict):
            redacted[key] = redact_tokens(value)
        elif key in SENSITIVE_KEYS and isinstance(value, str):
            redacted[key] = mask_pii(value)

    return redacted
