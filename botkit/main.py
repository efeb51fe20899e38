"""FastAPI application factory."""

from contextlib import asynccontextmanager

import logfire
import sentry_sdk
import uvicorn
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from botkit.api import health, webhook
from botkit.config import Settings, get_settings
from botkit.logging_config import setup_logfire
from botkit.middleware.correlation_id import CorrelationIDMiddleware
from botkit.services.bot import MessengerBot
from botkit.services.context_registry import ContextRegistry
from botkit.services.dispatcher import WebhookDispatcher

APP_VERSION = "0.1.0"


def create_app(
    bot: MessengerBot,
    registry: ContextRegistry | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the webhook app for ``bot``.

    The registry is seeded with the context described by the settings (if
    any) and with ``bot.initial_contexts()``. Contexts the bot loads lazily
    are added to it while the app runs.

    Raises:
        ConfigurationError: the settings name a page but miss another field
    """
    settings = settings or get_settings()
    registry = registry if registry is not None else ContextRegistry()

    bootstrap = settings.bot_context()
    if bootstrap is not None:
        registry.add(bootstrap)
    for context in bot.initial_contexts():
        registry.add(context)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logfire(app, settings)

        if settings.sentry_dsn:
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=settings.sentry_traces_sample_rate,
                integrations=[FastApiIntegration()],
            )

        logfire.info(
            "Application startup complete",
            environment=settings.env,
            graph_api_version=settings.graph_api_version,
            bots=len(registry),
        )
        yield
        logfire.info("Application shutdown complete")

    app = FastAPI(
        title="Messenger Bot",
        description="Webhook receiver for a Messenger chat bot",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.bot = bot
    app.state.registry = registry
    app.state.dispatcher = WebhookDispatcher(bot, registry)

    # Correlation ID middleware (must be first for request tracing)
    app.add_middleware(CorrelationIDMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])

    return app


def serve(
    bot: MessengerBot,
    host: str = "0.0.0.0",
    port: int = 8000,
    registry: ContextRegistry | None = None,
) -> None:
    """Run the webhook app for ``bot`` with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        create_app(bot, registry, settings),
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )
