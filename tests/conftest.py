"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Contexts: bot_context, other_bot_context, registry
2. Bots: recording_bot (collects every callback it receives)
3. Webhook helpers: make_batch, sign_body
4. Infrastructure: mock_settings, mock_logfire, dispatcher, test_client
"""

import json
import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock

import pytest

from botkit.config import Settings
from botkit.models.context import BotContext
from botkit.services.context_registry import ContextRegistry
from botkit.services.dispatcher import WebhookDispatcher
from botkit.services.signature import compute_signature
from tests.factories import RecordingBot

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

TEST_APP_SECRET = "test-app-secret"
TEST_VERIFY_TOKEN = "test-verify-token"
TEST_WEBHOOK_URL = "http://testserver/webhook"


@pytest.fixture(autouse=True)
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Auto-applied so no test needs a configured Logfire project. Tests that
    assert on logging take the fixture and inspect the Mock calls.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.debug = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_httpx = Mock()

    for module in (
        "botkit.services.dispatcher",
        "botkit.services.send_gateway",
        "botkit.services.user_profile",
        "botkit.services.context_registry",
        "botkit.middleware.correlation_id",
        "botkit.logging_config",
        "botkit.main",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def mock_settings():
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        graph_api_base_url="https://graph.facebook.com",
        graph_api_version="v2.6",
        env="local",
        logfire_token=None,
        sentry_dsn=None,
        page_id=None,
    )


@pytest.fixture
def bot_context():
    return BotContext(
        page_id="page-123",
        page_access_token="test-page-token",
        app_secret=TEST_APP_SECRET,
        verify_token=TEST_VERIFY_TOKEN,
        webhook_url=TEST_WEBHOOK_URL,
    )


@pytest.fixture
def other_bot_context():
    return BotContext(
        page_id="page-456",
        page_access_token="other-page-token",
        app_secret="other-app-secret",
        verify_token="other-verify-token",
        webhook_url="http://testserver/webhook/page-456",
    )


@pytest.fixture
def registry(bot_context):
    return ContextRegistry([bot_context])


@pytest.fixture
def recording_bot():
    return RecordingBot()


@pytest.fixture
def dispatcher(recording_bot, registry):
    return WebhookDispatcher(recording_bot, registry)


@pytest.fixture
def test_client(recording_bot, registry, mock_settings):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    from botkit.main import create_app

    return TestClient(create_app(recording_bot, registry, mock_settings))


@pytest.fixture
def sign_body():
    """Return a function producing the x-hub-signature header for a body."""

    def _sign(body: bytes, secret: str = TEST_APP_SECRET) -> str:
        return "sha1=" + compute_signature(body, secret)

    return _sign


@pytest.fixture
def make_batch():
    """Return a function wrapping messaging objects into a webhook body."""

    def _make(*events: dict, page_id: str = "page-123") -> bytes:
        body = {
            "object": "page",
            "entry": [{"id": page_id, "time": 1458692752478, "messaging": list(events)}],
        }
        return json.dumps(body).encode("utf-8")

    return _make
