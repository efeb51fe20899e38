"""Tests for the MessengerBot base class."""

import pytest

from botkit.services.bot import MessengerBot
from botkit.services.dispatcher import DispatchStatus, WebhookDispatcher
from botkit.services.send_gateway import SendGateway
from tests.factories import messaging


class TestMessengerBot:
    """Test the default callbacks and hooks."""

    def test_no_initial_contexts(self):
        assert MessengerBot().initial_contexts() == []

    @pytest.mark.asyncio
    async def test_load_context_finds_nothing(self):
        assert await MessengerBot().load_context("page-123", None) is None

    def test_gateway_created_on_first_use(self, mock_settings):
        gateway = SendGateway(mock_settings)
        assert MessengerBot(gateway).gateway is gateway
        assert isinstance(MessengerBot().gateway, SendGateway)

    @pytest.mark.asyncio
    async def test_default_callbacks_accept_every_event_kind(
        self, registry, make_batch, sign_body
    ):
        dispatcher = WebhookDispatcher(MessengerBot(), registry)
        body = make_batch(
            messaging(message={"mid": "m1", "text": "hello"}),
            messaging(message={"mid": "m2", "text": "echo", "is_echo": True}),
            messaging(postback={"payload": "GET_STARTED"}),
            messaging(optin={"ref": "PASS_THROUGH"}),
            messaging(account_linking={"status": "linked", "authorization_code": "c"}),
            messaging(delivery={"mids": ["m0"], "watermark": 10, "seq": 1}),
            messaging(read={"watermark": 10, "seq": 2}),
        )

        result = await dispatcher.dispatch(body, sign_body(body), page_id="page-123")

        assert result == (DispatchStatus.OK, 7)
