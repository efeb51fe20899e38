"""Tests for bot context, widget and event models."""

import pytest
from hypothesis import given, strategies as st

from botkit.constants import LimitField
from botkit.exceptions import (
    ConfigurationError,
    InvalidRecipientError,
    LimitExceededError,
    UnsupportedOperationError,
)
from botkit.models.context import BotContext
from botkit.models.incoming import (
    AccountLinking,
    AccountLinkingStatus,
    Attachment,
    AttachmentType,
    TextMessage,
)
from botkit.models.outgoing import (
    Bubble,
    Button,
    ButtonType,
    QuickReply,
    Recipient,
)
from botkit.models.responses import NETWORK_ERROR, SendError, SendSuccess

CONTEXT_FIELDS = {
    "page_id": "page-1",
    "page_access_token": "token",
    "app_secret": "secret",
    "verify_token": "verify",
    "webhook_url": "https://example.com/webhook",
}

ENVELOPE = {"sender_id": "user-1", "recipient_id": "page-1", "timestamp": 1}


class TestBotContext:
    """Test BotContext construction."""

    def test_valid_context_defaults(self):
        context = BotContext(**CONTEXT_FIELDS)
        assert context.validate_signatures is True
        assert context.debug is False

    @pytest.mark.parametrize("field", list(CONTEXT_FIELDS))
    def test_empty_field_raises_configuration_error(self, field):
        with pytest.raises(ConfigurationError) as exc_info:
            BotContext(**{**CONTEXT_FIELDS, field: ""})
        assert exc_info.value.field == field
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("field", list(CONTEXT_FIELDS))
    def test_missing_field_raises_configuration_error(self, field):
        fields = {k: v for k, v in CONTEXT_FIELDS.items() if k != field}
        with pytest.raises(ConfigurationError) as exc_info:
            BotContext(**fields)
        assert exc_info.value.field == field

    def test_none_field_raises_configuration_error(self):
        with pytest.raises(ConfigurationError):
            BotContext(**{**CONTEXT_FIELDS, "app_secret": None})

    def test_context_is_immutable(self):
        context = BotContext(**CONTEXT_FIELDS)
        with pytest.raises(Exception):
            context.page_id = "other"


class TestRecipient:
    def test_id_only(self):
        assert Recipient(id="123").to_payload() == {"id": "123"}

    def test_phone_number_only(self):
        assert Recipient(phone_number="+15551234").to_payload() == {
            "phone_number": "+15551234"
        }

    def test_neither_raises(self):
        with pytest.raises(InvalidRecipientError):
            Recipient()

    def test_both_raises(self):
        with pytest.raises(InvalidRecipientError):
            Recipient(id="123", phone_number="+15551234")


class TestQuickReply:
    def test_title_at_limit_is_accepted(self):
        assert QuickReply("x" * 20, "P").title == "x" * 20

    def test_title_over_limit_raises(self):
        with pytest.raises(LimitExceededError) as exc_info:
            QuickReply("x" * 21, "P")
        assert exc_info.value.field == LimitField.TITLE

    def test_title_over_limit_with_force(self):
        assert QuickReply("x" * 21, "P", force=True).title == "x" * 21

    def test_payload_over_limit_raises(self):
        with pytest.raises(LimitExceededError) as exc_info:
            QuickReply("Yes", "p" * 1001)
        assert exc_info.value.field == LimitField.PAYLOAD

    def test_validity_requires_title_and_payload(self):
        assert QuickReply("Yes", "YES").is_valid()
        assert not QuickReply("Yes").is_valid()
        assert not QuickReply(payload="YES").is_valid()

    def test_payload_serialization(self):
        assert QuickReply("Yes", "YES").to_payload() == {
            "content_type": "text",
            "title": "Yes",
            "payload": "YES",
        }


class TestButton:
    """Test Button type rules."""

    def test_web_url_button(self):
        button = Button.web_url("Open", "https://example.com")
        assert button.is_valid()
        assert button.to_payload() == {
            "type": "web_url",
            "title": "Open",
            "url": "https://example.com",
        }

    def test_postback_button(self):
        button = Button.postback("Start", "START")
        assert button.is_valid()
        assert button.to_payload()["payload"] == "START"

    def test_phone_number_button(self):
        button = Button.phone_number("Call", "+15551234")
        assert button.type == ButtonType.PHONE_NUMBER
        assert button.is_valid()

    def test_url_on_postback_button_is_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            Button.postback("Start", "START").set_url("https://example.com")

    def test_payload_on_web_url_button_is_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            Button.web_url("Open", "https://example.com").set_payload("X")

    def test_button_without_title_is_invalid(self):
        assert not Button(ButtonType.POSTBACK, payload="X").is_valid()

    def test_web_url_button_without_url_is_invalid(self):
        assert not Button(ButtonType.WEB_URL, title="Open").is_valid()

    def test_title_over_limit_raises(self):
        with pytest.raises(LimitExceededError):
            Button.postback("t" * 21, "X")


class TestBubble:
    def test_title_limit_is_80(self):
        Bubble("t" * 80)
        with pytest.raises(LimitExceededError) as exc_info:
            Bubble("t" * 81)
        assert exc_info.value.field == LimitField.BUBBLE_TITLE

    def test_subtitle_limit_is_80(self):
        with pytest.raises(LimitExceededError) as exc_info:
            Bubble("Title", subtitle="s" * 81)
        assert exc_info.value.field == LimitField.SUBTITLE

    def test_fourth_button_raises(self):
        bubble = Bubble("Title")
        for i in range(3):
            bubble.add_button(Button.postback(f"B{i}", f"P{i}"))
        with pytest.raises(LimitExceededError) as exc_info:
            bubble.add_button(Button.postback("B3", "P3"))
        assert exc_info.value.field == LimitField.BUTTONS
        assert len(bubble.buttons) == 3

    def test_fourth_button_with_force(self):
        bubble = Bubble("Title")
        for i in range(4):
            bubble.add_button(Button.postback(f"B{i}", f"P{i}"), force=True)
        assert len(bubble.buttons) == 4

    def test_bubble_without_title_is_invalid(self):
        assert not Bubble(subtitle="Sub").is_valid()

    def test_invalid_nested_button_invalidates_bubble(self):
        bubble = Bubble("Title").add_button(Button(ButtonType.POSTBACK, title="X"))
        assert not bubble.is_valid()

    def test_payload_omits_unset_fields(self):
        bubble = Bubble("Title", image_url="https://example.com/a.png")
        assert bubble.to_payload() == {
            "title": "Title",
            "image_url": "https://example.com/a.png",
        }


class TestIncomingModels:
    """Test decoding of incoming event payloads."""

    def test_text_message_flattens_quick_reply_payload(self):
        message = TextMessage.model_validate(
            {**ENVELOPE, "mid": "m1", "text": "Yes", "quick_reply": {"payload": "YES"}}
        )
        assert message.quick_reply_payload == "YES"
        assert message.kind == "text"

    def test_attachment_flattens_payload(self):
        attachment = Attachment.model_validate(
            {"type": "image", "payload": {"url": "https://example.com/a.png"}}
        )
        assert attachment.type == AttachmentType.IMAGE
        assert attachment.url == "https://example.com/a.png"

    def test_location_attachment_coordinates(self):
        attachment = Attachment.model_validate(
            {"type": "location", "payload": {"coordinates": {"lat": 1.5, "long": 2.5}}}
        )
        assert attachment.coordinates.lat == 1.5
        assert attachment.coordinates.long == 2.5

    @given(st.text().filter(lambda s: s not in {t.value for t in AttachmentType}))
    def test_unrecognised_attachment_type_is_unknown(self, value):
        assert Attachment.model_validate({"type": value}).type == AttachmentType.UNKNOWN

    def test_account_linking_unknown_status(self):
        event = AccountLinking.model_validate({**ENVELOPE, "status": "pending"})
        assert event.status == AccountLinkingStatus.UNKNOWN

    def test_account_linking_linked(self):
        event = AccountLinking.model_validate(
            {**ENVELOPE, "status": "linked", "authorization_code": "code"}
        )
        assert event.status == AccountLinkingStatus.LINKED
        assert event.authorization_code == "code"


class TestSendResults:
    def test_success_flag(self):
        assert SendSuccess(recipient_id="1", message_id="m").is_success
        assert not SendError(code=100).is_success
        assert not NETWORK_ERROR.is_success

    def test_network_error_sentinel(self):
        assert NETWORK_ERROR.code == -1
        assert NETWORK_ERROR.type == "Network Error"

    def test_error_code_constants(self):
        assert SendError.ACCESS_TOKEN_ERROR == 190
        assert SendError.USER_BLOCK_ERROR == 551
