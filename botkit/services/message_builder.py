"""Builder for outgoing messages.

The builder is declared for one message type at construction time. Every
mutator first checks that the declared type supports it and raises
UnsupportedOperationError otherwise, so for example calling
``set_media_url()`` on a text builder fails immediately.

Example:
    >>> message = (
    ...     MessageBuilder(OutgoingMessageType.TEMPLATE_BUTTON)
    ...     .set_text("What do you want to do?")
    ...     .add_button(Button.postback("Order", "ORDER"))
    ...     .build()
    ... )
"""

from botkit.constants import LimitField
from botkit.exceptions import InvalidMessageError, UnsupportedOperationError
from botkit.models.outgoing import (
    Bubble,
    Button,
    ButtonTemplateMessage,
    GenericTemplateMessage,
    MultimediaMessage,
    NotificationType,
    OutgoingMessageBase,
    OutgoingMessageType,
    OutgoingTextMessage,
    QuickRepliesCarrier,
    QuickReply,
    SenderAction,
    SenderActionMessage,
    enforce_limit,
)

_MEDIA_TYPES = (
    OutgoingMessageType.AUDIO,
    OutgoingMessageType.IMAGE,
    OutgoingMessageType.VIDEO,
    OutgoingMessageType.FILE,
)


def _new_message(message_type: OutgoingMessageType) -> OutgoingMessageBase:
    if message_type == OutgoingMessageType.SENDER_ACTION:
        return SenderActionMessage()
    if message_type == OutgoingMessageType.TEXT:
        return OutgoingTextMessage()
    if message_type in _MEDIA_TYPES:
        return MultimediaMessage(media_type=message_type.media_type)
    if message_type == OutgoingMessageType.TEMPLATE_GENERIC:
        return GenericTemplateMessage()
    if message_type == OutgoingMessageType.TEMPLATE_BUTTON:
        return ButtonTemplateMessage()
    raise ValueError(f"Unknown message type: {message_type!r}")


class MessageBuilder:
    """Accumulates the parts of one outgoing message and validates it."""

    def __init__(self, message_type: OutgoingMessageType):
        self.message_type = OutgoingMessageType(message_type)
        self._message = _new_message(self.message_type)

    def _require(self, operation: str, *supported: OutgoingMessageType) -> None:
        if self.message_type not in supported:
            raise UnsupportedOperationError(
                f"{operation}() is not supported by "
                f"{self.message_type.value} messages."
            )

    def set_sender_action(self, action: SenderAction) -> "MessageBuilder":
        self._require("set_sender_action", OutgoingMessageType.SENDER_ACTION)
        self._message.sender_action = SenderAction(action)
        return self

    def set_text(self, text: str, force: bool = False) -> "MessageBuilder":
        """Set the text of a text message or a button template.

        Raises:
            LimitExceededError: text is over 320 characters and force is False
        """
        self._require(
            "set_text",
            OutgoingMessageType.TEXT,
            OutgoingMessageType.TEMPLATE_BUTTON,
        )
        enforce_limit(LimitField.TEXT, len(text), force)
        self._message.text = text
        return self

    def set_media_url(self, url: str) -> "MessageBuilder":
        self._require("set_media_url", *_MEDIA_TYPES)
        self._message.url = url
        return self

    def add_button(self, button: Button, force: bool = False) -> "MessageBuilder":
        self._require("add_button", OutgoingMessageType.TEMPLATE_BUTTON)
        enforce_limit(LimitField.BUTTONS, len(self._message.buttons) + 1, force)
        self._message.buttons.append(button)
        return self

    def add_bubble(self, bubble: Bubble, force: bool = False) -> "MessageBuilder":
        self._require("add_bubble", OutgoingMessageType.TEMPLATE_GENERIC)
        enforce_limit(LimitField.BUBBLES, len(self._message.bubbles) + 1, force)
        self._message.bubbles.append(bubble)
        return self

    def add_quick_reply(
        self, quick_reply: QuickReply, force: bool = False
    ) -> "MessageBuilder":
        self._require(
            "add_quick_reply",
            *(t for t in OutgoingMessageType if t != OutgoingMessageType.SENDER_ACTION),
        )
        message: QuickRepliesCarrier = self._message
        enforce_limit(
            LimitField.QUICK_REPLIES, len(message.quick_replies) + 1, force
        )
        message.quick_replies.append(quick_reply)
        return self

    def set_notification_type(
        self, notification_type: NotificationType
    ) -> "MessageBuilder":
        self._message.notification_type = NotificationType(notification_type)
        return self

    def is_valid(self) -> bool:
        return self._message.is_valid()

    def build(self) -> OutgoingMessageBase:
        """Return the message if it is structurally valid.

        Raises:
            InvalidMessageError: a required part is missing or a nested
                quick reply, button or bubble is invalid
        """
        if not self._message.is_valid():
            raise InvalidMessageError(
                f"The {self.message_type.value} message is not valid."
            )
        return self._message.model_copy(deep=True)
