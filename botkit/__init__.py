"""Messenger chat bot toolkit: webhook dispatch, message building, sending."""

from botkit.exceptions import (
    BotkitError,
    ConfigurationError,
    InvalidMessageError,
    InvalidRecipientError,
    LimitExceededError,
    MessageConstructionError,
    UnsupportedOperationError,
)
from botkit.main import create_app, serve
from botkit.models.context import BotContext
from botkit.models.outgoing import (
    Bubble,
    Button,
    MediaType,
    NotificationType,
    OutgoingMessageType,
    QuickReply,
    Recipient,
    SenderAction,
)
from botkit.models.responses import NETWORK_ERROR, SendError, SendSuccess
from botkit.services.bot import MessengerBot
from botkit.services.context_registry import ContextRegistry
from botkit.services.dispatcher import DispatchStatus, WebhookDispatcher
from botkit.services.message_builder import MessageBuilder
from botkit.services.send_gateway import SendGateway
from botkit.services.user_profile import get_user_profile

__all__ = [
    "BotkitError",
    "ConfigurationError",
    "InvalidMessageError",
    "InvalidRecipientError",
    "LimitExceededError",
    "MessageConstructionError",
    "UnsupportedOperationError",
    "create_app",
    "serve",
    "BotContext",
    "Bubble",
    "Button",
    "MediaType",
    "NotificationType",
    "OutgoingMessageType",
    "QuickReply",
    "Recipient",
    "SenderAction",
    "NETWORK_ERROR",
    "SendError",
    "SendSuccess",
    "MessengerBot",
    "ContextRegistry",
    "DispatchStatus",
    "WebhookDispatcher",
    "MessageBuilder",
    "SendGateway",
    "get_user_profile",
]
