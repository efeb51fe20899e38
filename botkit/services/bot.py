"""Base class a host application extends to receive webhook events.

Every callback defaults to doing nothing, so a bot only overrides the
events it cares about. A single webhook delivery can carry a batch of
events; the callbacks are awaited one at a time, in delivery order, so
heavy work inside a callback delays the rest of the batch.

Example:
    >>> class EchoBot(MessengerBot):
    ...     async def on_message(self, context, message):
    ...         if message.kind == "text":
    ...             await self.gateway.send_text(
    ...                 context, message.text, message.sender_id
    ...             )
"""

from botkit.models.context import BotContext
from botkit.models.incoming import (
    AccountLinking,
    DeliveryReceipt,
    Optin,
    Postback,
    ReadReceipt,
    ReceivedMessage,
)
from botkit.services.send_gateway import SendGateway


class MessengerBot:
    """Callbacks invoked by the WebhookDispatcher."""

    def __init__(self, gateway: SendGateway | None = None):
        self._gateway = gateway

    @property
    def gateway(self) -> SendGateway:
        """Gateway used to reply, created on first use."""
        if self._gateway is None:
            self._gateway = SendGateway()
        return self._gateway

    def initial_contexts(self) -> list[BotContext]:
        """Contexts to register when the app starts."""
        return []

    async def load_context(
        self, page_id: str | None, webhook_url: str | None
    ) -> BotContext | None:
        """Load a context that is not in the registry yet.

        Called with whichever key the request provided. Return None when
        the bot does not serve that page or URL.
        """
        return None

    async def on_message(
        self, context: BotContext, message: ReceivedMessage
    ) -> None:
        """A text or attachment message was received."""

    async def on_message_echo(
        self, context: BotContext, message: ReceivedMessage
    ) -> None:
        """A message sent by the page was echoed back."""

    async def on_postback(self, context: BotContext, postback: Postback) -> None:
        """A postback button or the Get Started button was tapped."""

    async def on_optin(self, context: BotContext, optin: Optin) -> None:
        """A user opted in through a Send to Messenger plugin."""

    async def on_account_linking(
        self, context: BotContext, event: AccountLinking
    ) -> None:
        """An account was linked or unlinked."""

    async def on_delivery(
        self, context: BotContext, receipt: DeliveryReceipt
    ) -> None:
        """Messages sent by the page were delivered."""

    async def on_read(self, context: BotContext, receipt: ReadReceipt) -> None:
        """Messages sent by the page were read."""
