"""Webhook dispatch pipeline.

One pass per HTTP request, with no state kept between requests:

1. Resolve the bot context (page ID first, then webhook URL)
2. Authenticate the body against x-hub-signature, if the context asks for it
3. Decode the ``{"entry": [{"messaging": [...]}]}`` batch
4. Classify every messaging object and await the matching bot callback

Events are handled strictly in order. The first malformed message aborts
the whole request; there is no partial success. Nothing is retried here:
the platform redelivers batches that were not acknowledged.
"""

from enum import IntEnum
from typing import NamedTuple

import logfire
from pydantic import ValidationError

from botkit.constants import HUB_MODE_SUBSCRIBE
from botkit.models.context import BotContext
from botkit.models.incoming import (
    AccountLinking,
    AttachmentMessage,
    DeliveryReceipt,
    IncomingEventBase,
    MessagingEvent,
    Optin,
    Postback,
    ReadReceipt,
    TextMessage,
    WebhookBatch,
)
from botkit.services.bot import MessengerBot
from botkit.services.context_registry import ContextRegistry
from botkit.services.signature import verify_signature


class DispatchStatus(IntEnum):
    """Outcome of a webhook request, valued as the HTTP status to answer."""

    OK = 200
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    SERVER_ERROR = 500


class DispatchResult(NamedTuple):
    status: DispatchStatus
    events_dispatched: int = 0


class HandshakeResult(NamedTuple):
    status: DispatchStatus
    challenge: str | None = None


class MalformedEventError(Exception):
    """A messaging object could not be decoded into an event."""


def decode_event(messaging: MessagingEvent) -> IncomingEventBase | None:
    """Decode one messaging object into its typed event.

    Sub-objects are tried in a fixed order: message, postback, optin,
    account_linking, delivery, read. The envelope (sender, recipient,
    timestamp) always comes from the messaging object itself.

    Returns:
        The decoded event, or None for an object of an unhandled type

    Raises:
        MalformedEventError: a message has neither text nor attachments, or
            a sub-object does not have the expected shape
    """
    envelope = messaging.envelope()

    try:
        if messaging.message is not None:
            content = messaging.message
            if "text" in content:
                return TextMessage.model_validate({**content, **envelope})
            if isinstance(content.get("attachments"), list):
                return AttachmentMessage.model_validate({**content, **envelope})
            raise MalformedEventError("Message has neither text nor attachments")

        for content, model in (
            (messaging.postback, Postback),
            (messaging.optin, Optin),
            (messaging.account_linking, AccountLinking),
            (messaging.delivery, DeliveryReceipt),
            (messaging.read, ReadReceipt),
        ):
            if content is not None:
                return model.model_validate({**content, **envelope})
    except ValidationError as e:
        raise MalformedEventError(str(e)) from e

    return None


class WebhookDispatcher:
    """Resolves, authenticates, decodes and routes webhook deliveries."""

    def __init__(self, bot: MessengerBot, registry: ContextRegistry):
        self._bot = bot
        self._registry = registry

    async def resolve_context(
        self, page_id: str | None, webhook_url: str | None
    ) -> BotContext | None:
        """Find the context for a request, loading it through the bot if needed.

        A context loaded by the bot is added to the registry so later
        requests find it directly.
        """
        for key in (page_id, webhook_url):
            if key:
                context = self._registry.get(key)
                if context is not None:
                    return context

        context = await self._bot.load_context(page_id, webhook_url)
        if context is not None:
            self._registry.add(context)
        return context

    async def verify_subscription(
        self,
        *,
        page_id: str | None,
        webhook_url: str | None,
        mode: str | None,
        verify_token: str | None,
        challenge: str | None,
    ) -> HandshakeResult:
        """Answer the platform's subscription handshake."""
        context = await self.resolve_context(page_id, webhook_url)
        if context is None:
            logfire.warn(
                "Handshake for unknown bot",
                page_id=page_id,
                webhook_url=webhook_url,
            )
            return HandshakeResult(DispatchStatus.NOT_FOUND)

        if (
            mode == HUB_MODE_SUBSCRIBE
            and verify_token == context.verify_token
            and challenge is not None
        ):
            logfire.info("Webhook verified successfully", page_id=context.page_id)
            return HandshakeResult(DispatchStatus.OK, challenge)

        logfire.warn("Webhook verification failed", page_id=context.page_id)
        return HandshakeResult(DispatchStatus.FORBIDDEN)

    async def dispatch(
        self,
        raw_body: bytes,
        signature: str | None,
        *,
        page_id: str | None = None,
        webhook_url: str | None = None,
    ) -> DispatchResult:
        """Process one webhook delivery.

        Args:
            raw_body: Exact bytes of the request body
            signature: Value of the x-hub-signature header, if any
            page_id: Bot identifier taken from the route, if any
            webhook_url: URL the request was sent to

        Returns:
            DispatchResult with the status to answer and the number of
            events handed to the bot
        """
        context = await self.resolve_context(page_id, webhook_url)
        if context is None:
            logfire.warn(
                "Webhook delivery for unknown bot",
                page_id=page_id,
                webhook_url=webhook_url,
            )
            return DispatchResult(DispatchStatus.NOT_FOUND)

        if context.validate_signatures and not verify_signature(
            raw_body, signature, context.app_secret
        ):
            logfire.warn(
                "Webhook signature verification failed",
                page_id=context.page_id,
                has_signature=signature is not None,
            )
            return DispatchResult(DispatchStatus.BAD_REQUEST)

        try:
            batch = WebhookBatch.model_validate_json(raw_body)
        except ValidationError as e:
            logfire.warn(
                "Undecodable webhook batch",
                page_id=context.page_id,
                error=str(e),
            )
            return DispatchResult(DispatchStatus.BAD_REQUEST)

        dispatched = 0
        for entry in batch.entry:
            for raw_event in entry.messaging:
                try:
                    event = decode_event(MessagingEvent.model_validate(raw_event))
                except (ValidationError, MalformedEventError) as e:
                    logfire.warn(
                        "Malformed webhook event, aborting batch",
                        page_id=context.page_id,
                        events_dispatched=dispatched,
                        error=str(e),
                    )
                    return DispatchResult(DispatchStatus.BAD_REQUEST, dispatched)

                if event is None:
                    continue

                await self._route(context, event)
                dispatched += 1

        logfire.info(
            "Webhook batch dispatched",
            page_id=context.page_id,
            entries=len(batch.entry),
            events_dispatched=dispatched,
        )
        return DispatchResult(DispatchStatus.OK, dispatched)

    async def _route(self, context: BotContext, event: IncomingEventBase) -> None:
        match event:
            case TextMessage() | AttachmentMessage() if event.is_echo:
                await self._bot.on_message_echo(context, event)
            case TextMessage() | AttachmentMessage():
                await self._bot.on_message(context, event)
            case Postback():
                await self._bot.on_postback(context, event)
            case Optin():
                await self._bot.on_optin(context, event)
            case AccountLinking():
                await self._bot.on_account_linking(context, event)
            case DeliveryReceipt():
                await self._bot.on_delivery(context, event)
            case ReadReceipt():
                await self._bot.on_read(context, event)
