"""Send messages through the Graph API send endpoint.

Every call is a single POST per recipient. Nothing is retried: the outcome
of each request comes back as a SendResult value (SendSuccess, SendError
or the NETWORK_ERROR sentinel) instead of an exception.
"""

import json
import time
from collections.abc import Sequence
from typing import Any

import httpx
import logfire
from pydantic import ValidationError

from botkit.config import Settings, get_settings
from botkit.constants import LOG_BODY_PREVIEW_CHARS
from botkit.exceptions import InvalidMessageError, InvalidRecipientError
from botkit.logging_config import redact_tokens
from botkit.models.context import BotContext
from botkit.models.outgoing import (
    MediaType,
    OutgoingMessageBase,
    OutgoingMessageType,
    Recipient,
    SenderAction,
)
from botkit.models.responses import (
    NETWORK_ERROR,
    SendError,
    SendResult,
    SendSuccess,
)
from botkit.services.message_builder import MessageBuilder


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _invalid_response(response: httpx.Response, detail: str) -> SendError:
    return SendError(
        code=response.status_code,
        type="InvalidResponse",
        message=detail[:LOG_BODY_PREVIEW_CHARS],
    )


def classify_response(response: httpx.Response) -> SendResult:
    """Turn a send API response into a SendResult.

    Never raises: a body that cannot be read as a success or as a platform
    error becomes a SendError carrying the HTTP status as its code.
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _invalid_response(response, response.text)

    if not isinstance(data, dict):
        return _invalid_response(response, str(data))

    error = data.get("error")
    if isinstance(error, dict):
        try:
            return SendError.model_validate(error)
        except ValidationError:
            return _invalid_response(response, json.dumps(error))

    # IDs may come back as JSON numbers
    return SendSuccess(
        recipient_id=_optional_str(data.get("recipient_id")),
        message_id=_optional_str(data.get("message_id")),
    )


class SendGateway:
    """Posts outgoing messages to the platform and classifies the answers.

    Example:
        >>> gateway = SendGateway()
        >>> result = await gateway.send_text(context, "Hello!", "user-123")
        >>> result.is_success
        True
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the gateway.

        Args:
            settings: Graph API settings (defaults to get_settings())
            client: Shared HTTP client; when None a client is opened per call
        """
        self._settings = settings or get_settings()
        self._client = client

    @property
    def messages_url(self) -> str:
        return f"{self._settings.graph_api_url}/me/messages"

    async def send(
        self,
        context: BotContext,
        message: OutgoingMessageBase,
        recipient: Recipient,
    ) -> SendResult:
        """Send ``message`` to one recipient.

        The recipient is assigned onto the message before serialization.

        Raises:
            InvalidRecipientError: no recipient was given
            InvalidMessageError: the message is not structurally valid
        """
        if recipient is None:
            raise InvalidRecipientError()
        if not message.is_valid():
            raise InvalidMessageError("Refusing to send an invalid message.")

        message.recipient = recipient
        payload = message.to_payload()

        if context.debug:
            logfire.debug(
                "Send API request body",
                page_id=context.page_id,
                payload=redact_tokens(payload),
            )

        start_time = time.time()
        try:
            response = await self._post(
                self.messages_url,
                params={"access_token": context.page_access_token},
                json=payload,
            )
        except httpx.RequestError as e:
            logfire.error(
                "Send API request error",
                page_id=context.page_id,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=(time.time() - start_time) * 1000,
            )
            return NETWORK_ERROR

        elapsed_ms = (time.time() - start_time) * 1000
        result = classify_response(response)

        if isinstance(result, SendSuccess):
            logfire.info(
                "Message sent successfully",
                page_id=context.page_id,
                message_type=message.kind,
                message_id=result.message_id,
                status_code=response.status_code,
                response_time_ms=elapsed_ms,
            )
        else:
            logfire.error(
                "Send API returned an error",
                page_id=context.page_id,
                message_type=message.kind,
                status_code=response.status_code,
                error_code=result.code,
                error_type=result.type,
                fbtrace_id=result.fbtrace_id,
                response_time_ms=elapsed_ms,
            )
        return result

    async def send_many(
        self,
        context: BotContext,
        message: OutgoingMessageBase,
        recipients: Sequence[Recipient],
    ) -> list[SendResult]:
        """Send ``message`` to every recipient, one after the other.

        The n-th result belongs to the n-th recipient. A failure for one
        recipient does not stop the sends to the remaining ones.
        """
        results: list[SendResult] = []
        for recipient in recipients:
            results.append(await self.send(context, message, recipient))
        return results

    async def send_text(
        self,
        context: BotContext,
        text: str,
        recipient_ids: str | Sequence[str],
    ) -> SendResult | list[SendResult]:
        message = MessageBuilder(OutgoingMessageType.TEXT).set_text(text).build()
        return await self._send_to_ids(context, message, recipient_ids)

    async def send_media(
        self,
        context: BotContext,
        media_type: MediaType,
        url: str,
        recipient_ids: str | Sequence[str],
    ) -> SendResult | list[SendResult]:
        message = (
            MessageBuilder(OutgoingMessageType(MediaType(media_type).value))
            .set_media_url(url)
            .build()
        )
        return await self._send_to_ids(context, message, recipient_ids)

    async def send_action(
        self,
        context: BotContext,
        action: SenderAction,
        recipient_ids: str | Sequence[str],
    ) -> SendResult | list[SendResult]:
        message = (
            MessageBuilder(OutgoingMessageType.SENDER_ACTION)
            .set_sender_action(action)
            .build()
        )
        return await self._send_to_ids(context, message, recipient_ids)

    async def _send_to_ids(
        self,
        context: BotContext,
        message: OutgoingMessageBase,
        recipient_ids: str | Sequence[str],
    ) -> SendResult | list[SendResult]:
        if isinstance(recipient_ids, str):
            return await self.send(context, message, Recipient.from_id(recipient_ids))
        recipients = [Recipient.from_id(rid) for rid in recipient_ids]
        return await self.send_many(context, message, recipients)

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(url, **kwargs)
        async with httpx.AsyncClient(
            timeout=self._settings.graph_api_timeout_seconds
        ) as client:
            return await client.post(url, **kwargs)
