"""Messenger webhook endpoints.

Both endpoints exist twice: on ``/webhook`` (bot resolved from the request
URL) and on ``/webhook/{page_id}`` (bot resolved from the page ID first).
The handlers only deal with HTTP concerns and leave resolution,
authentication, decoding and routing to the WebhookDispatcher stored on
``app.state``.
"""

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from botkit.constants import (
    HUB_CHALLENGE_PARAM,
    HUB_MODE_PARAM,
    HUB_VERIFY_TOKEN_PARAM,
    SIGNATURE_HEADER,
)
from botkit.services.dispatcher import DispatchStatus, WebhookDispatcher

logger = logging.getLogger(__name__)
router = APIRouter()


def get_dispatcher(request: Request) -> WebhookDispatcher:
    return request.app.state.dispatcher


def webhook_url_of(request: Request) -> str:
    """URL the platform posted to, without the query string."""
    return str(request.url.replace(query=""))


@router.get("")
@router.get("/{page_id}")
async def verify_webhook(request: Request, page_id: str | None = None):
    """Subscription handshake: echo hub.challenge when the token matches."""
    result = await get_dispatcher(request).verify_subscription(
        page_id=page_id,
        webhook_url=webhook_url_of(request),
        mode=request.query_params.get(HUB_MODE_PARAM),
        verify_token=request.query_params.get(HUB_VERIFY_TOKEN_PARAM),
        challenge=request.query_params.get(HUB_CHALLENGE_PARAM),
    )

    if result.status == DispatchStatus.OK:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(result.challenge)

    logger.warning("Webhook verification failed with status %s", result.status)
    return Response(status_code=int(result.status))


@router.post("")
@router.post("/{page_id}")
async def handle_webhook(request: Request, page_id: str | None = None):
    """Handle a batch of Messenger events."""
    try:
        raw_body = await request.body()
    except (ClientDisconnect, OSError) as e:
        logger.error("Could not read webhook body: %s", e)
        return Response(status_code=int(DispatchStatus.SERVER_ERROR))

    try:
        result = await get_dispatcher(request).dispatch(
            raw_body,
            request.headers.get(SIGNATURE_HEADER),
            page_id=page_id,
            webhook_url=webhook_url_of(request),
        )
    except Exception as e:
        logger.error("Error dispatching webhook events: %s", e, exc_info=True)
        return Response(status_code=int(DispatchStatus.SERVER_ERROR))

    if result.status != DispatchStatus.OK:
        logger.warning(
            "Webhook delivery rejected with status %s after %d event(s)",
            result.status,
            result.events_dispatched,
        )
        return Response(status_code=int(result.status))

    return {"status": "ok", "events": result.events_dispatched}
