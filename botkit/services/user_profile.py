"""Read-only user profile lookups against the Graph API."""

import httpx
import logfire
from pydantic import ValidationError

from botkit.config import Settings, get_settings
from botkit.constants import LOG_BODY_PREVIEW_CHARS, USER_PROFILE_FIELDS
from botkit.logging_config import redact_tokens
from botkit.models.context import BotContext
from botkit.models.responses import UserProfile


async def get_user_profile(
    context: BotContext,
    user_id: str,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> UserProfile | None:
    """
    Get the public profile of a user who messaged the page.

    Fetches first_name, last_name, profile_pic, locale, timezone, gender.
    Returns None on any HTTP or transport failure.
    """
    settings = settings or get_settings()
    url = f"{settings.graph_api_url}/{user_id}"
    params = {
        "fields": ",".join(USER_PROFILE_FIELDS),
        "access_token": context.page_access_token,
    }
    logfire.info("Fetching user profile", page_id=context.page_id, user_id=user_id)

    try:
        if client is not None:
            response = await client.get(url, params=params)
        else:
            async with httpx.AsyncClient(
                timeout=settings.graph_api_timeout_seconds
            ) as owned_client:
                response = await owned_client.get(url, params=params)
    except httpx.RequestError as e:
        logfire.error(
            "Error fetching user profile",
            user_id=user_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None

    if response.status_code != 200:
        logfire.error(
            "Failed to fetch user profile",
            user_id=user_id,
            status_code=response.status_code,
            response_body=response.text[:LOG_BODY_PREVIEW_CHARS],
        )
        return None

    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        logfire.error("User profile response is not a JSON object", user_id=user_id)
        return None

    if context.debug:
        logfire.debug("User profile response", payload=redact_tokens(data))

    data.setdefault("id", user_id)
    try:
        return UserProfile.model_validate(data)
    except ValidationError as e:
        logfire.error(
            "Unexpected user profile shape",
            user_id=user_id,
            error=str(e),
        )
        return None
