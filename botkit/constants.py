"""Library-wide constants.

This module centralizes the platform limits and wire-level names so there
is a single source of truth for the message builder, the dispatcher and
the send gateway.
"""

from enum import Enum

# =============================================================================
# Platform Limits
# =============================================================================


class LimitField(str, Enum):
    """Identifies which limit a construction call violated."""

    TEXT = "text"
    TITLE = "title"
    BUBBLE_TITLE = "bubble_title"
    SUBTITLE = "subtitle"
    PAYLOAD = "payload"
    QUICK_REPLIES = "quick_replies"
    BUTTONS = "buttons"
    BUBBLES = "bubbles"


# Text of text messages and button templates (chars)
LIMIT_TEXT_LENGTH = 320

# Button and quick reply titles (chars)
LIMIT_TITLE_LENGTH = 20

# Bubble title and subtitle (chars)
LIMIT_BUBBLE_TITLE_LENGTH = 80
LIMIT_BUBBLE_SUBTITLE_LENGTH = 80

# Button and quick reply payloads (chars)
LIMIT_PAYLOAD_LENGTH = 1000

# Collection sizes
LIMIT_QUICK_REPLIES = 10
LIMIT_BUTTONS = 3
LIMIT_BUBBLES = 10

LIMITS: dict[LimitField, int] = {
    LimitField.TEXT: LIMIT_TEXT_LENGTH,
    LimitField.TITLE: LIMIT_TITLE_LENGTH,
    LimitField.BUBBLE_TITLE: LIMIT_BUBBLE_TITLE_LENGTH,
    LimitField.SUBTITLE: LIMIT_BUBBLE_SUBTITLE_LENGTH,
    LimitField.PAYLOAD: LIMIT_PAYLOAD_LENGTH,
    LimitField.QUICK_REPLIES: LIMIT_QUICK_REPLIES,
    LimitField.BUTTONS: LIMIT_BUTTONS,
    LimitField.BUBBLES: LIMIT_BUBBLES,
}

# =============================================================================
# Webhook
# =============================================================================

# Header carrying the HMAC-SHA1 hex digest of the request body
SIGNATURE_HEADER = "x-hub-signature"

# Algorithm tag the platform prefixes to the digest ("sha1=<hex>")
SIGNATURE_ALGORITHM_PREFIX = "sha1="

# Handshake query parameters
HUB_MODE_PARAM = "hub.mode"
HUB_VERIFY_TOKEN_PARAM = "hub.verify_token"
HUB_CHALLENGE_PARAM = "hub.challenge"
HUB_MODE_SUBSCRIBE = "subscribe"

# =============================================================================
# Graph API
# =============================================================================

GRAPH_API_BASE_URL = "https://graph.facebook.com"

GRAPH_API_VERSION = "v2.6"

# Timeout for Graph API calls (seconds)
GRAPH_API_TIMEOUT_SECONDS = 10.0

# Fields requested from the user profile endpoint
USER_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "profile_pic",
    "locale",
    "timezone",
    "gender",
)

# Max characters of a response body copied into log attributes
LOG_BODY_PREVIEW_CHARS = 500
