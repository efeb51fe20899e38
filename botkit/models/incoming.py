"""Typed events decoded from webhook deliveries.

Every event carries the envelope copied from its enclosing messaging
object (``sender_id``, ``recipient_id``, ``timestamp``). The ``kind`` field
is the union tag, so callers can ``match`` on the variant.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class IncomingEventBase(BaseModel):
    """Envelope shared by every incoming event."""

    model_config = ConfigDict(frozen=True)

    sender_id: str
    recipient_id: str
    timestamp: int = Field(..., description="Event time in epoch milliseconds")


class ReceivedMessageBase(IncomingEventBase):
    """Fields shared by text and attachment messages."""

    mid: str | None = Field(default=None, description="Message ID")
    seq: int = 0
    is_echo: bool = False
    app_id: int | None = Field(
        default=None, description="App that sent the message (echoes only)"
    )
    metadata: str | None = None
    sticker_id: int | None = None


class TextMessage(ReceivedMessageBase):
    """A text message, possibly sent by tapping a quick reply."""

    kind: Literal["text"] = "text"
    text: str
    quick_reply_payload: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_quick_reply(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("quick_reply"), dict):
            data = dict(data)
            data.setdefault("quick_reply_payload", data["quick_reply"].get("payload"))
        return data


class AttachmentType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"
    LOCATION = "location"
    UNKNOWN = "unknown"


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    long: float


class Attachment(BaseModel):
    """One attachment of an incoming message."""

    model_config = ConfigDict(frozen=True)

    type: AttachmentType = AttachmentType.UNKNOWN
    url: str | None = None
    coordinates: Coordinates | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_payload(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("payload"), dict):
            payload = data["payload"]
            data = dict(data)
            data.setdefault("url", payload.get("url"))
            data.setdefault("coordinates", payload.get("coordinates"))
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type(cls, value: Any) -> Any:
        if isinstance(value, AttachmentType):
            return value
        if not isinstance(value, str) or value not in {t.value for t in AttachmentType}:
            return AttachmentType.UNKNOWN
        return value


class AttachmentMessage(ReceivedMessageBase):
    """A message carrying one or more attachments."""

    kind: Literal["attachment"] = "attachment"
    attachments: list[Attachment]


class Postback(IncomingEventBase):
    """The user tapped a postback button."""

    kind: Literal["postback"] = "postback"
    payload: str | None = None
    title: str | None = None


class Optin(IncomingEventBase):
    """The user authenticated through a Send-to-Messenger plugin."""

    kind: Literal["optin"] = "optin"
    ref: str | None = None


class AccountLinkingStatus(str, Enum):
    LINKED = "linked"
    UNLINKED = "unlinked"
    UNKNOWN = "unknown"


class AccountLinking(IncomingEventBase):
    kind: Literal["account_linking"] = "account_linking"
    status: AccountLinkingStatus = AccountLinkingStatus.UNKNOWN
    authorization_code: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _unknown_status(cls, value: Any) -> Any:
        if isinstance(value, AccountLinkingStatus):
            return value
        if not isinstance(value, str) or value not in {
            s.value for s in AccountLinkingStatus
        }:
            return AccountLinkingStatus.UNKNOWN
        return value


class DeliveryReceipt(IncomingEventBase):
    """Messages up to ``watermark`` were delivered."""

    kind: Literal["delivery"] = "delivery"
    mids: list[str] = Field(default_factory=list)
    watermark: int
    seq: int = 0


class ReadReceipt(IncomingEventBase):
    """Messages up to ``watermark`` were read."""

    kind: Literal["read"] = "read"
    watermark: int
    seq: int = 0


ReceivedMessage = Union[TextMessage, AttachmentMessage]

IncomingEvent = Annotated[
    Union[
        TextMessage,
        AttachmentMessage,
        Postback,
        Optin,
        AccountLinking,
        DeliveryReceipt,
        ReadReceipt,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# Batch envelope
# =============================================================================


class Participant(BaseModel):
    id: str


class MessagingEvent(BaseModel):
    """One raw messaging object of a webhook entry.

    Sub-objects are kept as raw dicts; the dispatcher classifies them.
    """

    sender: Participant
    recipient: Participant
    timestamp: int
    message: dict[str, Any] | None = None
    postback: dict[str, Any] | None = None
    optin: dict[str, Any] | None = None
    account_linking: dict[str, Any] | None = None
    delivery: dict[str, Any] | None = None
    read: dict[str, Any] | None = None

    def envelope(self) -> dict[str, Any]:
        """Envelope fields to copy onto the decoded event."""
        return {
            "sender_id": self.sender.id,
            "recipient_id": self.recipient.id,
            "timestamp": self.timestamp,
        }


class WebhookEntry(BaseModel):
    id: str | None = None
    time: int | None = None
    messaging: list[dict[str, Any]] = Field(default_factory=list)


class WebhookBatch(BaseModel):
    """Top level body of a webhook delivery."""

    object: str | None = None
    entry: list[WebhookEntry]
