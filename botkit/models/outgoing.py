"""Outgoing message models and their wire format.

Widgets (quick replies, buttons, bubbles) enforce their field limits on
every setter unless ``force=True`` is passed. Validity is checked by the
pure ``is_valid()`` predicate, which recurses into every nested widget.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from botkit.constants import LIMITS, LimitField
from botkit.exceptions import (
    InvalidRecipientError,
    LimitExceededError,
    UnsupportedOperationError,
)


def enforce_limit(field: LimitField, actual: int, force: bool = False) -> None:
    """Raise LimitExceededError if ``actual`` is over the limit for ``field``."""
    limit = LIMITS[field]
    if not force and actual > limit:
        raise LimitExceededError(field=field, limit=limit, actual=actual)


class NotificationType(str, Enum):
    REGULAR = "REGULAR"
    SILENT_PUSH = "SILENT_PUSH"
    NO_PUSH = "NO_PUSH"


class SenderAction(str, Enum):
    MARK_SEEN = "mark_seen"
    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"


class MediaType(str, Enum):
    AUDIO = "audio"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"


class OutgoingMessageType(str, Enum):
    """Message types a MessageBuilder can be declared for."""

    SENDER_ACTION = "sender_action"
    TEXT = "text"
    AUDIO = "audio"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    TEMPLATE_GENERIC = "template_generic"
    TEMPLATE_BUTTON = "template_button"

    @property
    def media_type(self) -> MediaType | None:
        try:
            return MediaType(self.value)
        except ValueError:
            return None


class Recipient(BaseModel):
    """Target of an outgoing message: exactly one of id or phone number."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    phone_number: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Recipient":
        if (self.id is None) == (self.phone_number is None):
            raise InvalidRecipientError()
        return self

    @classmethod
    def from_id(cls, recipient_id: str) -> "Recipient":
        return cls(id=recipient_id)

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# Widgets
# =============================================================================


class QuickReply(BaseModel):
    """Tappable suggestion shown under a message."""

    content_type: Literal["text"] = "text"
    title: str | None = None
    payload: str | None = None

    def __init__(
        self,
        title: str | None = None,
        payload: str | None = None,
        *,
        force: bool = False,
    ):
        super().__init__()
        if title is not None:
            self.set_title(title, force=force)
        if payload is not None:
            self.set_payload(payload, force=force)

    def set_title(self, title: str, force: bool = False) -> "QuickReply":
        enforce_limit(LimitField.TITLE, len(title), force)
        self.title = title
        return self

    def set_payload(self, payload: str, force: bool = False) -> "QuickReply":
        enforce_limit(LimitField.PAYLOAD, len(payload), force)
        self.payload = payload
        return self

    def is_valid(self) -> bool:
        return self.title is not None and self.payload is not None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ButtonType(str, Enum):
    WEB_URL = "web_url"
    POSTBACK = "postback"
    PHONE_NUMBER = "phone_number"


class Button(BaseModel):
    """Button of a button template or a bubble.

    ``web_url`` buttons carry a URL, ``postback`` and ``phone_number``
    buttons carry a payload. Setting the other field is unsupported.
    """

    type: ButtonType
    title: str | None = None
    url: str | None = None
    payload: str | None = None

    def __init__(
        self,
        type: ButtonType,
        title: str | None = None,
        url: str | None = None,
        payload: str | None = None,
        *,
        force: bool = False,
    ):
        super().__init__(type=type)
        if title is not None:
            self.set_title(title, force=force)
        if url is not None:
            self.set_url(url)
        if payload is not None:
            self.set_payload(payload, force=force)

    @classmethod
    def web_url(cls, title: str, url: str, force: bool = False) -> "Button":
        return cls(ButtonType.WEB_URL, title=title, url=url, force=force)

    @classmethod
    def postback(cls, title: str, payload: str, force: bool = False) -> "Button":
        return cls(ButtonType.POSTBACK, title=title, payload=payload, force=force)

    @classmethod
    def phone_number(cls, title: str, number: str, force: bool = False) -> "Button":
        return cls(ButtonType.PHONE_NUMBER, title=title, payload=number, force=force)

    def set_title(self, title: str, force: bool = False) -> "Button":
        enforce_limit(LimitField.TITLE, len(title), force)
        self.title = title
        return self

    def set_url(self, url: str) -> "Button":
        if self.type != ButtonType.WEB_URL:
            raise UnsupportedOperationError(
                f"A {self.type.value} button does not support a URL."
            )
        self.url = url
        return self

    def set_payload(self, payload: str, force: bool = False) -> "Button":
        if self.type == ButtonType.WEB_URL:
            raise UnsupportedOperationError(
                "A web_url button does not support a payload."
            )
        enforce_limit(LimitField.PAYLOAD, len(payload), force)
        self.payload = payload
        return self

    def is_valid(self) -> bool:
        if self.title is None:
            return False
        if self.type == ButtonType.WEB_URL:
            return self.url is not None and self.payload is None
        return self.payload is not None and self.url is None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Bubble(BaseModel):
    """One card of a generic template carousel."""

    title: str | None = None
    subtitle: str | None = None
    image_url: str | None = None
    item_url: str | None = None
    buttons: list[Button] = Field(default_factory=list)

    def __init__(
        self,
        title: str | None = None,
        subtitle: str | None = None,
        image_url: str | None = None,
        item_url: str | None = None,
        *,
        force: bool = False,
    ):
        super().__init__(image_url=image_url, item_url=item_url)
        if title is not None:
            self.set_title(title, force=force)
        if subtitle is not None:
            self.set_subtitle(subtitle, force=force)

    def set_title(self, title: str, force: bool = False) -> "Bubble":
        enforce_limit(LimitField.BUBBLE_TITLE, len(title), force)
        self.title = title
        return self

    def set_subtitle(self, subtitle: str, force: bool = False) -> "Bubble":
        enforce_limit(LimitField.SUBTITLE, len(subtitle), force)
        self.subtitle = subtitle
        return self

    def add_button(self, button: Button, force: bool = False) -> "Bubble":
        enforce_limit(LimitField.BUTTONS, len(self.buttons) + 1, force)
        self.buttons.append(button)
        return self

    def is_valid(self) -> bool:
        return self.title is not None and all(b.is_valid() for b in self.buttons)

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = self.model_dump(
            mode="json", exclude_none=True, exclude={"buttons"}
        )
        if self.buttons:
            body["buttons"] = [b.to_payload() for b in self.buttons]
        return body


# =============================================================================
# Messages
# =============================================================================


class OutgoingMessageBase(BaseModel):
    """Fields shared by every outgoing message."""

    recipient: Recipient | None = None
    notification_type: NotificationType = NotificationType.REGULAR

    def is_valid(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        """Request body for the send API."""
        body: dict[str, Any] = {}
        if self.recipient is not None:
            body["recipient"] = self.recipient.to_payload()
        body["notification_type"] = self.notification_type.value
        body.update(self._content())
        return body

    def _content(self) -> dict[str, Any]:
        raise NotImplementedError


class QuickRepliesCarrier(OutgoingMessageBase):
    """Message that can carry quick replies."""

    quick_replies: list[QuickReply] = Field(default_factory=list)

    def is_valid(self) -> bool:
        return super().is_valid() and all(q.is_valid() for q in self.quick_replies)

    def _with_quick_replies(self, message: dict[str, Any]) -> dict[str, Any]:
        if self.quick_replies:
            message["quick_replies"] = [q.to_payload() for q in self.quick_replies]
        return message


class SenderActionMessage(OutgoingMessageBase):
    kind: Literal["sender_action"] = "sender_action"
    sender_action: SenderAction | None = None

    def is_valid(self) -> bool:
        return super().is_valid() and self.sender_action is not None

    def _content(self) -> dict[str, Any]:
        return {"sender_action": self.sender_action.value}


class OutgoingTextMessage(QuickRepliesCarrier):
    kind: Literal["text"] = "text"
    text: str | None = None

    def is_valid(self) -> bool:
        return super().is_valid() and self.text is not None

    def _content(self) -> dict[str, Any]:
        return {"message": self._with_quick_replies({"text": self.text})}


class MultimediaMessage(QuickRepliesCarrier):
    kind: Literal["multimedia"] = "multimedia"
    media_type: MediaType
    url: str | None = None

    def is_valid(self) -> bool:
        return super().is_valid() and self.url is not None

    def _content(self) -> dict[str, Any]:
        attachment = {"type": self.media_type.value, "payload": {"url": self.url}}
        return {"message": self._with_quick_replies({"attachment": attachment})}


class GenericTemplateMessage(QuickRepliesCarrier):
    """Horizontal carousel of bubbles."""

    kind: Literal["template_generic"] = "template_generic"
    bubbles: list[Bubble] = Field(default_factory=list)

    def is_valid(self) -> bool:
        return (
            super().is_valid()
            and len(self.bubbles) >= 1
            and all(b.is_valid() for b in self.bubbles)
        )

    def _content(self) -> dict[str, Any]:
        attachment = {
            "type": "template",
            "payload": {
                "template_type": "generic",
                "elements": [b.to_payload() for b in self.bubbles],
            },
        }
        return {"message": self._with_quick_replies({"attachment": attachment})}


class ButtonTemplateMessage(QuickRepliesCarrier):
    """Text with up to three buttons below it."""

    kind: Literal["template_button"] = "template_button"
    text: str | None = None
    buttons: list[Button] = Field(default_factory=list)

    def is_valid(self) -> bool:
        return (
            super().is_valid()
            and self.text is not None
            and len(self.buttons) >= 1
            and all(b.is_valid() for b in self.buttons)
        )

    def _content(self) -> dict[str, Any]:
        attachment = {
            "type": "template",
            "payload": {
                "template_type": "button",
                "text": self.text,
                "buttons": [b.to_payload() for b in self.buttons],
            },
        }
        return {"message": self._with_quick_replies({"attachment": attachment})}


OutgoingMessage = Annotated[
    Union[
        SenderActionMessage,
        OutgoingTextMessage,
        MultimediaMessage,
        GenericTemplateMessage,
        ButtonTemplateMessage,
    ],
    Field(discriminator="kind"),
]
