"""Send API outcomes and Graph API read models."""

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SendSuccess(BaseModel):
    """The platform accepted the message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    recipient_id: str | None = None
    message_id: str | None = None

    @property
    def is_success(self) -> bool:
        return True


class SendError(BaseModel):
    """The platform answered with an error object."""

    model_config = ConfigDict(frozen=True)

    INTERNAL_ERROR: ClassVar[int] = 2
    RATE_LIMITED_ERROR: ClassVar[int] = 4
    BAD_PARAMETER_ERROR: ClassVar[int] = 100
    ACCESS_TOKEN_ERROR: ClassVar[int] = 190
    PERMISSION_ERROR: ClassVar[int] = 200
    USER_BLOCK_ERROR: ClassVar[int] = 551
    ACCOUNT_LINKING_ERROR: ClassVar[int] = 10303

    kind: Literal["platform_error"] = "platform_error"
    code: int | None = None
    type: str | None = None
    message: str | None = None
    fbtrace_id: str | None = None

    @property
    def is_success(self) -> bool:
        return False


class NetworkError(BaseModel):
    """No response was obtained from the platform.

    Not reported by the platform itself: the gateway returns the
    ``NETWORK_ERROR`` sentinel when the request fails at transport level.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["network_error"] = "network_error"
    code: int = -1
    type: str = "Network Error"
    message: str = "An error has occurred during the network request."

    @property
    def is_success(self) -> bool:
        return False


NETWORK_ERROR = NetworkError()

SendResult = Annotated[
    Union[SendSuccess, SendError, NetworkError],
    Field(discriminator="kind"),
]


class UserProfile(BaseModel):
    """Public profile of a user, from the Graph API."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    profile_pic: str | None = None
    locale: str | None = None
    timezone: float | None = None
    gender: str | None = None
