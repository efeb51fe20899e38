"""Exception hierarchy for the bot library.

Construction-time misuse (bad configuration, bad recipients, limit
violations) is raised. Outcomes of talking to the platform are not
exceptions: they come back as ``SendResult`` values.
"""

from botkit.constants import LimitField


class BotkitError(Exception):
    """Base class for every error raised by the library."""


class ConfigurationError(BotkitError):
    """A bot context is missing a required field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"'{field}' is missing. Please verify your context parameters."
        )


class InvalidRecipientError(BotkitError):
    """A recipient was given both or neither of phone number and id."""

    def __init__(self) -> None:
        super().__init__(
            "Exactly one of phone number or ID must be set as a recipient."
        )


class MessageConstructionError(BotkitError):
    """Base class for errors raised while building an outgoing message."""


class LimitExceededError(MessageConstructionError):
    """A field or collection exceeded its platform limit."""

    def __init__(self, field: LimitField, limit: int, actual: int):
        self.field = field
        self.limit = limit
        self.actual = actual
        super().__init__(
            f"{field.value} exceeds the maximum allowed limit "
            f"({actual} > {limit}). Pass force=True to override."
        )


class InvalidMessageError(MessageConstructionError):
    """The accumulated message is not structurally valid."""


class UnsupportedOperationError(MessageConstructionError):
    """The operation is not supported by the declared message or button type."""
