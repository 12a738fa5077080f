"""Error taxonomy for quiz generation, marking and settings."""

from __future__ import annotations

__all__ = [
    "QuizError",
    "ConfigurationError",
    "NetworkError",
    "HTTPStatusError",
    "EnvelopeError",
    "ParseError",
    "SettingsError",
    "INVALID_FORMAT_MESSAGE",
]

INVALID_FORMAT_MESSAGE = "Invalid response format."


class QuizError(RuntimeError):
    """Base class for failures that end a generation cycle.

    ``str(error)`` is the message shown to the user. None of these are
    retried; the caller returns to an idle state and may trigger again.
    """


class ConfigurationError(QuizError):
    """The resolved endpoint is unusable; raised before any network call."""


class NetworkError(QuizError):
    """The request never produced an HTTP response."""

    def __init__(self, description: str) -> None:
        super().__init__(f"Error: {description}")
        self.description = description


class HTTPStatusError(QuizError):
    """The endpoint answered with a non-success status.

    The message is the raw response body, verbatim.
    """

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(body)
        self.status_code = status_code
        self.body = body


class EnvelopeError(QuizError):
    """The reply did not carry ``choices[0].message.content``."""

    def __init__(self, message: str = INVALID_FORMAT_MESSAGE) -> None:
        super().__init__(message)


class ParseError(QuizError):
    """The reply text held nothing in the expected tag grammar."""

    def __init__(self, message: str = INVALID_FORMAT_MESSAGE) -> None:
        super().__init__(message)


class SettingsError(RuntimeError):
    """Raised when the settings file or environment cannot be used."""
