"""Shared testing fixtures and stubs for the revisedlm test suite."""

from .openai import (  # noqa: F401
    StubChatClient,
    StubClientFactory,
    api_connection_error,
    api_status_error,
    question_reply,
)
from .scheduler import FakeHandle, FakeScheduler  # noqa: F401

__all__ = [
    "FakeHandle",
    "FakeScheduler",
    "StubChatClient",
    "StubClientFactory",
    "api_connection_error",
    "api_status_error",
    "question_reply",
]
