"""OpenAI client construction for resolved chat endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from openai import OpenAI

if TYPE_CHECKING:
    from ..quiz.models import EffectiveEndpoint

__all__ = ["CHAT_COMPLETIONS_PATH", "base_url_for", "load_client"]

CHAT_COMPLETIONS_PATH = "/chat/completions"
DEFAULT_TIMEOUT_SECONDS = 60.0


def base_url_for(url: str) -> str:
    """Return the SDK ``base_url`` for a full chat-completions URL.

    The SDK appends ``/chat/completions`` itself, so that suffix is removed;
    any other URL is used as the base unchanged.
    """

    trimmed = url.rstrip("/")
    if trimmed.endswith(CHAT_COMPLETIONS_PATH):
        return trimmed[: -len(CHAT_COMPLETIONS_PATH)]
    return trimmed


def load_client(
    endpoint: "EffectiveEndpoint",
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> OpenAI:
    """Build a client bound to ``endpoint``.

    Retries are disabled; a failed generation is re-triggered by the user.
    An empty key is passed through as-is so the server rejects it.
    """

    return OpenAI(
        api_key=endpoint.api_key,
        base_url=base_url_for(endpoint.url),
        max_retries=0,
        timeout=timeout,
    )
