"""Single chat-completion round trip mapped onto the quiz error taxonomy."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx
import openai

from ..core.ai import load_client
from ..errors import (
    ConfigurationError,
    EnvelopeError,
    HTTPStatusError,
    NetworkError,
)
from .models import EffectiveEndpoint
from .prompts import ChatPayload
from .resolver import INVALID_ENDPOINT_MESSAGE

ClientFactory = Callable[[EffectiveEndpoint], Any]


class ChatTransport:
    """Send one :class:`ChatPayload` and return the reply text."""

    def __init__(
        self,
        client_factory: ClientFactory = load_client,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client_factory = client_factory
        self._logger = logger or logging.getLogger(__name__)

    def complete(self, endpoint: EffectiveEndpoint, payload: ChatPayload) -> str:
        """POST ``payload`` to ``endpoint``.

        Raises :class:`HTTPStatusError` for non-success statuses,
        :class:`NetworkError` for transport failures and
        :class:`EnvelopeError` when the reply has no message content.
        A client that cannot be built for ``endpoint`` raises
        :class:`ConfigurationError` before anything is sent.
        """

        try:
            client = self._client_factory(endpoint)
        except (httpx.InvalidURL, ValueError, openai.OpenAIError) as exc:
            self._logger.warning(
                "Chat client construction failed",
                extra={"url": endpoint.url, "error": str(exc)},
            )
            raise ConfigurationError(INVALID_ENDPOINT_MESSAGE) from exc
        self._logger.debug(
            "Sending chat completion",
            extra={
                "url": endpoint.url,
                "model": payload.model,
                "message_count": len(payload.messages),
            },
        )
        try:
            response = client.chat.completions.create(**payload.as_body())
        except openai.APIStatusError as exc:
            body = exc.response.text
            self._logger.warning(
                "Chat completion rejected",
                extra={"url": endpoint.url, "status_code": exc.status_code},
            )
            raise HTTPStatusError(exc.status_code, body) from exc
        except openai.APIConnectionError as exc:
            self._logger.warning(
                "Chat completion transport failure",
                extra={"url": endpoint.url, "error": str(exc)},
            )
            raise NetworkError(str(exc)) from exc
        except (openai.APIResponseValidationError, ValueError) as exc:
            raise EnvelopeError() from exc
        return extract_message_content(response)


def extract_message_content(response: Any) -> str:
    """Return ``choices[0].message.content`` or raise :class:`EnvelopeError`."""

    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        raise EnvelopeError() from exc
    if not isinstance(content, str):
        raise EnvelopeError()
    return content
