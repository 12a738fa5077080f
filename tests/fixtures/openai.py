"""Chat client stubs injected through ``ChatTransport(client_factory=...)``.

Production code only needs ``client.chat.completions.create(**body)`` to
return something with ``choices[0].message.content``. The stub mirrors that
surface, records every request and replays queued replies, so nothing here
touches the network. Real ``openai`` exceptions are built around ``httpx``
request/response objects for the error paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx
import openai

from revisedlm.quiz.models import EffectiveEndpoint
from revisedlm.quiz.resolver import OPENAI_CHAT_URL


@dataclass
class Choice:
    """Represents a single completion choice returned by the stub."""

    content: Optional[str]

    @property
    def message(self) -> SimpleNamespace:
        return SimpleNamespace(content=self.content)


class StubChatClient:
    """Stand-in for ``openai.OpenAI`` exposing ``chat.completions.create``."""

    def __init__(
        self, *, side_effect: Optional[Callable[[Dict[str, Any]], Any]] = None
    ) -> None:
        self.side_effect = side_effect
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []
        self.chat = SimpleNamespace(
            completions=SimpleNamespace(create=self._create_completion)
        )

    def queue_response(self, content: Optional[str]) -> None:
        """Append reply text returned by the next call."""

        self.responses.append(content)

    def queue_error(self, error: BaseException) -> None:
        """Make the next call raise ``error``."""

        self.responses.append(error)

    def _create_completion(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.side_effect is not None:
            result = self.side_effect(kwargs)
            if result is not None:
                return result
        reply = self.responses.pop(0) if self.responses else ""
        if isinstance(reply, BaseException):
            raise reply
        return SimpleNamespace(choices=[Choice(reply)])


class StubClientFactory:
    """Client factory handing out one shared :class:`StubChatClient`."""

    def __init__(self) -> None:
        self.client = StubChatClient()
        self.endpoints: List[EffectiveEndpoint] = []

    def __call__(self, endpoint: EffectiveEndpoint) -> StubChatClient:
        self.endpoints.append(endpoint)
        return self.client

    def queue_response(self, content: Optional[str]) -> None:
        self.client.queue_response(content)

    def queue_error(self, error: BaseException) -> None:
        self.client.queue_error(error)

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.client.calls


def api_status_error(
    status_code: int, body: str, *, url: str = OPENAI_CHAT_URL
) -> openai.APIStatusError:
    request = httpx.Request("POST", url)
    response = httpx.Response(status_code, text=body, request=request)
    return openai.APIStatusError(body, response=response, body=None)


def api_connection_error(
    message: str = "Connection error.", *, url: str = OPENAI_CHAT_URL
) -> openai.APIConnectionError:
    return openai.APIConnectionError(
        message=message, request=httpx.Request("POST", url)
    )


def question_reply(
    *questions: Tuple[str, Sequence[str], object], separator: str = ""
) -> str:
    """Format ``(text, options, corans)`` tuples in the reply tag grammar."""

    blocks = []
    for text, options, correct in questions:
        tagged = "".join(
            f"<{number}>{option}</{number}>"
            for number, option in enumerate(options, start=1)
        )
        blocks.append(
            f"<q>{text}</q><ans>{tagged}</ans><corans>{correct}</corans>"
        )
    return separator.join(blocks)
