"""Long-form variant: one open question, answered in free text, AI-marked."""

from __future__ import annotations

import logging
from typing import Optional

from .generator import SettingsProvider
from .models import Mark
from .parser import parse_mark
from .prompts import build_long_form_request, build_marking_request
from .resolver import CredentialLoader, read_credential_file, resolve_endpoint
from .transport import ChatTransport


class LongFormSession:
    """Holds the current question, the user's answer and the last mark.

    Both operations raise :class:`~revisedlm.errors.QuizError` subclasses and
    leave earlier state untouched when they fail.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        *,
        transport: Optional[ChatTransport] = None,
        credential_loader: CredentialLoader = read_credential_file,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings_provider = settings_provider
        self._logger = logger or logging.getLogger(__name__)
        self._transport = transport or ChatTransport(logger=self._logger)
        self._credential_loader = credential_loader
        self.question = ""
        self.answer = ""
        self.mark: Optional[Mark] = None

    @property
    def completed(self) -> bool:
        return self.mark is not None

    def generate_question(self, topic: str) -> str:
        endpoint = self._resolve()
        content = self._transport.complete(
            endpoint, build_long_form_request(topic, endpoint.model)
        )
        self.question = content.strip()
        self.answer = ""
        self.mark = None
        self._logger.info(
            "Generated long-form question",
            extra={"model": endpoint.model, "length": len(self.question)},
        )
        return self.question

    def submit_answer(self, answer: str) -> Mark:
        endpoint = self._resolve()
        content = self._transport.complete(
            endpoint,
            build_marking_request(self.question, answer, endpoint.model),
        )
        mark = parse_mark(content)
        self.answer = answer
        self.mark = mark
        self._logger.info(
            "Marked long-form answer", extra={"score": mark.score}
        )
        return mark

    def _resolve(self):
        return resolve_endpoint(
            self._settings_provider(),
            credential_loader=self._credential_loader,
        )
