"""Generation cycle: settings, request, network, parser, session.

A cycle is split into :meth:`QuizGenerator.begin` (reset visible state and
issue a token), :meth:`QuizGenerator.fetch` (the slow part, safe to run off
the UI thread) and :meth:`QuizGenerator.finish` (apply the outcome). Only
the outcome carrying the most recent token is applied; anything older is
dropped so a superseded request can never overwrite a newer one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..errors import QuizError
from .models import Difficulty, GenerationRequest, Question
from .parser import parse_questions
from .prompts import build_quiz_request
from .resolver import CredentialLoader, read_credential_file, resolve_endpoint
from .session import QuizSession
from .transport import ChatTransport

if TYPE_CHECKING:
    from ..settings import Settings

SettingsProvider = Callable[[], "Settings"]
ProgressCallback = Callable[[float], None]
TimerFactory = Callable[[float, Callable[[], None]], Any]

HIGHLIGHT_SECONDS = 0.4
WAITING_MESSAGE = "Waiting for response..."
NETWORK_PHASE_END = 0.5


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of :meth:`QuizGenerator.fetch`; exactly one field is set."""

    token: int
    questions: Optional[tuple[Question, ...]] = None
    error: Optional[QuizError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class QuizGenerator:
    """Owns the question set, loading flag, progress and status message."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        *,
        transport: Optional[ChatTransport] = None,
        credential_loader: CredentialLoader = read_credential_file,
        logger: Optional[logging.Logger] = None,
        on_progress: Optional[ProgressCallback] = None,
        set_timer: Optional[TimerFactory] = None,
    ) -> None:
        self._settings_provider = settings_provider
        self._logger = logger or logging.getLogger(__name__)
        self._transport = transport or ChatTransport(logger=self._logger)
        self._credential_loader = credential_loader
        self._on_progress = on_progress
        self._set_timer = set_timer
        self._lock = threading.Lock()

        self._token = 0
        self.loading = False
        self.progress = 0.0
        self.message = ""
        self.highlighted = False
        self.session: Optional[QuizSession] = None

    @property
    def token(self) -> int:
        return self._token

    @property
    def questions(self) -> tuple[Question, ...]:
        return self.session.questions if self.session is not None else ()

    def generate(
        self, topic: str, difficulty: Optional[Difficulty] = None
    ) -> GenerationOutcome:
        """Run a whole cycle synchronously and return its outcome."""

        token = self.begin()
        outcome = self.fetch(token, topic, difficulty)
        self.finish(outcome)
        return outcome

    def begin(self) -> int:
        """Start a new cycle and return its token.

        Questions and selections are cleared immediately so nothing from an
        earlier cycle stays on screen while the new request is in flight.
        """

        with self._lock:
            self._token += 1
            token = self._token
            self.progress = 0.0
        self.loading = True
        self.message = WAITING_MESSAGE
        self.highlighted = False
        self.session = None
        self._notify(0.0)
        return token

    def fetch(
        self,
        token: int,
        topic: str,
        difficulty: Optional[Difficulty] = None,
    ) -> GenerationOutcome:
        """Resolve, request and parse. Errors are returned, not raised."""

        try:
            settings = self._settings_provider()
            request = GenerationRequest(
                topic=topic,
                difficulty=difficulty or settings.default_difficulty,
                mode=settings.api_mode,
            )
            endpoint = resolve_endpoint(
                settings, credential_loader=self._credential_loader
            )
            self._logger.info(
                "Starting quiz generation",
                extra={
                    "token": token,
                    "mode": request.mode.value,
                    "difficulty": int(request.difficulty),
                    "url": endpoint.url,
                    "model": endpoint.model,
                },
            )
            payload = build_quiz_request(
                request.topic, request.difficulty, endpoint.model
            )
            content = self._transport.complete(endpoint, payload)
            self._report(token, NETWORK_PHASE_END)
            questions = parse_questions(
                content,
                on_match=lambda done, total: self._report(
                    token,
                    NETWORK_PHASE_END + (1 - NETWORK_PHASE_END) * done / total,
                ),
            )
        except QuizError as exc:
            self._logger.warning(
                "Quiz generation failed",
                extra={"token": token, "error_type": type(exc).__name__},
            )
            return GenerationOutcome(token=token, error=exc)
        self._logger.info(
            "Parsed quiz questions",
            extra={"token": token, "question_count": len(questions)},
        )
        return GenerationOutcome(token=token, questions=tuple(questions))

    def finish(self, outcome: GenerationOutcome) -> bool:
        """Apply ``outcome`` if it belongs to the current cycle."""

        if outcome.token != self._token:
            self._logger.info(
                "Discarding stale generation result",
                extra={"token": outcome.token, "current_token": self._token},
            )
            return False

        self.loading = False
        if outcome.error is not None:
            self.message = str(outcome.error)
            self._report(outcome.token, 1.0)
            return True

        self.session = QuizSession(outcome.questions or ())
        self.message = ""
        self._report(outcome.token, 1.0)
        self.highlighted = True
        if self._set_timer is not None:
            self._set_timer(
                HIGHLIGHT_SECONDS, lambda: self._clear_highlight(outcome.token)
            )
        return True

    def _clear_highlight(self, token: int) -> None:
        if token == self._token:
            self.highlighted = False

    def _report(self, token: int, value: float) -> None:
        with self._lock:
            if token != self._token or value < self.progress:
                return
            self.progress = min(value, 1.0)
            progress = self.progress
        self._notify(progress)

    def _notify(self, value: float) -> None:
        if self._on_progress is not None:
            self._on_progress(value)
