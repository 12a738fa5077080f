"""Quiz session state machines: untimed review and timed quick-fire.

Both sessions own an immutable question tuple and an index-aligned list of
selections (``None`` meaning unanswered). Neither touches settings, the
network or the clock directly; quick-fire receives a scheduler for its
countdown so the caller decides what a second is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from .models import Question

MIN_QUICK_FIRE_SECONDS = 3
TICK_INTERVAL_SECONDS = 1.0


class CountdownHandle(Protocol):
    def stop(self) -> None:
        """Cancel the repeating callback."""


Scheduler = Callable[[float, Callable[[], None]], CountdownHandle]


class SessionState(str, Enum):
    ANSWERING = "answering"
    REVIEWING = "reviewing"
    FINISHED = "finished"


@dataclass(frozen=True)
class QuestionResponse:
    """Outcome for one question once results are shown."""

    index: int
    question: Question
    selected: Optional[int]
    is_correct: bool

    @property
    def selected_text(self) -> Optional[str]:
        if self.selected is None:
            return None
        if 0 <= self.selected < len(self.question.options):
            return self.question.options[self.selected]
        return None


@dataclass(frozen=True)
class QuizSummary:
    total_questions: int
    correct_answers: int
    answered_questions: int

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions


@dataclass(frozen=True)
class QuickFireState:
    current_index: int
    seconds_remaining: int
    finished: bool


class _ScoredSession:
    def __init__(self, questions: Sequence[Question]) -> None:
        self._questions = tuple(questions)
        self._selections: List[Optional[int]] = [None] * len(self._questions)

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def selections(self) -> tuple[Optional[int], ...]:
        return tuple(self._selections)

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    def answered_count(self) -> int:
        return sum(1 for value in self._selections if value is not None)

    def score(self) -> int:
        return sum(
            1
            for question, selected in zip(self._questions, self._selections)
            if question.is_correct(selected)
        )

    def results(self) -> List[QuestionResponse]:
        return [
            QuestionResponse(
                index=index,
                question=question,
                selected=selected,
                is_correct=question.is_correct(selected),
            )
            for index, (question, selected) in enumerate(
                zip(self._questions, self._selections)
            )
        ]

    def summary(self) -> QuizSummary:
        return QuizSummary(
            total_questions=self.total_questions,
            correct_answers=self.score(),
            answered_questions=self.answered_count(),
        )


class QuizSession(_ScoredSession):
    """Untimed session: answer in any order, then reveal.

    Reveal is only allowed once every question has a selection, and any
    later selection hides the results again.
    """

    def __init__(self, questions: Sequence[Question]) -> None:
        super().__init__(questions)
        self._revealed = False

    @property
    def revealed(self) -> bool:
        return self._revealed

    @property
    def state(self) -> SessionState:
        if self._revealed:
            return SessionState.REVIEWING
        return SessionState.ANSWERING

    @property
    def can_reveal(self) -> bool:
        return all(value is not None for value in self._selections)

    def select(self, index: int, option: int) -> bool:
        """Record ``option`` for question ``index``.

        Returns ``False`` without changing anything when ``option`` is not
        one of the question's options. Raises ``IndexError`` for an unknown
        question.
        """

        question = self._questions[index]
        if not 0 <= option < len(question.options):
            return False
        self._selections[index] = option
        self._revealed = False
        return True

    def reveal(self) -> bool:
        if not self.can_reveal:
            return False
        self._revealed = True
        return True


class QuickFireSession(_ScoredSession):
    """Timed session: one question at a time against a countdown.

    A timeout records ``None`` for the current question and moves on; a
    manual answer moves on immediately. Moving past the last question
    finishes the session, which reveals results with no separate gate.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        seconds: int,
        *,
        scheduler: Optional[Scheduler] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(questions)
        self._duration = max(MIN_QUICK_FIRE_SECONDS, int(seconds))
        self._scheduler = scheduler
        self._logger = logger or logging.getLogger(__name__)
        self._index = 0
        self._remaining = self._duration
        self._finished = False
        self._started = False
        self._handle: Optional[CountdownHandle] = None

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def seconds_remaining(self) -> int:
        return self._remaining

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def revealed(self) -> bool:
        return self._finished

    @property
    def running(self) -> bool:
        return self._started and not self._finished

    @property
    def state(self) -> SessionState:
        if self._finished:
            return SessionState.FINISHED
        return SessionState.ANSWERING

    @property
    def current(self) -> Optional[Question]:
        if self._finished or self._index >= len(self._questions):
            return None
        return self._questions[self._index]

    def snapshot(self) -> QuickFireState:
        return QuickFireState(
            current_index=self._index,
            seconds_remaining=self._remaining,
            finished=self._finished,
        )

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        if not self._questions:
            self._finish()
            return
        self._arm()

    def tick(self) -> None:
        """Advance the countdown by one second."""

        if not self.running:
            return
        self._remaining -= 1
        if self._remaining <= 0:
            self._logger.info(
                "Quick-fire question timed out",
                extra={"question_index": self._index},
            )
            self._advance(None)

    def answer(self, option: Optional[int]) -> None:
        if not self.running:
            return
        self._advance(option)

    def cancel(self) -> None:
        """Stop the countdown without recording anything."""

        self._disarm()

    def _advance(self, option: Optional[int]) -> None:
        self._disarm()
        self._selections[self._index] = option
        if self._index + 1 < len(self._questions):
            self._index += 1
            self._arm()
        else:
            self._finish()

    def _finish(self) -> None:
        self._disarm()
        self._finished = True
        self._remaining = 0

    def _arm(self) -> None:
        self._disarm()
        self._remaining = self._duration
        if self._scheduler is not None:
            self._handle = self._scheduler(TICK_INTERVAL_SECONDS, self.tick)

    def _disarm(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.stop()
