"""Textual app for timed quick-fire quizzes."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from textual import work
from textual.app import App, ComposeResult, ScreenStackError
from textual.containers import Container, Vertical
from textual.css.query import NoMatches
from textual.widgets import Button, ProgressBar, Static
from textual.worker import get_current_worker

from ..generator import GenerationOutcome, QuizGenerator, SettingsProvider
from ..models import Difficulty
from ..resolver import CredentialLoader, read_credential_file
from ..session import QuickFireSession, QuestionResponse, Scheduler
from ..transport import ChatTransport

MAX_OPTION_KEYS = 5


class QuickFireApp(App):
    CSS_PATH = None
    CSS = """
#question.highlight { background: $accent; color: black; }
#choices Button { width: 100%; }
#timer { color: $warning; }
"""
    BINDINGS = [
        ("1", "answer(0)", "Option 1"),
        ("2", "answer(1)", "Option 2"),
        ("3", "answer(2)", "Option 3"),
        ("4", "answer(3)", "Option 4"),
        ("5", "answer(4)", "Option 5"),
        ("r", "regenerate", "New quiz"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        settings_provider: SettingsProvider,
        *,
        topic: str,
        seconds: int,
        difficulty: Optional[Difficulty] = None,
        reduced_motion: bool = False,
        transport: Optional[ChatTransport] = None,
        credential_loader: CredentialLoader = read_credential_file,
        scheduler: Optional[Scheduler] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.topic = topic
        self.seconds = seconds
        self.difficulty = difficulty
        self.reduced_motion = reduced_motion
        self._logger = logger or logging.getLogger(__name__)
        self._scheduler = scheduler or self.set_interval
        self._ui_thread = threading.get_ident()
        self.session: Optional[QuickFireSession] = None
        self.generator = QuizGenerator(
            settings_provider,
            transport=transport,
            credential_loader=credential_loader,
            logger=self._logger,
            on_progress=self._on_progress,
            set_timer=None if reduced_motion else self._schedule_highlight,
        )

    def compose(self) -> ComposeResult:
        yield Static(f"Quick-fire: {self.topic}", id="title")
        yield ProgressBar(total=1.0, show_eta=False, id="progress")
        yield Static(self.status_text(), id="status")
        yield Static(self.timer_text(), id="timer")
        with Container(id="stage"):
            yield Static(self.question_text(), id="question")
            yield Vertical(id="choices")
        yield Static("", id="results")

    def on_mount(self) -> None:
        self.start_generation()

    def on_unmount(self) -> None:
        if self.session is not None:
            self.session.cancel()

    def start_generation(self) -> int:
        if self.session is not None:
            self.session.cancel()
            self.session = None
        token = self.generator.begin()
        self._refresh_view()
        self._fetch(token)
        return token

    @work(thread=True, exclusive=True, group="generation")
    def _fetch(self, token: int) -> None:
        outcome = self.generator.fetch(token, self.topic, self.difficulty)
        if not get_current_worker().is_cancelled:
            self.call_from_thread(self.apply_outcome, outcome)

    # Pure helpers below work without a running app.
    def apply_outcome(self, outcome: GenerationOutcome) -> bool:
        """Finish a generation cycle and start the countdown on success."""

        if not self.generator.finish(outcome):
            return False
        if outcome.ok:
            self.session = QuickFireSession(
                self.generator.questions,
                self.seconds,
                scheduler=self._countdown,
                logger=self._logger,
            )
            self.session.start()
        self._refresh_view()
        return True

    def answer(self, option: int) -> bool:
        if self.session is None or not self.session.running:
            return False
        question = self.session.current
        if question is None or not 0 <= option < len(question.options):
            return False
        self.session.answer(option)
        self._refresh_view()
        return True

    def status_text(self) -> str:
        if self.generator.loading or self.generator.message:
            return self.generator.message
        if self.session is not None and self.session.finished:
            summary = self.session.summary()
            return (
                f"Score: {summary.correct_answers}/{summary.total_questions}"
            )
        return ""

    def timer_text(self) -> str:
        if self.session is None or not self.session.running:
            return ""
        return f"{self.session.seconds_remaining}s remaining"

    def question_text(self) -> str:
        if self.session is None:
            return ""
        question = self.session.current
        if question is None:
            return ""
        index = self.session.current_index + 1
        return f"{index}/{self.session.total_questions}  {question.text}"

    def option_labels(self) -> List[str]:
        if self.session is None or self.session.current is None:
            return []
        return [
            f"{number}) {label}"
            for number, label in enumerate(
                self.session.current.options[:MAX_OPTION_KEYS], start=1
            )
        ]

    def results_lines(self) -> List[str]:
        if self.session is None or not self.session.revealed:
            return []
        return [_result_line(response) for response in self.session.results()]

    @property
    def highlight_active(self) -> bool:
        return self.generator.highlighted and not self.reduced_motion

    def action_answer(self, option: int) -> None:
        self.answer(option)

    def action_regenerate(self) -> None:
        self.start_generation()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        name = event.button.name or ""
        if name.isdigit():
            self.answer(int(name))

    def _countdown(self, interval: float, callback):
        def tick() -> None:
            callback()
            self._refresh_view()

        return self._scheduler(interval, tick)

    def _schedule_highlight(self, delay: float, callback) -> None:
        def clear() -> None:
            callback()
            self._refresh_view()

        self.set_timer(delay, clear)

    def _on_progress(self, value: float) -> None:
        if threading.get_ident() == self._ui_thread:
            self._refresh_progress(value)
        elif not get_current_worker().is_cancelled:
            self.call_from_thread(self._refresh_progress, value)

    def _refresh_progress(self, value: float) -> None:
        try:
            self.query_one("#progress", ProgressBar).update(progress=value)
        except (NoMatches, ScreenStackError):
            return

    def _refresh_view(self) -> None:
        try:
            question = self.query_one("#question", Static)
            choices = self.query_one("#choices", Vertical)
            status = self.query_one("#status", Static)
            timer = self.query_one("#timer", Static)
            results = self.query_one("#results", Static)
        except (NoMatches, ScreenStackError):
            return
        question.update(self.question_text())
        question.set_class(self.highlight_active, "highlight")
        status.update(self.status_text())
        timer.update(self.timer_text())
        results.update("\n".join(self.results_lines()))
        choices.remove_children()
        choices.mount_all(
            Button(label, name=str(option))
            for option, label in enumerate(self.option_labels())
        )


def _result_line(response: QuestionResponse) -> str:
    mark = "✅" if response.is_correct else "❌"
    chosen = response.selected_text or "(no answer)"
    correct = response.question.correct_option or "?"
    return (
        f"{mark} {response.index + 1}. {response.question.text} "
        f"| yours: {chosen} | correct: {correct}"
    )
