from __future__ import annotations

from rich.console import Console

from revisedlm.quiz.console import (
    SessionCommand,
    parse_session_command,
    render_mark,
    run_quiz_session,
)
from revisedlm.quiz.models import Mark, Question
from revisedlm.quiz.session import QuizSession


def make_provider(commands: list[str]):
    iterator = iter(commands)

    def _provider() -> str:
        return next(iterator)

    return _provider


def _console() -> Console:
    return Console(record=True, width=100, force_terminal=True)


def _session() -> QuizSession:
    return QuizSession(
        [
            Question("What is the capital of France?", ("Paris", "London"), 0),
            Question("Select the even number.", ("3", "2", "5"), 1),
        ]
    )


def test_parse_session_command_variants() -> None:
    assert parse_session_command("a") == SessionCommand("select", 0)
    assert parse_session_command(" C ") == SessionCommand("select", 2)
    assert parse_session_command("  Next ") == SessionCommand("next")
    assert parse_session_command("p") == SessionCommand("prev")
    assert parse_session_command("check") == SessionCommand("check")
    assert parse_session_command("submit") == SessionCommand("check")
    assert parse_session_command("quit") == SessionCommand("quit")
    assert parse_session_command(None) is None
    assert parse_session_command("") is None
    assert parse_session_command("?") is None
    assert parse_session_command("maybe") is None


def test_check_is_refused_until_all_answered() -> None:
    console = _console()
    session = _session()

    result = run_quiz_session(
        session, console, make_provider(["a", "check", "n", "b", "check", "q"])
    )

    assert result == "quit"
    assert session.revealed
    rendered = console.export_text()
    assert "Answer every question before checking (1/2 answered)" in rendered
    assert "Quiz Summary" in rendered
    assert "You got 2 out of 2 correct." in rendered


def test_wrong_answer_shows_correct_option_after_check() -> None:
    console = _console()
    session = _session()

    run_quiz_session(
        session, console, make_provider(["b", "n", "b", "check", "p", "quit"])
    )

    rendered = console.export_text()
    assert "You got 1 out of 2 correct." in rendered
    assert "Incorrect. Correct answer: Paris" in rendered


def test_invalid_choice_is_reported() -> None:
    console = _console()
    session = _session()

    run_quiz_session(session, console, make_provider(["e", "quit"]))

    assert session.selections == (None, None)
    assert "'E' is not a valid choice" in console.export_text()


def test_navigation_stays_in_bounds() -> None:
    console = _console()
    session = _session()

    run_quiz_session(
        session, console, make_provider(["p", "a", "n", "n", "n", "a", "quit"])
    )

    assert session.selections == (0, 0)


def test_exhausted_input_ends_session() -> None:
    console = _console()

    result = run_quiz_session(_session(), console, make_provider([]))

    assert result == "quit"
    assert "Session interrupted." in console.export_text()


def test_empty_session_returns_early() -> None:
    console = _console()

    result = run_quiz_session(QuizSession([]), console, make_provider([]))

    assert result == "empty"
    assert "No questions were generated." in console.export_text()


def test_render_mark_shows_score_and_explanation() -> None:
    console = _console()

    render_mark(console, "Because of Rayleigh scattering.", Mark(8, "Accurate."))

    rendered = console.export_text()
    assert "Mark: 8" in rendered
    assert "Accurate." in rendered
    assert "Because of Rayleigh scattering." in rendered
