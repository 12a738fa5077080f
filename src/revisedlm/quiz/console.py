"""Rich console front end for untimed quizzes and long-form marking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Mark, Question
from .session import QuizSession, QuizSummary, QuestionResponse

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "empty"]


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "prev", "check", "quit", "select"]
    choice: Optional[int] = None


def choice_key(option: int) -> str:
    return chr(ord("A") + option)


def parse_session_command(raw: Optional[str]) -> Optional[SessionCommand]:
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"check", "submit"}:
        return SessionCommand("check")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if len(text) == 1 and text.isalpha():
        return SessionCommand("select", ord(text.upper()) - ord("A"))
    return None


def run_quiz_session(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
) -> ExitAction:
    """Drive ``session`` from console commands until the user quits.

    Checking answers is refused until every question has a selection; the
    summary is printed each time it is accepted, and a later selection hides
    it again (the session tracks that).
    """

    if not session.questions:
        console.print(
            Panel(
                "No questions were generated.",
                title="Quiz Session",
                border_style="yellow",
            )
        )
        return "empty"

    index = 0
    while True:
        render_question(console, session, index)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return "quit"
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending session.[/]")
            return "quit"
        if command.type == "next":
            index = min(index + 1, session.total_questions - 1)
        elif command.type == "prev":
            index = max(index - 1, 0)
        elif command.type == "select" and command.choice is not None:
            if session.select(index, command.choice):
                console.print(f"Selected [bold]{choice_key(command.choice)}[/].")
            else:
                console.print(
                    "[red]'%s' is not a valid choice for this question.[/red]"
                    % choice_key(command.choice)
                )
        elif command.type == "check":
            if session.reveal():
                render_summary(console, session.summary(), session.results())
            else:
                console.print(
                    "[red]Answer every question before checking "
                    f"({session.answered_count()}/{session.total_questions} "
                    "answered).[/red]"
                )


def render_question(
    console: Console,
    session: QuizSession,
    index: int,
) -> None:
    question = session.questions[index]
    selected = session.selections[index]
    header = Text.assemble(
        (f"Question {index + 1}", "bold cyan"),
        (f" / {session.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.text, style="bold"))
    console.print(_choices_table(question, selected))
    if session.revealed:
        console.print(_feedback_text(question, selected))
    keys = ", ".join(choice_key(i) for i in range(len(question.options)))
    console.print(
        Text(
            f"Answered {session.answered_count()}/{session.total_questions} | "
            f"Commands: choices [{keys}], n (next), p (prev), check, quit",
            style="dim",
        )
    )


def _choices_table(question: Question, selected: Optional[int]) -> Table:
    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    for option, label in enumerate(question.options):
        chosen = option == selected
        row = Text(("•" if chosen else " ") + " ")
        row += Text(label, style="bold green" if chosen else "")
        table.add_row(choice_key(option), row)
    return table


def _feedback_text(question: Question, selected: Optional[int]) -> Text:
    if question.is_correct(selected):
        return Text("Correct!", style="green")
    correct = question.correct_option
    if correct is None:
        return Text("Incorrect.", style="red")
    return Text(f"Incorrect. Correct answer: {correct}", style="red")


def render_summary(
    console: Console,
    summary: QuizSummary,
    responses: list[QuestionResponse],
) -> None:
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))
    console.print(
        f"You got {summary.correct_answers} out of "
        f"{summary.total_questions} correct."
    )

    table = Table(title="Responses", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")
    for response in responses:
        table.add_row(
            str(response.index + 1),
            Text(response.question.text),
            Text(response.selected_text or "—"),
            Text(response.question.correct_option or "—"),
            "✅" if response.is_correct else "❌",
        )
    console.print(table)


def render_mark(console: Console, answer: str, mark: Mark) -> None:
    border = "green" if mark.score >= 5 else "red"
    console.print(Panel(Text(answer or "(no answer)"), title="Your Answer"))
    body = Text(f"Mark: {mark.score}", style=f"bold {border}")
    if mark.explanation:
        body.append("\n\n")
        body.append(mark.explanation)
    console.print(Panel(body, title="Result", border_style=border))
