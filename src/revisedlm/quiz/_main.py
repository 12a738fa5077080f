"""Entry points for the ``quiz``, ``quick-fire`` and ``long-form`` commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.text import Text

from ..core.logging import configure_logger
from ..errors import ConfigurationError, QuizError, SettingsError
from ..settings import LoadResult, load_settings
from .console import render_mark, run_quiz_session
from .generator import WAITING_MESSAGE, QuizGenerator
from .longform import LongFormSession
from .models import Difficulty
from .resolver import resolve_endpoint

InputProvider = Callable[[], str]


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("topic", nargs="+", help="Topic to be quizzed on.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Settings file (defaults to REVISEDLM_CONFIG or the workspace "
        "copy).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root.",
    )
    return parser


def _add_difficulty(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--difficulty",
        type=int,
        choices=[int(level) for level in Difficulty],
        help="1 beginner, 2 intermediate, 3 advanced (default from settings).",
    )


def _load(args: argparse.Namespace, console: Console) -> Optional[LoadResult]:
    try:
        return load_settings(
            config_path=args.config, workspace_path=args.workspace
        )
    except SettingsError as exc:
        console.print(Text(f"Error: {exc}", style="red"))
        return None


def _logger(result: LoadResult, name: str) -> logging.Logger:
    logger, _ = configure_logger(
        f"revisedlm.{name}",
        log_dir=result.layout.path_for("logs"),
        level=result.settings.log_level,
        verbose=result.settings.debug_mode,
    )
    return logger


def _print_model(result: LoadResult, console: Console) -> None:
    if not result.settings.debug_mode:
        return
    try:
        endpoint = resolve_endpoint(result.settings)
    except ConfigurationError:
        return
    console.print(f"[dim]Model: {endpoint.model}[/dim]")


def _difficulty(args: argparse.Namespace) -> Optional[Difficulty]:
    if args.difficulty is None:
        return None
    return Difficulty(args.difficulty)


def quiz_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
    generator_factory: Optional[Callable[..., QuizGenerator]] = None,
) -> int:
    parser = _parser(
        "revisedlm quiz",
        "Generate a multiple-choice quiz and answer it in the terminal.",
    )
    _add_difficulty(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    result = _load(args, console)
    if result is None:
        return 2
    logger = _logger(result, "quiz")
    _print_model(result, console)

    factory = generator_factory or QuizGenerator
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(WAITING_MESSAGE, total=1.0)
        generator = factory(
            lambda: result.settings,
            logger=logger,
            on_progress=lambda value: progress.update(task, completed=value),
        )
        outcome = generator.generate(" ".join(args.topic), _difficulty(args))

    if not outcome.ok or generator.session is None:
        console.print(Text(generator.message, style="red"))
        return 1
    run_quiz_session(
        generator.session,
        console,
        input_provider or (lambda: console.input("[bold]> [/]")),
    )
    return 0


def quick_fire_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser(
        "revisedlm quick-fire",
        "Answer a generated quiz against a per-question countdown.",
    )
    _add_difficulty(parser)
    parser.add_argument(
        "--seconds",
        type=int,
        help="Seconds per question (minimum 3; default from settings).",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = Console()
    result = _load(args, console)
    if result is None:
        return 2
    logger = _logger(result, "quick_fire")
    _print_model(result, console)

    from .view.quick_fire import QuickFireApp

    settings = result.settings
    app = QuickFireApp(
        lambda: settings,
        topic=" ".join(args.topic),
        seconds=args.seconds or settings.quick_fire_timer,
        difficulty=_difficulty(args),
        reduced_motion=settings.reduced_motion,
        logger=logger,
    )
    app.run()
    return 0


def long_form_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
    session_factory: Optional[Callable[..., LongFormSession]] = None,
) -> int:
    parser = _parser(
        "revisedlm long-form",
        "Answer one open question in your own words and get it marked.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    result = _load(args, console)
    if result is None:
        return 2
    logger = _logger(result, "long_form")
    _print_model(result, console)

    factory = session_factory or LongFormSession
    session = factory(lambda: result.settings, logger=logger)
    read = input_provider or (lambda: console.input("[bold]Answer> [/]"))
    try:
        with console.status(WAITING_MESSAGE):
            question = session.generate_question(" ".join(args.topic))
        console.print(
            Panel(Text(question), title="Question", border_style="cyan")
        )
        try:
            answer = read()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return 1
        with console.status("Marking..."):
            mark = session.submit_answer(answer)
    except QuizError as exc:
        console.print(Text(str(exc), style="red"))
        return 1
    render_mark(console, answer, mark)
    return 0
