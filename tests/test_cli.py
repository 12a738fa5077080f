from __future__ import annotations

import pytest
from rich.console import Console

from fixtures import api_status_error, question_reply

from revisedlm import cli
from revisedlm.quiz import _main as quiz_cli
from revisedlm.quiz.generator import QuizGenerator
from revisedlm.quiz.longform import LongFormSession
from revisedlm.quiz.transport import ChatTransport
from revisedlm.settings import CONFIG_FILENAME


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "revisedlm"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("revisedlm.settings.load_dotenv", lambda: False)


def make_provider(commands: list[str]):
    iterator = iter(commands)
    return lambda: next(iterator)


def test_version_command(capsys):
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == "0.0-test"


def test_version_handles_missing_package(monkeypatch, capsys):
    def missing(name: str) -> str:
        raise cli.metadata.PackageNotFoundError(name)

    monkeypatch.setattr(cli.metadata, "version", missing)

    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    assert cli.main([]) == 2
    out = capsys.readouterr().out
    assert "Usage: revisedlm" in out
    assert "quick-fire" in out


def test_list_marks_tui_commands(capsys):
    assert cli.main(["list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    [quick] = [line for line in lines if "quick-fire" in line]
    assert quick.endswith("(TUI)")


def test_help_for_command(capsys):
    assert cli.main(["help", "long-form"]) == 0
    assert "revisedlm long-form --help" in capsys.readouterr().out


def test_help_for_unknown_command(capsys):
    assert cli.main(["help", "transcribe"]) == 2
    assert "Unknown command 'transcribe'" in capsys.readouterr().err


def test_unknown_command_returns_error(capsys):
    assert cli.main(["flashcards"]) == 2
    assert "Available commands:" in capsys.readouterr().err


def test_subcommand_argparse_errors_become_exit_codes(capsys):
    assert cli.main(["quiz"]) == 2
    assert "topic" in capsys.readouterr().err


def test_init_writes_template(tmp_path, capsys):
    home = tmp_path / "ws"

    assert cli.main(["init", "--workspace", str(home)]) == 0

    target = home / "config" / CONFIG_FILENAME
    assert target.exists()
    out = capsys.readouterr().out
    assert "Workspace ready" in out
    assert str(target) in out


def test_init_refuses_existing_file_without_force(tmp_path, capsys):
    target = tmp_path / "s.toml"
    target.write_text("# mine\n", encoding="utf-8")

    assert cli.main(["init", "--path", str(target), "--quiet"]) == 1
    assert "--force" in capsys.readouterr().err
    assert cli.main(["init", "--path", str(target), "--force", "--quiet"]) == 0
    assert "[api]" in target.read_text(encoding="utf-8")


def _generator_factory(client_factory):
    def factory(provider, **kwargs):
        return QuizGenerator(
            provider,
            transport=ChatTransport(client_factory),
            credential_loader=lambda: "",
            **kwargs,
        )

    return factory


def test_quiz_command_runs_console_session(monkeypatch, client_factory):
    monkeypatch.setenv("REVISEDLM_OPENAI_KEY", "sk-test")
    client_factory.queue_response(question_reply(("2+2?", ["3", "4"], 2)))
    console = Console(record=True, width=100)

    code = quiz_cli.quiz_main(
        ["basic", "arithmetic", "--difficulty", "2"],
        console=console,
        input_provider=make_provider(["b", "check", "quit"]),
        generator_factory=_generator_factory(client_factory),
    )

    assert code == 0
    assert "You got 1 out of 1 correct." in console.export_text()
    content = client_factory.calls[0]["messages"][1]["content"]
    assert content.endswith("basic arithmetic")
    assert "intermediate" in content


def test_quiz_command_reports_http_error(monkeypatch, client_factory):
    monkeypatch.setenv("REVISEDLM_OPENAI_KEY", "sk-test")
    client_factory.queue_error(api_status_error(401, "Incorrect API key"))
    console = Console(record=True, width=100)

    code = quiz_cli.quiz_main(
        ["x"],
        console=console,
        input_provider=make_provider([]),
        generator_factory=_generator_factory(client_factory),
    )

    assert code == 1
    assert "Incorrect API key" in console.export_text()


def test_quiz_command_debug_prints_model(monkeypatch, client_factory):
    monkeypatch.setenv("REVISEDLM_OPENAI_KEY", "sk-test")
    monkeypatch.setenv("REVISEDLM_API_MODE", "openai")
    monkeypatch.setenv("REVISEDLM_CUSTOM_MODEL", "gpt-4o")
    monkeypatch.setenv("REVISEDLM_DEBUG", "true")
    client_factory.queue_response(question_reply(("Q", ["a"], 1)))
    console = Console(record=True, width=100)

    quiz_cli.quiz_main(
        ["x"],
        console=console,
        input_provider=make_provider(["quit"]),
        generator_factory=_generator_factory(client_factory),
    )

    assert "Model: gpt-4o" in console.export_text()


def test_invalid_settings_exit_with_code_two(monkeypatch):
    monkeypatch.setenv("REVISEDLM_API_MODE", "bogus")
    console = Console(record=True, width=100)

    assert quiz_cli.quiz_main(["x"], console=console) == 2
    assert "Unknown API mode" in console.export_text()


def test_long_form_command_marks_answer(monkeypatch, client_factory):
    monkeypatch.setenv("REVISEDLM_OPENAI_KEY", "sk-test")
    client_factory.queue_response("Why do seasons happen?")
    client_factory.queue_response("<n>8</n><e>Mentions axial tilt.</e>")
    console = Console(record=True, width=100)

    def factory(provider, **kwargs):
        return LongFormSession(
            provider,
            transport=ChatTransport(client_factory),
            credential_loader=lambda: "",
            **kwargs,
        )

    code = quiz_cli.long_form_main(
        ["astronomy"],
        console=console,
        input_provider=make_provider(["Earth's axial tilt."]),
        session_factory=factory,
    )

    assert code == 0
    rendered = console.export_text()
    assert "Why do seasons happen?" in rendered
    assert "Mark: 8" in rendered
    assert "Mentions axial tilt." in rendered
