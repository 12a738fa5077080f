from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import StubClientFactory  # noqa: E402

from revisedlm.quiz.transport import ChatTransport  # noqa: E402
from revisedlm.settings import Settings  # noqa: E402


@pytest.fixture
def client_factory() -> StubClientFactory:
    """Stub chat client factory; queue replies and inspect requests."""

    return StubClientFactory()


@pytest.fixture
def transport(client_factory: StubClientFactory) -> ChatTransport:
    return ChatTransport(client_factory)


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_key="sk-test")


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    for name in list(os.environ):
        if name.startswith("REVISEDLM_") or name == "OPENAI_API_KEY":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REVISEDLM_HOME", str(tmp_path / "home"))
