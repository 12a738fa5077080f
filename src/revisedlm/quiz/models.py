"""Value types shared by the quiz resolver, parser, sessions and generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ApiMode(str, Enum):
    """Where chat completion requests are sent."""

    DEFAULT = "default"
    OPENAI = "openai"
    CUSTOM = "custom"

    @classmethod
    def from_value(cls, value: str) -> "ApiMode":
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        expected = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown API mode '{value}'. Expected one of: {expected}."
        )


class Difficulty(IntEnum):
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3

    @property
    def prompt_label(self) -> str:
        """Wording used inside the generation prompt."""

        return _PROMPT_LABELS[self]

    @classmethod
    def from_value(cls, value: object) -> "Difficulty":
        try:
            return cls(int(value))  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Unknown difficulty '{value}'. Expected 1, 2 or 3."
            ) from exc


_PROMPT_LABELS = {
    Difficulty.BEGINNER: "beginner",
    Difficulty.INTERMEDIATE: "intermediate",
    Difficulty.ADVANCED: "super advanced",
}


@dataclass(frozen=True)
class Question:
    """One parsed multiple-choice question.

    ``correct_index`` is 0-based and not checked against ``options``: a
    reply whose answer tag could not be read yields ``-1``, which no
    selection can ever match.
    """

    text: str
    options: tuple[str, ...]
    correct_index: int

    def is_correct(self, selection: int | None) -> bool:
        return selection is not None and selection == self.correct_index

    @property
    def correct_option(self) -> str | None:
        if 0 <= self.correct_index < len(self.options):
            return self.options[self.correct_index]
        return None


@dataclass(frozen=True)
class GenerationRequest:
    topic: str
    difficulty: Difficulty
    mode: ApiMode


@dataclass(frozen=True)
class EffectiveEndpoint:
    """Endpoint, credential and model for a single request."""

    url: str
    api_key: str
    model: str

    def __repr__(self) -> str:
        masked = "set" if self.api_key else "empty"
        return (
            f"EffectiveEndpoint(url={self.url!r}, api_key=<{masked}>, "
            f"model={self.model!r})"
        )


@dataclass(frozen=True)
class Mark:
    """Score (1-10 as requested, not enforced) and explanation from marking."""

    score: int
    explanation: str
