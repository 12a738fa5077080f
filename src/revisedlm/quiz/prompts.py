"""Chat payloads for quiz generation, long-form questions and marking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .models import Difficulty

QUESTION_COUNT = 10
MIN_OPTIONS = 2
MAX_OPTIONS = 5

SYSTEM_PROMPT = (
    "Follow the user's instructions literally. Respond in standard plaintext "
    "using exactly the tag format requested, with no extra commentary, "
    "markdown or text outside the tags."
)

QUIZ_FORMAT = (
    "<q>Question</q><ans><1>option 1</1><2>option 2</2>...</ans>"
    "<corans>2</corans>"
)
MARK_FORMAT = "<n>number</n><e>explanation</e>"

_MARK_EXAMPLE = (
    "<n>9</n><e>The response is detailed, accurate, and clearly structured, "
    "covering key human activities influencing climate change, but it "
    "slightly lacks mention of natural factors, which would make the answer "
    "more complete.</e>"
)
_WORKED_QUESTION = "Who wrote the play Hamlet?"
_WORKED_ANSWER = "idk"
_WORKED_REPLY = "<n>0</n><e>No real answer provided.</e>"


@dataclass(frozen=True)
class ChatPayload:
    """Model name plus ordered chat messages."""

    model: str
    messages: tuple[Mapping[str, str], ...]

    def as_body(self) -> dict[str, object]:
        return {
            "model": self.model,
            "messages": [dict(message) for message in self.messages],
        }


def _message(role: str, content: str) -> Mapping[str, str]:
    return {"role": role, "content": content}


def build_quiz_request(
    topic: str, difficulty: Difficulty, model: str
) -> ChatPayload:
    """Ask for a batch of tagged multiple-choice questions on ``topic``.

    ``topic`` is passed through untouched, including when empty.
    """

    instruction = (
        f"Generate {QUESTION_COUNT} questions on the topic, difficulty level "
        f"{difficulty.prompt_label}. Do not answer any question with another "
        "of the questions; they will all be shown at once. Give between "
        f"{MIN_OPTIONS} and {MAX_OPTIONS} answer options per question and use "
        "the same number of options for every question. Format each question "
        f"as '{QUIZ_FORMAT}', where corans is the number of the correct "
        "option and ... is room for more options. The topic is: "
        f"{topic}"
    )
    return ChatPayload(
        model=model,
        messages=(
            _message("system", SYSTEM_PROMPT),
            _message("user", instruction),
        ),
    )


def build_long_form_request(topic: str, model: str) -> ChatPayload:
    instruction = (
        "Respond with the question only. Generate one difficult, exam style "
        f"question on: {topic}"
    )
    return ChatPayload(
        model=model,
        messages=(
            _message("system", SYSTEM_PROMPT),
            _message("user", instruction),
        ),
    )


def _marking_instruction(question: str, answer: str) -> str:
    return (
        f"A user was given the question: '{question}'. They answered: "
        f"'{answer}'. Mark the answer from 1-10, where 1 is terrible and 10 "
        f"is perfect. Respond in the exact format {MARK_FORMAT}, example: "
        f"'{_MARK_EXAMPLE}'."
    )


def build_marking_request(
    question: str, answer: str, model: str
) -> ChatPayload:
    """Ask the model to mark ``answer``.

    One worked user/assistant exchange precedes the real request so the
    model sees the exact reply grammar before it answers.
    """

    return ChatPayload(
        model=model,
        messages=(
            _message("system", SYSTEM_PROMPT),
            _message(
                "user", _marking_instruction(_WORKED_QUESTION, _WORKED_ANSWER)
            ),
            _message("assistant", _WORKED_REPLY),
            _message("user", _marking_instruction(question, answer)),
        ),
    )
