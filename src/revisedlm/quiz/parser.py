"""Extract questions and marks from the tagged plain-text model replies.

Everything here is pure: text in, values out, no network and no settings.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from ..errors import ParseError
from .models import Mark, Question

PLACEHOLDER_OPTIONS = ("Option 1", "Option 2", "Option 3")

MatchCallback = Callable[[int, int], None]

_NEWLINES = re.compile(r"\r\n|\r|\n")
_QUESTION_PATTERN = re.compile(
    r"<q>(.*?)</q>(.*?)<ans>(.*?)</ans>(.*?)<corans>(.*?)</corans>"
)
# The opening tag name is ignored; only the order of the pairs matters.
_OPTION_PATTERN = re.compile(r"<(.*?)>(.*?)</.*?>")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_MARK_PATTERN = re.compile(r"<n>([0-9]+)</n><e>(.*?)</e>")


def parse_questions(
    content: str, *, on_match: Optional[MatchCallback] = None
) -> List[Question]:
    """Parse every ``<q>..</q>..<ans>..</ans>..<corans>..</corans>`` group.

    Newlines count as spaces so groups the model wrapped across lines still
    match. A group with no readable options gets :data:`PLACEHOLDER_OPTIONS`
    instead of being dropped. ``correct_index`` is the ``<corans>`` integer
    minus one; a value that is not an integer reads as ``0`` and so becomes
    ``-1``. The index is never clamped to the option count.

    ``on_match(done, total)`` is called after each group with
    ``total = max(match_count, 1)``.

    Raises :class:`ParseError` when no group yields a question.
    """

    text = _NEWLINES.sub(" ", content or "")
    matches = list(_QUESTION_PATTERN.finditer(text))
    total = max(len(matches), 1)

    questions: List[Question] = []
    for done, match in enumerate(matches, start=1):
        groups = match.groups()
        if None not in groups:
            prompt, _, options_block, _, correct_text = groups
            questions.append(
                Question(
                    text=prompt,
                    options=_parse_options(options_block),
                    correct_index=_parse_number(correct_text) - 1,
                )
            )
        if on_match is not None:
            on_match(done, total)

    if not questions:
        raise ParseError()
    return questions


def _parse_options(block: str) -> tuple[str, ...]:
    options = tuple(match.group(2) for match in _OPTION_PATTERN.finditer(block))
    return options or PLACEHOLDER_OPTIONS


def _parse_number(raw: str) -> int:
    candidate = raw.strip()
    if _INTEGER.fullmatch(candidate):
        return int(candidate)
    return 0


def parse_mark(content: str) -> Mark:
    """Read the first ``<n>SCORE</n><e>EXPLANATION</e>`` pair."""

    match = _MARK_PATTERN.search((content or "").strip())
    if match is None:
        raise ParseError()
    return Mark(score=int(match.group(1)), explanation=match.group(2))
