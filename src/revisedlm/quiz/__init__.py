from .generator import GenerationOutcome, QuizGenerator
from .longform import LongFormSession
from .models import (
    ApiMode,
    Difficulty,
    EffectiveEndpoint,
    GenerationRequest,
    Mark,
    Question,
)
from .parser import parse_mark, parse_questions
from .prompts import (
    ChatPayload,
    build_long_form_request,
    build_marking_request,
    build_quiz_request,
)
from .resolver import read_credential_file, resolve_endpoint
from .session import (
    QuickFireSession,
    QuizSession,
    QuizSummary,
    SessionState,
)
from .transport import ChatTransport

__all__ = [
    "GenerationOutcome",
    "QuizGenerator",
    "LongFormSession",
    "ApiMode",
    "Difficulty",
    "EffectiveEndpoint",
    "GenerationRequest",
    "Mark",
    "Question",
    "parse_mark",
    "parse_questions",
    "ChatPayload",
    "build_long_form_request",
    "build_marking_request",
    "build_quiz_request",
    "read_credential_file",
    "resolve_endpoint",
    "QuickFireSession",
    "QuizSession",
    "QuizSummary",
    "SessionState",
    "ChatTransport",
]
