"""quizcore package initialization.

Session and response tracking for single-session binary-answer quizzes.
"""

from __future__ import annotations

from .app.session_service import SessionService, StartSessionRequest, SubmitAnswerRequest
from .catalog.questions import Question, QuestionCatalog, load_catalog
from .errors import ConflictError, NotFoundError, QuizError, SessionLockedError, ValidationError
from .results.schema import CompletionReport, QuizResponse, QuizSession, ResponseKey, SessionSummary

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SessionService",
    "StartSessionRequest",
    "SubmitAnswerRequest",
    "Question",
    "QuestionCatalog",
    "load_catalog",
    "QuizError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "SessionLockedError",
    "CompletionReport",
    "QuizResponse",
    "QuizSession",
    "ResponseKey",
    "SessionSummary",
]
