from __future__ import annotations

"""Session Service: orchestrates catalog, session store and response store.

Holds no record state of its own. The only mutable state here is the
per-session lock registry (filled only for sessions that exist) that serializes "upsert response + bump
counter" and completion for a given session id.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..catalog.questions import Question, QuestionCatalog, load_catalog
from ..errors import NotFoundError, SessionLockedError, ValidationError
from ..results.schema import (
    CompletionReport,
    QuizResponse,
    QuizSession,
    SessionProgress,
    SessionSummary,
)
from ..stats.stats import completion_rate
from ..storage import make_stores
from ..storage.base import ResponseStore, SessionStore
from ..util.ids import utc_now
from .explain import ANSWER_RECORDED, SESSION_COMPLETED, SESSION_STARTED, milestone

logger = logging.getLogger(__name__)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


@dataclass(frozen=True)
class StartSessionRequest:
    session_id: str
    total_questions: int

    def __post_init__(self) -> None:
        if not isinstance(self.session_id, str) or not self.session_id.strip():
            raise ValidationError("session_id must be a non-empty string")
        if not _is_int(self.total_questions) or self.total_questions < 0:
            raise ValidationError(f"total_questions must be a non-negative integer, got {self.total_questions!r}")


@dataclass(frozen=True)
class SubmitAnswerRequest:
    session_id: str
    question_id: int
    answer: str

    def __post_init__(self) -> None:
        # Well-typed ids that match nothing are lookups, not malformed input.
        if not isinstance(self.session_id, str):
            raise ValidationError("session_id must be a string")
        if not _is_int(self.question_id):
            raise ValidationError(f"question_id must be an integer, got {self.question_id!r}")
        if not isinstance(self.answer, str) or not self.answer.strip():
            raise ValidationError("answer must be a non-empty string")

    @property
    def token(self) -> str:
        return self.answer.strip().lower()


class SessionService:
    def __init__(
        self,
        catalog: QuestionCatalog,
        sessions: SessionStore,
        responses: ResponseStore,
        *,
        lock_completed: bool = False,
        validate_answers: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.catalog = catalog
        self.sessions = sessions
        self.responses = responses
        self.lock_completed = lock_completed
        self.validate_answers = validate_answers
        self._clock = clock
        self._registry_lock = threading.Lock()
        self._session_locks: Dict[str, threading.Lock] = {}

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], clock: Callable[[], datetime] = utc_now) -> "SessionService":
        quiz = cfg.get("quiz", {}) or {}
        catalog = load_catalog(quiz.get("catalog_path"))
        sessions, responses = make_stores(cfg, clock=clock)
        return cls(
            catalog,
            sessions,
            responses,
            lock_completed=bool(quiz.get("lock_completed", False)),
            validate_answers=bool(quiz.get("validate_answers", True)),
            clock=clock,
        )

    def _register_lock(self, session_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._session_locks.setdefault(session_id, threading.Lock())

    def _lock_for(self, session_id: str) -> threading.Lock:
        """Lock of an existing session; NotFoundError for unknown ids.

        Sessions already in a durable store but new to this process get
        their lock on first use.
        """
        lock = self._session_locks.get(session_id)
        if lock is not None:
            return lock
        self._require_session(session_id)
        return self._register_lock(session_id)

    def _require_session(self, session_id: str) -> QuizSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Quiz session not found: {session_id}")
        return session

    # --- catalog ---

    def list_questions(self) -> List[Question]:
        return self.catalog.list()

    # --- sessions ---

    def start_session(self, session_id: str, total_questions: int) -> QuizSession:
        req = StartSessionRequest(session_id, total_questions)
        if req.total_questions != self.catalog.size:
            logger.warning(
                "Session %s created with total_questions=%d but catalog has %d questions",
                req.session_id, req.total_questions, self.catalog.size,
            )
        session = self.sessions.create(req.session_id, req.total_questions)
        self._register_lock(session.session_id)
        logger.info("Started session %s (%d questions)", session.session_id, session.total_questions)
        milestone(SESSION_STARTED, session.session_id, total=session.total_questions)
        return session

    def get_session(self, session_id: str) -> QuizSession:
        return self._require_session(session_id)

    # --- answers ---

    def submit_answer(self, session_id: str, question_id: int, answer: str) -> QuizResponse:
        req = SubmitAnswerRequest(session_id, question_id, answer)
        question = self.catalog.get(req.question_id)
        if question is None:
            raise NotFoundError(f"Question not found: {req.question_id}")
        token = req.answer
        if self.validate_answers:
            token = req.token
            if not question.accepts(token):
                raise ValidationError(
                    f"Answer {req.answer!r} is not valid for {question.type} question {question.id}; "
                    f"expected one of {', '.join(question.options)}"
                )

        with self._lock_for(req.session_id):
            session = self._require_session(req.session_id)
            if self.lock_completed and session.is_completed:
                raise SessionLockedError(f"Quiz session {req.session_id} is already completed")
            existing = self.responses.get(req.session_id, req.question_id)
            if existing is None and session.answered_questions >= session.total_questions:
                raise ValidationError(
                    f"Session {req.session_id} already has all {session.total_questions} questions answered"
                )
            response, was_new = self.responses.upsert(req.session_id, req.question_id, token)
            if was_new:
                self.sessions.apply_update(
                    req.session_id, answered_questions=session.answered_questions + 1
                )

        logger.debug(
            "Recorded answer %r for question %d in session %s (new=%s)",
            token, req.question_id, req.session_id, was_new,
        )
        milestone(ANSWER_RECORDED, req.session_id, question=req.question_id, answer=token, new=was_new)
        return response

    def get_response(self, session_id: str, question_id: int) -> Optional[QuizResponse]:
        return self.responses.get(session_id, question_id)

    def list_responses(self, session_id: str) -> List[QuizResponse]:
        return self.responses.list_by_session(session_id)

    def progress(self, session_id: str) -> SessionProgress:
        session = self._require_session(session_id)
        return SessionProgress(
            answered=session.answered_questions,
            total=session.total_questions,
            percent=completion_rate(session.answered_questions, session.total_questions),
        )

    # --- completion ---

    def complete_session(self, session_id: str) -> CompletionReport:
        with self._lock_for(session_id):
            current = self._require_session(session_id)
            if self.lock_completed and current.is_completed:
                raise SessionLockedError(f"Quiz session {session_id} is already completed")
            session = self.sessions.apply_update(session_id, completed_at=self._clock())
            if session is None:
                raise NotFoundError(f"Quiz session not found: {session_id}")
            responses = self.responses.list_by_session(session_id)

        summary = SessionSummary(
            total_questions=session.total_questions,
            answered_questions=session.answered_questions,
            completion_rate=completion_rate(session.answered_questions, session.total_questions),
            started_at=session.started_at,
            completed_at=session.completed_at,
        )
        logger.info(
            "Completed session %s: %d/%d answered (%d%%)",
            session_id, summary.answered_questions, summary.total_questions, summary.completion_rate,
        )
        milestone(SESSION_COMPLETED, session_id, **summary.to_json())
        return CompletionReport(session=session, summary=summary, responses=responses)
