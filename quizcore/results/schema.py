from __future__ import annotations

"""Session, response and summary records."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional

from ..util.ids import ensure_utc


SESSION_CREATED = "created"
SESSION_IN_PROGRESS = "in_progress"
SESSION_COMPLETED = "completed"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value)))


class ResponseKey(NamedTuple):
    """Identity of a response: one live answer per (session, question)."""

    session_id: str
    question_id: int


@dataclass(frozen=True)
class QuizSession:
    session_id: str
    total_questions: int
    started_at: datetime
    answered_questions: int = 0
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def state(self) -> str:
        if self.completed_at is not None:
            return SESSION_COMPLETED
        if self.answered_questions > 0:
            return SESSION_IN_PROGRESS
        return SESSION_CREATED

    def with_updates(self, **fields: Any) -> "QuizSession":
        return replace(self, **fields)

    def to_json(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "totalQuestions": self.total_questions,
            "answeredQuestions": self.answered_questions,
            "startedAt": _iso(self.started_at),
            "completedAt": _iso(self.completed_at),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuizSession":
        return cls(
            session_id=str(data["sessionId"]),
            total_questions=int(data["totalQuestions"]),
            answered_questions=int(data.get("answeredQuestions", 0)),
            started_at=_parse_ts(data["startedAt"]),
            completed_at=_parse_ts(data.get("completedAt")),
        )


@dataclass(frozen=True)
class QuizResponse:
    session_id: str
    question_id: int
    answer: str
    answered_at: datetime

    @property
    def key(self) -> ResponseKey:
        return ResponseKey(self.session_id, self.question_id)

    def to_json(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "questionId": self.question_id,
            "answer": self.answer,
            "answeredAt": _iso(self.answered_at),
        }


@dataclass(frozen=True)
class SessionProgress:
    answered: int
    total: int
    percent: int


@dataclass(frozen=True)
class SessionSummary:
    total_questions: int
    answered_questions: int
    completion_rate: int
    started_at: datetime
    completed_at: Optional[datetime]

    def to_json(self) -> Dict[str, Any]:
        # Consumed externally (exported results); keep keys stable.
        return {
            "totalQuestions": self.total_questions,
            "answeredQuestions": self.answered_questions,
            "completionRate": self.completion_rate,
            "startedAt": _iso(self.started_at),
            "completedAt": _iso(self.completed_at),
        }


@dataclass(frozen=True)
class CompletionReport:
    session: QuizSession
    summary: SessionSummary
    responses: List[QuizResponse] = field(default_factory=list)

    def response_for(self, question_id: int) -> Optional[QuizResponse]:
        for r in self.responses:
            if r.question_id == question_id:
                return r
        return None

    def to_json(self) -> Dict[str, Any]:
        return {
            "session": self.session.to_json(),
            "responses": [r.to_json() for r in self.responses],
            "summary": self.summary.to_json(),
        }
