from __future__ import annotations

"""Storage contracts for sessions and responses.

The session service depends only on these interfaces; backends
(in-memory, Parquet) are swapped in through `make_stores`.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional, Tuple

from ..errors import ValidationError
from ..results.schema import QuizResponse, QuizSession

# Fields a caller may merge into a stored session.
UPDATABLE_SESSION_FIELDS = {"answered_questions", "completed_at"}


def check_session_update(session: QuizSession, fields: dict) -> QuizSession:
    """Merge `fields` into `session`, enforcing the session invariants."""
    unknown = set(fields) - UPDATABLE_SESSION_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update session fields: {', '.join(sorted(unknown))}")
    if "completed_at" in fields:
        if fields["completed_at"] is None and session.completed_at is not None:
            raise ValidationError("completed_at cannot be cleared once set")
        if fields["completed_at"] is not None and not isinstance(fields["completed_at"], datetime):
            raise ValidationError("completed_at must be a datetime")
    updated = session.with_updates(**fields)
    answered = updated.answered_questions
    if isinstance(answered, bool) or not isinstance(answered, int):
        raise ValidationError("answered_questions must be an integer")
    if not (0 <= answered <= updated.total_questions):
        raise ValidationError(
            f"answered_questions={answered} outside 0..{updated.total_questions} for session {session.session_id}"
        )
    return updated


class SessionStore(ABC):
    @abstractmethod
    def create(self, session_id: str, total_questions: int) -> QuizSession:
        """Create a session; ConflictError if the id already exists."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[QuizSession]:
        ...

    @abstractmethod
    def apply_update(self, session_id: str, **fields: Any) -> Optional[QuizSession]:
        """Merge fields into a stored session; None if it does not exist."""


class ResponseStore(ABC):
    @abstractmethod
    def upsert(self, session_id: str, question_id: int, answer: str) -> Tuple[QuizResponse, bool]:
        """Insert or overwrite the response for the pair; return (response, was_new)."""

    @abstractmethod
    def get(self, session_id: str, question_id: int) -> Optional[QuizResponse]:
        ...

    @abstractmethod
    def list_by_session(self, session_id: str) -> List[QuizResponse]:
        ...
