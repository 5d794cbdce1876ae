from __future__ import annotations

"""In-memory stores: plain dicts guarded by a lock, process lifetime only."""

import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import ConflictError
from ..results.schema import QuizResponse, QuizSession, ResponseKey
from ..util.ids import utc_now
from .base import ResponseStore, SessionStore, check_session_update


class MemorySessionStore(SessionStore):
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, QuizSession] = {}

    def create(self, session_id: str, total_questions: int) -> QuizSession:
        with self._lock:
            if session_id in self._sessions:
                raise ConflictError(f"Quiz session already exists: {session_id}")
            rec = QuizSession(
                session_id=session_id,
                total_questions=total_questions,
                started_at=self._clock(),
            )
            self._sessions[session_id] = rec
            return rec

    def get(self, session_id: str) -> Optional[QuizSession]:
        return self._sessions.get(session_id)

    def apply_update(self, session_id: str, **fields: Any) -> Optional[QuizSession]:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                return None
            updated = check_session_update(current, fields)
            self._sessions[session_id] = updated
            return updated


class MemoryResponseStore(ResponseStore):
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._responses: Dict[ResponseKey, QuizResponse] = {}

    def upsert(self, session_id: str, question_id: int, answer: str) -> Tuple[QuizResponse, bool]:
        key = ResponseKey(session_id, question_id)
        with self._lock:
            was_new = key not in self._responses
            rec = QuizResponse(
                session_id=session_id,
                question_id=question_id,
                answer=answer,
                answered_at=self._clock(),
            )
            self._responses[key] = rec
            return rec, was_new

    def get(self, session_id: str, question_id: int) -> Optional[QuizResponse]:
        return self._responses.get(ResponseKey(session_id, question_id))

    def list_by_session(self, session_id: str) -> List[QuizResponse]:
        with self._lock:
            return [r for k, r in self._responses.items() if k.session_id == session_id]
