from __future__ import annotations

"""Parquet-backed stores for sessions and responses using pandas + pyarrow.

Each store owns one table file under `data_dir`. Every write rewrites the
table (zstd-compressed); tables stay small, one row per session or per
(session, question) pair.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError as RowValidationError

from ..errors import ConflictError, ValidationError
from ..results.schema import QuizResponse, QuizSession
from ..util.ids import utc_now
from .base import ResponseStore, SessionStore, check_session_update
from .schema import (
    RESPONSE_DTYPES,
    RESPONSES_FILE,
    SESSION_DTYPES,
    SESSIONS_FILE,
    ResponseRow,
    SessionRow,
)


def _frame(rows: List[Dict[str, Any]], dtypes: Dict[str, Any]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=list(dtypes.keys()))
    for col, dt in dtypes.items():
        if isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        else:
            df[col] = df[col].astype(dt)
    return df


def _ts(value: Any) -> Optional[datetime]:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).tz_convert("UTC").to_pydatetime()


def init_table(path: Path, dtypes: Dict[str, Any]) -> None:
    """Ensure the data directory and an empty table with the right schema exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        _frame([], dtypes).to_parquet(path, engine="pyarrow", compression="zstd", index=False)


def _read_records(path: Path) -> List[Dict[str, Any]]:
    df = pd.read_parquet(path, engine="pyarrow")
    return df.to_dict("records")


def _write_records(path: Path, rows: List[Dict[str, Any]], dtypes: Dict[str, Any]) -> None:
    _frame(rows, dtypes).to_parquet(path, engine="pyarrow", compression="zstd", index=False)


def _session_from_record(rec: Dict[str, Any]) -> QuizSession:
    return QuizSession(
        session_id=str(rec["session_id"]),
        total_questions=int(rec["total_questions"]),
        answered_questions=int(rec["answered_questions"]),
        started_at=_ts(rec["started_at"]),
        completed_at=_ts(rec["completed_at"]),
    )


def _response_from_record(rec: Dict[str, Any]) -> QuizResponse:
    return QuizResponse(
        session_id=str(rec["session_id"]),
        question_id=int(rec["question_id"]),
        answer=str(rec["answer"]),
        answered_at=_ts(rec["answered_at"]),
    )


def _session_row(session: QuizSession) -> Dict[str, Any]:
    try:
        row = SessionRow(
            session_id=session.session_id,
            total_questions=session.total_questions,
            answered_questions=session.answered_questions,
            started_at=session.started_at,
            completed_at=session.completed_at,
        )
    except RowValidationError as e:
        raise ValidationError(f"Invalid session record: {e}") from e
    return row.model_dump()


def _response_row(response: QuizResponse) -> Dict[str, Any]:
    try:
        row = ResponseRow(
            session_id=response.session_id,
            question_id=response.question_id,
            answer=response.answer,
            answered_at=response.answered_at,
        )
    except RowValidationError as e:
        raise ValidationError(f"Invalid response record: {e}") from e
    return row.model_dump()


class ParquetSessionStore(SessionStore):
    def __init__(self, data_dir: Path, clock: Callable[[], datetime] = utc_now) -> None:
        self.path = Path(data_dir) / SESSIONS_FILE
        self._clock = clock
        self._lock = threading.Lock()
        init_table(self.path, SESSION_DTYPES)

    def create(self, session_id: str, total_questions: int) -> QuizSession:
        with self._lock:
            rows = _read_records(self.path)
            if any(str(r["session_id"]) == session_id for r in rows):
                raise ConflictError(f"Quiz session already exists: {session_id}")
            rec = QuizSession(
                session_id=session_id,
                total_questions=total_questions,
                started_at=self._clock(),
            )
            rows.append(_session_row(rec))
            _write_records(self.path, rows, SESSION_DTYPES)
            return rec

    def get(self, session_id: str) -> Optional[QuizSession]:
        with self._lock:
            for r in _read_records(self.path):
                if str(r["session_id"]) == session_id:
                    return _session_from_record(r)
        return None

    def apply_update(self, session_id: str, **fields: Any) -> Optional[QuizSession]:
        with self._lock:
            rows = _read_records(self.path)
            for i, r in enumerate(rows):
                if str(r["session_id"]) == session_id:
                    updated = check_session_update(_session_from_record(r), fields)
                    rows[i] = _session_row(updated)
                    _write_records(self.path, rows, SESSION_DTYPES)
                    return updated
        return None


class ParquetResponseStore(ResponseStore):
    def __init__(self, data_dir: Path, clock: Callable[[], datetime] = utc_now) -> None:
        self.path = Path(data_dir) / RESPONSES_FILE
        self._clock = clock
        self._lock = threading.Lock()
        init_table(self.path, RESPONSE_DTYPES)

    def upsert(self, session_id: str, question_id: int, answer: str) -> Tuple[QuizResponse, bool]:
        with self._lock:
            rows = _read_records(self.path)
            rec = QuizResponse(
                session_id=session_id,
                question_id=question_id,
                answer=answer,
                answered_at=self._clock(),
            )
            row = _response_row(rec)
            for i, r in enumerate(rows):
                if str(r["session_id"]) == session_id and int(r["question_id"]) == question_id:
                    rows[i] = row
                    _write_records(self.path, rows, RESPONSE_DTYPES)
                    return rec, False
            rows.append(row)
            _write_records(self.path, rows, RESPONSE_DTYPES)
            return rec, True

    def get(self, session_id: str, question_id: int) -> Optional[QuizResponse]:
        with self._lock:
            for r in _read_records(self.path):
                if str(r["session_id"]) == session_id and int(r["question_id"]) == question_id:
                    return _response_from_record(r)
        return None

    def list_by_session(self, session_id: str) -> List[QuizResponse]:
        with self._lock:
            return [
                _response_from_record(r)
                for r in _read_records(self.path)
                if str(r["session_id"]) == session_id
            ]
