from __future__ import annotations

"""Schema constants and Pydantic models for the Parquet-backed stores."""

from datetime import datetime
from typing import Optional

import pandas as pd
from pydantic import BaseModel, Field, field_validator, model_validator

from ..util.ids import ensure_utc

# --- Constants ---

SESSIONS_FILE = "quiz_sessions.parquet"
RESPONSES_FILE = "quiz_responses.parquet"

_UTC = pd.DatetimeTZDtype(tz="UTC")

SESSION_DTYPES = {
    "session_id": "string",
    "total_questions": "UInt32",
    "answered_questions": "UInt32",
    # timezone-aware UTC timestamps
    "started_at": _UTC,
    "completed_at": _UTC,
}

RESPONSE_DTYPES = {
    "session_id": "string",
    "question_id": "UInt32",
    "answer": "string",
    "answered_at": _UTC,
}


# --- Pydantic models ---

class SessionRow(BaseModel):
    session_id: str = Field(min_length=1)
    total_questions: int = Field(ge=0, le=4294967295)
    answered_questions: int = Field(default=0, ge=0, le=4294967295)
    started_at: datetime
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _answered_le_total(self) -> "SessionRow":
        if self.answered_questions > self.total_questions:
            raise ValueError("answered_questions must be <= total_questions")
        return self

    @field_validator("started_at", "completed_at")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None


class ResponseRow(BaseModel):
    session_id: str = Field(min_length=1)
    question_id: int = Field(ge=1, le=4294967295)
    answer: str
    answered_at: datetime

    @field_validator("answered_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
