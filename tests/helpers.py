from __future__ import annotations

from datetime import datetime, timedelta, timezone

from quizcore.app.session_service import SessionService
from quizcore.catalog.questions import Question, QuestionCatalog
from quizcore.storage.memory import MemoryResponseStore, MemorySessionStore


class StepClock:
    """Deterministic clock: each call advances by one second."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


def small_catalog() -> QuestionCatalog:
    return QuestionCatalog([
        Question(id=1, text="Is the sky blue?", type="yes-no", order=1, category="Nature"),
        Question(id=2, text="Water boils at 100C at sea level.", type="true-false", order=2),
        Question(id=3, text="Tabs are better than spaces.", type="agree-disagree", order=3, category="Code"),
    ])


def make_service(catalog: QuestionCatalog | None = None, **kwargs) -> SessionService:
    clock = kwargs.pop("clock", None) or StepClock()
    return SessionService(
        catalog if catalog is not None else small_catalog(),
        MemorySessionStore(clock=clock),
        MemoryResponseStore(clock=clock),
        clock=clock,
        **kwargs,
    )
