from __future__ import annotations

"""Question catalog: static, ordered binary-answer questions.

The catalog is seeded once (from YAML) and never mutated afterwards.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import yaml

from ..errors import ValidationError


# Legal answer tokens per question type, positive option first.
ANSWER_OPTIONS: Dict[str, Tuple[str, str]] = {
    "yes-no": ("yes", "no"),
    "true-false": ("true", "false"),
    "agree-disagree": ("agree", "disagree"),
}

ANSWER_LABELS: Dict[str, Tuple[str, str]] = {
    "yes-no": ("Yes", "No"),
    "true-false": ("True", "False"),
    "agree-disagree": ("Agree", "Disagree"),
}

QUESTION_TYPES = set(ANSWER_OPTIONS)

DEFAULT_CATALOG = Path(__file__).parent / "resources" / "questions.yml"


@dataclass(frozen=True)
class Question:
    id: int
    text: str
    type: str
    order: int
    category: Optional[str] = None
    required: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValidationError(f"Question id must be a positive integer, got {self.id!r}")
        if self.type not in QUESTION_TYPES:
            raise ValidationError(f"Unknown question type {self.type!r} for question {self.id}")
        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise ValidationError(f"Question order must be an integer, got {self.order!r}")

    @property
    def options(self) -> Tuple[str, str]:
        return ANSWER_OPTIONS[self.type]

    @property
    def labels(self) -> Tuple[str, str]:
        return ANSWER_LABELS[self.type]

    @property
    def category_display(self) -> str:
        if not self.category:
            return "General Question"
        return f"{self.category} Question"

    def accepts(self, answer: str) -> bool:
        return answer in self.options

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            id=data.get("id"),
            text=str(data.get("text", "")),
            type=str(data.get("type", "")),
            order=data.get("order"),
            category=data.get("category"),
            required=bool(data.get("required", True)),
        )


class QuestionCatalog:
    """Read-only, order-sorted view over a fixed set of questions."""

    def __init__(self, questions: Iterable[Question]) -> None:
        by_id: Dict[int, Question] = {}
        orders = set()
        for q in questions:
            if q.id in by_id:
                raise ValidationError(f"Duplicate question id {q.id}")
            if q.order in orders:
                raise ValidationError(f"Duplicate question order {q.order}")
            by_id[q.id] = q
            orders.add(q.order)
        self._by_id = by_id
        self._ordered: Tuple[Question, ...] = tuple(sorted(by_id.values(), key=lambda q: q.order))

    def list(self) -> List[Question]:
        return list(self._ordered)

    def get(self, question_id: int) -> Optional[Question]:
        return self._by_id.get(question_id)

    @property
    def size(self) -> int:
        return len(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._ordered)


def load_catalog(path: Optional[str] = None) -> QuestionCatalog:
    """Seed a catalog from YAML (`questions: [...]`); packaged seed if no path."""
    p = Path(path) if path else DEFAULT_CATALOG
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    rows = data.get("questions", []) if isinstance(data, dict) else []
    if not isinstance(rows, list):
        raise ValidationError(f"'questions' in {p} must be a list")
    return QuestionCatalog(Question.from_json(r) for r in rows)
