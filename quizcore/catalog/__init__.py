from .questions import (
    ANSWER_LABELS,
    ANSWER_OPTIONS,
    QUESTION_TYPES,
    Question,
    QuestionCatalog,
    load_catalog,
)

__all__ = [
    "ANSWER_LABELS",
    "ANSWER_OPTIONS",
    "QUESTION_TYPES",
    "Question",
    "QuestionCatalog",
    "load_catalog",
]
