from .schema import (
    CompletionReport,
    QuizResponse,
    QuizSession,
    ResponseKey,
    SessionProgress,
    SessionSummary,
)
from .export import report_filename, write_report

__all__ = [
    "CompletionReport",
    "QuizResponse",
    "QuizSession",
    "ResponseKey",
    "SessionProgress",
    "SessionSummary",
    "report_filename",
    "write_report",
]
