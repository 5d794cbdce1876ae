from __future__ import annotations

"""Completion rate and human-readable summary formatting."""

from datetime import datetime
from typing import Optional

from ..results.schema import SessionSummary


def completion_rate(answered: int, total: int) -> int:
    """Percentage of `total` answered, rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    answered = max(0, min(int(answered), int(total)))
    # Integer half-up rounding; round() would round 12.5 to 12.
    return (200 * answered + total) // (2 * total)


def format_duration(start: Optional[datetime], end: Optional[datetime]) -> str:
    """Return elapsed time as 'M min Ss', or 'N/A' if either end is missing."""
    if start is None or end is None:
        return "N/A"
    diff_ms = int((end - start).total_seconds() * 1000)
    minutes = diff_ms // 60000
    seconds = (diff_ms % 60000) // 1000
    return f"{minutes} min {seconds}s"


def format_summary(summary: SessionSummary) -> str:
    """Return a human-readable summary of a completed session."""
    lines = [
        f"Answered: {summary.answered_questions}/{summary.total_questions}",
        f"Completion: {summary.completion_rate}%",
        f"Time taken: {format_duration(summary.started_at, summary.completed_at)}",
    ]
    return "\n".join(lines)
