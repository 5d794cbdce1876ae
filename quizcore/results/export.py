from __future__ import annotations

"""JSON export of a completed session (the downloadable results record)."""

import json
from pathlib import Path
from typing import Optional

from .schema import CompletionReport


def report_filename(session_id: str) -> str:
    return f"quiz-results-{session_id}.json"


def write_report(report: CompletionReport, path: Optional[str] = None) -> Path:
    """Write the report as indented JSON and return the path written.

    If `path` is a directory (or None for the cwd), the default
    `quiz-results-<sessionId>.json` name is used inside it.
    """
    p = Path(path) if path else Path(".")
    if p.is_dir():
        p = p / report_filename(report.session.session_id)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(report.to_json(), f, indent=2)
    return p
