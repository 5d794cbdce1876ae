from __future__ import annotations

"""Session milestones for the CLI --explain flag.

Every milestone is logged at DEBUG on this module's logger. With explain
mode on it is also echoed to stderr as one JSON line, keeping it apart
from the interactive prompts on stdout.
"""

import json
import logging
import sys
from typing import Any, Dict

logger = logging.getLogger(__name__)

SESSION_STARTED = "session_started"
ANSWER_RECORDED = "answer_recorded"
SESSION_COMPLETED = "session_completed"
MILESTONES = {SESSION_STARTED, ANSWER_RECORDED, SESSION_COMPLETED}

_ECHO = False


def enable(flag: bool = True) -> None:
    global _ECHO
    _ECHO = bool(flag)


def milestone(event: str, session_id: str, **fields: Any) -> Dict[str, Any]:
    """Record a lifecycle milestone for `session_id` and return the record."""
    if event not in MILESTONES:
        raise ValueError(f"Unknown session milestone: {event}")
    record: Dict[str, Any] = {"event": event, "session": session_id, **fields}
    logger.debug("%s session=%s %s", event, session_id, fields, extra={"milestone": event})
    if _ECHO:
        print(f"[EXPLAIN] {json.dumps(record, separators=(',', ':'), default=str)}", file=sys.stderr)
    return record
