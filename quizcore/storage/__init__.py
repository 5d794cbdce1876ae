from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from ..util.ids import utc_now
from .base import ResponseStore, SessionStore, UPDATABLE_SESSION_FIELDS
from .memory import MemoryResponseStore, MemorySessionStore
from .parquet import ParquetResponseStore, ParquetSessionStore


def make_stores(cfg: Dict[str, Any], clock: Callable[[], datetime] = utc_now) -> Tuple[SessionStore, ResponseStore]:
    """Build the session and response stores selected by `storage.backend`."""
    storage = cfg.get("storage", {}) or {}
    backend = storage.get("backend", "memory")
    if backend == "parquet":
        data_dir = Path(storage.get("data_dir", "./quiz_data"))
        return ParquetSessionStore(data_dir, clock=clock), ParquetResponseStore(data_dir, clock=clock)
    return MemorySessionStore(clock=clock), MemoryResponseStore(clock=clock)


__all__ = [
    "SessionStore",
    "ResponseStore",
    "UPDATABLE_SESSION_FIELDS",
    "MemorySessionStore",
    "MemoryResponseStore",
    "ParquetSessionStore",
    "ParquetResponseStore",
    "make_stores",
]
