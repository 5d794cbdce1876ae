from __future__ import annotations

"""Session id and clock helpers."""

import os
import random
import string
import time
from datetime import datetime, timezone

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_ALPHABET[r])
    return "".join(reversed(out))


def seed_if_needed() -> None:
    """Seed the RNG if SEED env var is set."""
    seed = os.environ.get("SEED")
    if seed is not None:
        try:
            s = int(seed)
        except ValueError:
            return
        random.seed(s)


def generate_session_id() -> str:
    """Random base36 part followed by the base36 millisecond timestamp."""
    rand = "".join(random.choice(_ALPHABET) for _ in range(11))
    return rand + _base36(int(time.time() * 1000))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
