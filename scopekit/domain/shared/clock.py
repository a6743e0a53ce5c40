"""Timestamps and identities for scopes, folders and comments.

Timestamps are integer epoch milliseconds. ``now_ms`` never goes
backwards within a process, so ``lastEdited`` stays monotonic even if the
wall clock is adjusted.
"""

import time
from uuid import uuid4

_last_ms = 0


def now_ms() -> int:
    """Return the current time in epoch milliseconds (non-decreasing)."""
    global _last_ms
    current = time.time_ns() // 1_000_000
    if current > _last_ms:
        _last_ms = current
    return _last_ms


def new_id() -> str:
    """Return a fresh opaque identity."""
    return str(uuid4())
