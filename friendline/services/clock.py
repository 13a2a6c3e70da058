"""Wall clock used to stamp edges, conversations and messages.

Timestamps handed out by :func:`utcnow` are strictly increasing within the
process, so records created one after another never share a ``created_at``.
"""
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

_TICK = timedelta(microseconds=1)
_lock = threading.Lock()
_last: datetime | None = None


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp later than any previously returned."""

    global _last
    with _lock:
        current = datetime.now(timezone.utc)
        if _last is not None and current <= _last:
            current = _last + _TICK
        _last = current
        return current


__all__ = ["utcnow"]
