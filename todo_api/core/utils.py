"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """
    Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix,
    e.g. ``2026-10-18T09:30:00.123Z``.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
