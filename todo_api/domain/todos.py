"""Domain helpers for todo validation and statistics."""
from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

SEED_TEXTS = (
    "Learn React",
    "Build todo app",
    "Deploy to production",
)


def normalize_text(value: Any) -> str | None:
    """Return the trimmed text, or None when value is not a non-blank string."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def is_valid_completed(value: Any) -> bool:
    return isinstance(value, bool)


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed items, halves rounded up; 0 for an empty list."""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def compute_stats(items: Iterable[Mapping[str, Any]]) -> dict:
    total = 0
    completed = 0
    for item in items:
        total += 1
        if item.get("completed"):
            completed += 1
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "completionRate": completion_rate(completed, total),
    }
