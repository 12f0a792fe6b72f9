"""
JSON file persistence adapter.

The whole collection lives in a single file holding a JSON array. Reads return
whatever the file holds; writes replace the file wholesale.
"""

from __future__ import annotations

from pathlib import Path
import json


def read_items(path: Path) -> list:
    """Return the array stored at ``path``.

    Raises FileNotFoundError/OSError when the file cannot be read, ValueError
    when it is not JSON or does not hold an array.
    """
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a JSON array")
    return data


def dump_items(items: list) -> str:
    return json.dumps(items, ensure_ascii=False, indent=2)


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
