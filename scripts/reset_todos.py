#!/usr/bin/env python3
"""
Reset a todo backing file to the three default items.

Usage:
  python scripts/reset_todos.py [--file path/to/todos.json]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from todo_api.core.config import get_settings
from todo_api.services.todo_store import TodoStore


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset the todo list to its default items")
    ap.add_argument("--file", help="Backing file (default: the server's todos.json)")
    args = ap.parse_args()

    path = Path(args.file) if args.file else get_settings().data_file
    failures: list[Exception] = []
    store = TodoStore(path, on_save_error=failures.append)
    store.reset()
    if failures:
        raise SystemExit(f"Could not write {path}: {failures[0]}")
    print(f"OK: {store.count()} todos written to {path}")
    for item in store.list():
        print(f"  [{item['id']}] {item['text']}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
