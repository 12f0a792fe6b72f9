"""Todo item store: the in-memory collection and its JSON backing file."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from todo_api.core.utils import utc_now_iso
from todo_api.domain.todos import SEED_TEXTS, compute_stats, is_valid_completed, normalize_text
from todo_api.repositories import json_storage

logger = logging.getLogger(__name__)


class TodoError(Exception):
    """Base exception for todo workflow."""


class InvalidTodoError(TodoError):
    """Raised when a field does not satisfy the validation rules."""


class TodoNotFoundError(TodoError):
    """Raised when no stored item has the requested id."""

    def __init__(self, todo_id: Any) -> None:
        super().__init__("Todo not found")
        self.todo_id = todo_id


class TodoStore:
    """
    Owns the ordered list of todo items and keeps the backing file in sync.

    Mutations happen synchronously on the caller's thread; ``save`` snapshots
    the list before suspending, so readers may see a change before it is
    durable. Save failures are logged and handed to ``on_save_error``.
    """

    def __init__(
        self,
        path: Path,
        *,
        on_save_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self.path = Path(path)
        self.on_save_error = on_save_error
        self._items: list[dict] = []
        self._next_id = 1
        self._write_lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    # -------------------------- lifecycle --------------------------
    def load(self) -> None:
        try:
            items = json_storage.read_items(self.path)
        except (OSError, ValueError, RecursionError) as exc:
            logger.info("No usable todo file at %s (%s); seeding defaults", self.path, exc)
            self.reset()
            return
        self._items = items
        self._reset_id_counter()
        logger.info("Loaded %d todos from %s", len(items), self.path)

    def reset(self) -> None:
        """Replace the collection with the default items and write it out."""
        self._items = self._seed_items()
        self._reset_id_counter()
        self._write_now()

    def _get_write_lock(self) -> asyncio.Lock:
        # one lock per event loop; a lock bound to a finished loop cannot be awaited
        loop = asyncio.get_running_loop()
        if self._write_lock is None or self._lock_loop is not loop:
            self._write_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._write_lock

    async def save(self) -> bool:
        """Persist the whole collection. Returns False when the write failed."""
        try:
            payload = json_storage.dump_items(self._items)
            async with self._get_write_lock():
                await run_in_threadpool(json_storage.write_text, self.path, payload)
        except (OSError, TypeError, ValueError, RecursionError) as exc:
            self._report_save_error(exc)
            return False
        return True

    def _write_now(self) -> None:
        try:
            json_storage.write_text(self.path, json_storage.dump_items(self._items))
        except (OSError, TypeError, ValueError, RecursionError) as exc:
            self._report_save_error(exc)

    def _report_save_error(self, exc: Exception) -> None:
        logger.exception("Error saving todos to %s", self.path)
        if self.on_save_error:
            self.on_save_error(exc)

    def _seed_items(self) -> list[dict]:
        now = utc_now_iso()
        return [
            {"id": idx, "text": text, "completed": False, "createdAt": now}
            for idx, text in enumerate(SEED_TEXTS, start=1)
        ]

    def _reset_id_counter(self) -> None:
        stored = [item.get("id") for item in self._items if isinstance(item, dict)]
        highest = max((i for i in stored if isinstance(i, int) and not isinstance(i, bool)), default=0)
        self._next_id = max(highest + 1, int(time.time() * 1000))

    def _allocate_id(self) -> int:
        todo_id = self._next_id
        self._next_id += 1
        return todo_id

    # -------------------------- queries --------------------------
    def list(self) -> list[dict]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def stats(self) -> dict:
        return compute_stats(item for item in self._items if isinstance(item, dict))

    def find_index_by_id(self, todo_id: Optional[int]) -> Optional[int]:
        if todo_id is None:
            return None
        for idx, item in enumerate(self._items):
            if isinstance(item, dict) and item.get("id") == todo_id:
                return idx
        return None

    # -------------------------- mutations --------------------------
    def insert(self, text: Any) -> dict:
        clean = normalize_text(text)
        if clean is None:
            raise InvalidTodoError("Todo text is required")
        item = {
            "id": self._allocate_id(),
            "text": clean,
            "completed": False,
            "createdAt": utc_now_iso(),
        }
        self._items.append(item)
        return item

    def update_by_id(self, todo_id: Optional[int], patch: Mapping[str, Any]) -> dict:
        idx = self.find_index_by_id(todo_id)
        if idx is None:
            raise TodoNotFoundError(todo_id)
        changes: dict = {}
        if "text" in patch:
            clean = normalize_text(patch["text"])
            if clean is None:
                raise InvalidTodoError("Todo text must be a non-empty string")
            changes["text"] = clean
        if "completed" in patch:
            if not is_valid_completed(patch["completed"]):
                raise InvalidTodoError("Completed must be a boolean")
            changes["completed"] = patch["completed"]
        item = self._items[idx]
        item.update(changes)
        item["updatedAt"] = utc_now_iso()
        return item

    def remove_by_id(self, todo_id: Optional[int]) -> dict:
        idx = self.find_index_by_id(todo_id)
        if idx is None:
            raise TodoNotFoundError(todo_id)
        return self._items.pop(idx)
