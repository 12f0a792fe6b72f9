from __future__ import annotations

import re
from typing import Optional

from fastapi import APIRouter, Body, Request

from todo_api.services.todo_store import TodoStore

router = APIRouter(prefix="/api", tags=["todos"])


def get_store(request: Request) -> TodoStore:
    store = getattr(getattr(request.app, "state", None), "todo_store", None)
    if not store:
        raise RuntimeError("TodoStore not configured")
    return store


# leading integer prefix, so "2abc" and "1.5" address ids 2 and 1
ID_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _parse_id(raw: str) -> Optional[int]:
    match = ID_PREFIX.match(raw)
    if not match:
        return None
    return int(match.group(1))


@router.get("/todos")
async def list_todos(request: Request):
    return get_store(request).list()


@router.post("/todos", status_code=201)
async def create_todo(request: Request, payload: Optional[dict] = Body(None)):
    store = get_store(request)
    item = store.insert((payload or {}).get("text"))
    await store.save()
    return item


@router.put("/todos/{todo_id}")
async def update_todo(todo_id: str, request: Request, payload: Optional[dict] = Body(None)):
    store = get_store(request)
    item = store.update_by_id(_parse_id(todo_id), payload or {})
    await store.save()
    return item


@router.delete("/todos/{todo_id}")
async def delete_todo(todo_id: str, request: Request):
    store = get_store(request)
    item = store.remove_by_id(_parse_id(todo_id))
    await store.save()
    return {"message": "Todo deleted successfully", "todo": item}


@router.get("/stats")
async def todo_stats(request: Request):
    return get_store(request).stats()
