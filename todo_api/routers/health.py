from fastapi import APIRouter, Request

from todo_api.core.utils import utc_now_iso
from todo_api.routers.todos import get_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    return {
        "status": "OK",
        "timestamp": utc_now_iso(),
        "todosCount": get_store(request).count(),
    }
