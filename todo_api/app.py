from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.core.config import Settings, get_settings
from todo_api.routers import health as health_router
from todo_api.routers import pages as pages_router
from todo_api.routers import todos as todos_router
from todo_api.services.todo_store import InvalidTodoError, TodoNotFoundError, TodoStore

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "web")
TEMPLATES = os.path.join(BASE, "templates")
CSS_HREF = "/static/todo.css"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidTodoError)
    async def invalid_todo(request: Request, exc: InvalidTodoError):
        return _error(400, str(exc))

    @app.exception_handler(TodoNotFoundError)
    async def todo_not_found(request: Request, exc: TodoNotFoundError):
        return _error(404, "Todo not found")

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # 405 means the path exists but not for this method; report it as unknown
        if exc.status_code in (404, 405):
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Something went wrong!")


def create_app(settings: Optional[Settings] = None, store: Optional[TodoStore] = None) -> FastAPI:
    """Build the API; the store is loaded from disk when the app starts."""
    settings = settings or get_settings()
    store = store or TodoStore(settings.data_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.load()
        yield

    app = FastAPI(title="Todo List API", lifespan=lifespan)
    app.state.settings = settings
    app.state.todo_store = store
    app.state.templates = Jinja2Templates(directory=TEMPLATES)
    app.state.css_href = CSS_HREF

    # The UI may be served from another origin during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.mount("/static", StaticFiles(directory=WEB), name="static")

    app.include_router(todos_router.router)
    app.include_router(health_router.router)
    app.include_router(pages_router.router)
    _register_error_handlers(app)
    return app


app = create_app()
