"""
Run the todo server.

Usage:
  python -m todo_api [--port 3001]
"""
from __future__ import annotations

import argparse
import logging

import uvicorn

from todo_api.core.config import get_settings
from todo_api.core.log_config import configure_logging

logger = logging.getLogger("todo_api")

ENDPOINTS = (
    ("GET", "/api/todos", "Get all todos"),
    ("POST", "/api/todos", "Create todo"),
    ("PUT", "/api/todos/:id", "Update todo"),
    ("DELETE", "/api/todos/:id", "Delete todo"),
    ("GET", "/api/stats", "Get statistics"),
)


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Todo list REST server")
    ap.add_argument("--port", type=int, default=settings.port, help="HTTP port (default: $PORT or 3001)")
    args = ap.parse_args()

    configure_logging()
    logger.info("Todo server running on port %d", args.port)
    logger.info("Health check: http://localhost:%d/health", args.port)
    logger.info("API endpoints:")
    for method, path, summary in ENDPOINTS:
        logger.info("  %-6s %-14s - %s", method, path, summary)

    uvicorn.run("todo_api.app:app", host=settings.host, port=args.port)


if __name__ == "__main__":
    main()
