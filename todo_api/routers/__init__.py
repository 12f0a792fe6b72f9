"""
FastAPI routers grouped by concern (todos API, health, UI pages).

Each file inside this package exposes an APIRouter that the app factory
includes. Handlers read the TodoStore from ``app.state``.
"""
