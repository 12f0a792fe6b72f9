from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

router = APIRouter(prefix="", tags=["pages"])


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    templates = _templates(request)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"api_base": "/api", "css_href": request.app.state.css_href},
    )
