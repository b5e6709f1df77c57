# household_budget/flash.py
"""
User-facing notices ("Expense added.", "At least one buyer is required.").

Routers queue a notice with flash(); the next request finds the queued
notices on request.state.notices and GET /notices hands them to the UI.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

_NOTICES_KEY = "_notices"  # where notices live inside the browser session

Notice = Dict[str, str]  # {"level": ..., "message": ...}


def _store(request: Request) -> Dict[str, Any]:
    """
    The browser session when SessionMiddleware is installed, otherwise a
    per-request dict (notices then only live for this request).
    """
    if "session" in request.scope:
        return request.session  # type: ignore[return-value]
    if not hasattr(request.state, "_notice_fallback"):
        request.state._notice_fallback = {}
    return request.state._notice_fallback


def flash(request: Request, message: str, level: str = "info") -> None:
    """Queue a notice; levels used: success, info, warning."""
    store = _store(request)
    items: List[Notice] = list(store.get(_NOTICES_KEY, []))
    items.append({"level": level, "message": message})
    store[_NOTICES_KEY] = items


def pop_notices(request: Request) -> List[Notice]:
    """Remove and return every queued notice."""
    store = _store(request)
    items: List[Notice] = list(store.get(_NOTICES_KEY, []))
    if items:
        store[_NOTICES_KEY] = []  # shown once
    return items


class FlashMiddleware(BaseHTTPMiddleware):
    """Moves notices queued by earlier requests onto request.state.notices."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.notices = pop_notices(request)
        return await call_next(request)
