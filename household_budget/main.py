# household_budget/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from household_budget.config import get_settings
from household_budget.db import create_db_and_tables, make_engine
from household_budget.errors import AuthError, NotReadyError, RemoteError, ValidationError
from household_budget.flash import FlashMiddleware
from household_budget.observability import RequestLogMiddleware
from household_budget.remote import SqlRemoteStore
from household_budget.routers.auth import router as auth_router
from household_budget.routers.budget import router as budget_router
from household_budget.routers.expenses import router as expenses_router
from household_budget.routers.preferences import router as preferences_router
from household_budget.routers.reports import router as reports_router
from household_budget.routers.savings import router as savings_router
from household_budget.routers.system import router as system_router
from household_budget.workspaces import WorkspaceRegistry

settings = get_settings()  # bad backend config stops the process here
logging.basicConfig(level=settings.log_level)

engine = make_engine(settings.store_url)


@asynccontextmanager
async def lifespan(_: FastAPI):
    create_db_and_tables(engine)
    yield


app = FastAPI(title="Household Budget", version="0.1.0", lifespan=lifespan)

# Shared objects via app.state so routers don't import from main
app.state.remote = SqlRemoteStore(
    engine, secret_key=settings.store_key, token_max_age=settings.token_max_age
)
app.state.workspaces = WorkspaceRegistry(max_idle=settings.session_max_age)

# Added innermost first: SessionMiddleware ends up outermost, so the
# request log and the notices both see the browser session.
app.add_middleware(FlashMiddleware)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.store_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,  # idle workspaces go with it
    same_site="lax",
)


# ---------- Errors -> HTTP ----------


@app.exception_handler(AuthError)
def auth_error(request: Request, ex: AuthError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(ex), "kind": ex.kind.value},
    )


@app.exception_handler(ValidationError)
def validation_error(request: Request, ex: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(ex)})


@app.exception_handler(NotReadyError)
def not_ready(request: Request, ex: NotReadyError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(ex)}
    )


@app.exception_handler(RemoteError)
def remote_error(request: Request, ex: RemoteError):
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(ex)})


# Routers
app.include_router(system_router)
app.include_router(auth_router)
app.include_router(expenses_router)
app.include_router(budget_router)
app.include_router(savings_router)
app.include_router(preferences_router)
app.include_router(reports_router)
