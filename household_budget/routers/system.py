# household_budget/routers/system.py
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()  # group of routes


@router.get("/healthz", response_class=PlainTextResponse)  # tiny health check
def healthz():
    return "ok"


@router.get("/notices")
def notices(request: Request):
    # FlashMiddleware already popped them from the session for this request
    return {"notices": getattr(request.state, "notices", [])}
