import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware

from household_budget.security import get_workspace_id_from_session

logger = logging.getLogger("hb.req")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    One log line per request. Server errors log at ERROR and rejected
    requests (4xx) at WARNING so failed store calls stand out.
    """

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(
            level,
            "%s %s -> %s in %.1fms user=%s workspace=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            getattr(request.state, "user_id", None),  # set by require_workspace
            get_workspace_id_from_session(request),
        )
        return response
