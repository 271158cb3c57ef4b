"""
Per-request correlation for the deck API.
"""

import time
from typing import Dict
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from deckwright.infra.config.logging_config import bind_context, clear_context, get_logger

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-Id"


def caller_context(request: Request) -> Dict[str, str]:
    """Correlation fields for one request: id, caller, route and method.

    The gateway-supplied request id is reused when present so log lines join
    up with the upstream trace.
    """
    context = {
        "request_id": request.headers.get(REQUEST_ID_HEADER) or uuid4().hex,
        "route": request.url.path,
        "method": request.method,
    }
    user_id = request.headers.get(USER_ID_HEADER)
    if user_id:
        context["user_id"] = user_id
    return context


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds caller context for every log line of a request.

    Synthesis and render runs nest their own correlation ids inside it. The
    request id is echoed back so clients can quote it in bug reports.
    """

    async def dispatch(self, request, call_next):
        context = caller_context(request)
        clear_context()
        bind_context(**context)
        log = get_logger("api.http")
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            log.exception("request.failed", duration_ms=_elapsed_ms(started))
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = context["request_id"]
            log.info(
                "request.done",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
                attachment="content-disposition" in response.headers,
            )
            return response
        finally:
            clear_context()
