from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-Id"

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

logger = logging.getLogger("http")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, echoes it back and logs one line per request."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        token = request_id_var.set(rid)
        started = time.perf_counter()
        try:
            resp = await call_next(request)
        finally:
            request_id_var.reset(token)

        resp.headers[REQUEST_ID_HEADER] = rid
        logger.info(
            "request_done",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status_code": resp.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return resp
