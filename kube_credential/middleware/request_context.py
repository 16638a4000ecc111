"""Request context middleware: a request ID and the worker ID on every log line.

When the verification service calls issuance, both sides log the same
request ID (it is forwarded as X-Request-ID), so one verification can be
followed across services.  The worker ID tells which replica did the work.

Both values live in ContextVars rather than thread-locals: async requests
share a thread, and each task needs its own copy.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
worker_id_var: ContextVar[str] = ContextVar("worker_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Stamp request_id and worker_id onto every LogRecord.

    Explicit ``extra=`` values win over the context defaults.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        if not hasattr(record, "worker_id"):
            record.worker_id = worker_id_var.get("-")  # type: ignore[attr-defined]
        return True


def install_request_context_filter() -> None:
    """Attach the filter to root handlers so records from every logger get it.

    Logger-level filters only see records logged on that exact logger,
    so the filter goes on the handlers.  Safe to call repeatedly.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, _RequestContextFilter) for f in handler.filters):
            handler.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request, and log one summary line.

    1. Reads X-Request-ID (if the caller sent one) or generates a UUID
    2. Publishes it and the app's worker ID through ContextVars
    3. Logs method, path, status and duration on completion
    4. Echoes X-Request-ID on the response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)
        worker = getattr(request.app.state, "worker", None)
        if worker is not None:
            worker_id_var.set(worker.worker_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
