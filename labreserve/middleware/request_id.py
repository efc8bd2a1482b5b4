from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import sentry_sdk
import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-ID"


def _client_ip(request: Request) -> str:
    return (request.client.host if request.client else None) or "-"


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Attach/propagate Request-ID and emit one structured access log line.

    The request_id bound here is merged into every structlog event emitted
    while the request is handled, e.g. reservation_created or
    reservation_conflict from the services.
    """
    logger = structlog.get_logger(__name__)

    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(
        request_id=rid, path=request.url.path, method=request.method
    )

    # no-op when Sentry is not initialized
    sentry_sdk.set_tag("request_id", rid)
    sentry_sdk.set_tag("path", request.url.path)
    sentry_sdk.set_tag("method", request.method)

    start_ns = time.perf_counter_ns()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception:
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000.0
        logger.error(
            "http_request",
            status=status_code,
            duration_ms=round(duration_ms, 3),
            client_ip=_client_ip(request),
            exc_info=True,
        )
        structlog.contextvars.clear_contextvars()
        raise

    duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000.0
    logger.info(
        "http_request",
        status=status_code,
        duration_ms=round(duration_ms, 3),
        client_ip=_client_ip(request),
    )

    response.headers[REQUEST_ID_HEADER] = rid

    # Clear per-request bindings to avoid leakage across tasks
    structlog.contextvars.clear_contextvars()
    return response
