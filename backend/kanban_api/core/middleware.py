"""
HTTP middleware: request ids, access logging and crash recovery.

Registration order matters. Starlette runs the last registered middleware
first, so install_middleware() adds them innermost first:
recovery (innermost) -> access log -> request id -> CORS (outermost).
"""

import logging
import time
import uuid
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from kanban_api.core.config import Settings
from kanban_api.core.errors import InternalError, error_response

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("kanban_api.access")

REQUEST_ID_HEADER = "X-Request-Id"


async def assign_request_id(request: Request, call_next):
    """Reuse the caller's request id or mint one, and echo it back"""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def log_requests(request: Request, call_next):
    """Log one line per request with status, latency and acting user"""
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000

    principal = getattr(request.state, "principal", None)
    access_logger.info(
        "req_id=%s status=%d method=%s path=%s user=%s latency=%.1fms",
        getattr(request.state, "request_id", "-"),
        response.status_code,
        request.method,
        request.url.path,
        principal.user_id if principal else "-",
        latency_ms,
    )
    return response


async def recover_errors(request: Request, call_next):
    """Turn any unhandled exception into a JSON 500 without exposing details"""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message)


def install_middleware(app: FastAPI, settings: Settings) -> None:
    app.middleware("http")(recover_errors)
    app.middleware("http")(log_requests)
    app.middleware("http")(assign_request_id)

    # CORS middleware - allows the frontend to call the API from the browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
