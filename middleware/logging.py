"""
Meal Planner Logging Middleware
Request logging with request ids, timing and the forwarded user id
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
import time
import uuid
from typing import Dict, Any, Optional
from contextvars import ContextVar

logger = structlog.get_logger()

request_id_var: ContextVar[str] = ContextVar('request_id', default='')

REQUEST_ID_HEADER = "x-request-id"
USER_ID_HEADER = "x-user-id"
SLOW_REQUEST_SECONDS = 2.0
QUIET_PATHS = ("/api/health", "/favicon.ico")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds ``request_id`` and ``user_id`` into structlog's context for the
    duration of a request, so every log line written while serving it
    carries both. Health probes are served without start/complete lines.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        user_id = request.headers.get(USER_ID_HEADER) or ''

        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        if user_id:
            structlog.contextvars.bind_contextvars(user_id=user_id)

        quiet = request.url.path.startswith(QUIET_PATHS)
        if not quiet:
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                client_ip=client_ip(request),
                event_type="request_start"
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                elapsed=round(time.perf_counter() - started, 4),
                error=str(e),
                error_type=type(e).__name__,
                event_type="request_error"
            )
            raise

        elapsed = time.perf_counter() - started
        if not quiet:
            logger.log(
                level_for_status(response.status_code),
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                elapsed=round(elapsed, 4),
                event_type="request_complete"
            )
            if elapsed > SLOW_REQUEST_SECONDS:
                logger.warning("Slow request", endpoint=f"{request.method} {request.url.path}", elapsed=elapsed)

        response.headers["X-Request-ID"] = request_id
        return response


def client_ip(request: Request) -> str:
    forwarded: Optional[str] = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return 40  # ERROR
    if status_code >= 400:
        return 30  # WARNING
    return 20  # INFO


def get_request_id() -> str:
    return request_id_var.get()


def log_user_activity(activity: str, details: Dict[str, Any] = None):
    """User-initiated change worth auditing, e.g. saved preferences"""
    logger.info("User activity", activity=activity, details=details or {}, event_type="user_activity")


def log_business_event(event: str, data: Dict[str, Any] = None):
    """
    Domain event for analytics (plan generated, meal replaced, list exported)

    The name goes out as ``business_event``; ``event`` is structlog's message key.
    """
    logger.info("Business event", business_event=event, data=data or {}, event_type="business_event")
