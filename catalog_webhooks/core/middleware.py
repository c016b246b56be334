"""
FastAPI Middleware

Provides request/response middleware for:
- Correlation ID injection
- Request logging (webhook tokens masked)
- Global error handling
- Security headers
- Rate limiting for webhook endpoints
"""
import time
from collections import defaultdict
from typing import Callable, Mapping
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_webhooks.core.config import Settings
from catalog_webhooks.core.logging import (
    get_logger,
    set_correlation_id,
    get_correlation_id
)
from catalog_webhooks.core.exceptions import AppException, ErrorCode

logger = get_logger(__name__)

# Query parameters whose values never reach the request log
_SECRET_QUERY_PARAMS = frozenset({"token"})
_MASK = "***"


def _mask_query_params(params: Mapping[str, str]) -> dict[str, str]:
    """Replace secret query values (the webhook token) with a fixed mask"""
    return {
        key: (_MASK if key.lower() in _SECRET_QUERY_PARAMS else value)
        for key, value in params.items()
    }


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation ID to requests"""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log requests and responses"""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        start_time = time.time()
        path = request.url.path

        logger.info(
            f"Request started: {request.method} {path}",
            extra_data={
                "method": request.method,
                "path": path,
                "query_params": _mask_query_params(request.query_params),
                "client_host": request.client.host if request.client else None,
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {path}",
                extra_data={
                    "method": request.method,
                    "path": path,
                    "duration_seconds": round(time.time() - start_time, 4),
                    "error": str(e),
                },
                exc_info=True
            )
            raise

        log_level = "info" if response.status_code < 400 else "warning"
        getattr(logger, log_level)(
            f"Request completed: {request.method} {path}",
            extra_data={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_seconds": round(time.time() - start_time, 4),
            }
        )
        return response


async def app_exception_handler(
    request: Request,
    exc: AppException
) -> JSONResponse:
    """Handle application exceptions"""
    logger.warning(
        f"Application exception: {exc.error_code.value}",
        extra_data={
            "error_code": exc.error_code.value,
            "message": exc.message,
            "details": exc.details,
            "path": request.url.path,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"X-Correlation-ID": get_correlation_id()}
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions: the cause is logged, never returned"""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra_data={
            "error_code": ErrorCode.INTERNAL_ERROR.value,
            "exception_type": type(exc).__name__,
            "message": str(exc),
            "path": request.url.path,
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "An unexpected error occurred"},
        headers={"X-Correlation-ID": get_correlation_id()}
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response.

    X-Content-Type-Options is always set; HSTS and CSP only outside DEBUG so
    local HTTP development keeps working.
    """

    def __init__(self, app: FastAPI, *, debug: bool = False) -> None:
        super().__init__(app)
        self._debug = debug

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"

        if not self._debug:
            response.headers["Content-Security-Policy"] = "upgrade-insecure-requests"
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class WebhookRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window rate limit per client IP on paths containing /webhook.

    State lives in this process only; behind several workers every worker
    enforces its own window.
    """

    def __init__(
        self,
        app: FastAPI,
        *,
        max_requests: int = 100,
        window_seconds: int = 60,
        sweep_every: int = 1000,
    ) -> None:
        super().__init__(app)
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._requests: dict[str, list[float]] = defaultdict(list)
        # Every N-th webhook request prunes all IPs, not only the caller's
        self._sweep_every = sweep_every
        self._seen_since_sweep = 0

    def _cleanup_window(self, ip: str, now: float) -> None:
        """Drop timestamps that left the window, and the IP once it has none"""
        cutoff = now - self._window_seconds
        timestamps = [ts for ts in self._requests.get(ip, []) if ts >= cutoff]
        if timestamps:
            self._requests[ip] = timestamps
        else:
            self._requests.pop(ip, None)

    def _sweep_stale(self, now: float) -> None:
        """Drop every IP whose timestamps all left the window"""
        for ip in list(self._requests):
            self._cleanup_window(ip, now)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path
        if "/webhook" not in path:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        self._seen_since_sweep += 1
        if self._seen_since_sweep >= self._sweep_every:
            self._seen_since_sweep = 0
            self._sweep_stale(now)

        self._cleanup_window(client_ip, now)

        if len(self._requests.get(client_ip, [])) >= self._max_requests:
            logger.warning(
                "Rate limit exceeded for webhook",
                extra_data={
                    "error_code": ErrorCode.RATE_LIMITED.value,
                    "client_ip": client_ip,
                    "path": path,
                    "limit": self._max_requests,
                    "window_seconds": self._window_seconds,
                },
            )
            return JSONResponse(
                status_code=429,
                content={"status": "error", "message": "Too many requests"},
                headers={
                    "Retry-After": str(self._window_seconds),
                    "X-Correlation-ID": get_correlation_id(),
                },
            )

        self._requests[client_ip].append(now)
        return await call_next(request)


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Setup all middleware for the application"""
    # The last middleware added is the outermost one.
    # Request order: SecurityHeaders → CorrelationId → RequestLogging → RateLimit → app
    app.add_middleware(
        WebhookRateLimitMiddleware,
        max_requests=settings.WEBHOOK_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.WEBHOOK_RATE_LIMIT_WINDOW_SECONDS,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, debug=settings.DEBUG)


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup exception handlers"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
