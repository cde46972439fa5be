"""Middleware for request logging, correlation IDs, and metrics."""

import time
from typing import Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from travel_intel.core.logging_config import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)

# Set by endpoints whose payload is a fallback record
DEGRADED_HEADER = "X-Analysis-Degraded"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests with correlation IDs."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response with timing and correlation ID.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        correlation_id = set_request_id(request.headers.get("X-Request-ID"))
        start_time = time.time()

        logger.info(
            "Request started",
            extra={
                "extra_fields": {
                    "method": request.method,
                    "path": request.url.path,
                    "query_params": dict(request.query_params),
                    "client_ip": request.client.host if request.client else None,
                }
            },
        )

        try:
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "Request completed",
                extra={
                    "extra_fields": {
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                        "degraded": response.headers.get(DEGRADED_HEADER) == "true",
                    }
                },
            )

            response.headers["X-Request-ID"] = correlation_id
            response.headers["X-Response-Time"] = f"{round(duration_ms, 2)}ms"

            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                "Request failed",
                extra={
                    "extra_fields": {
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": round(duration_ms, 2),
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
                exc_info=True,
            )

            raise

        finally:
            clear_request_id()


class RequestMetrics:
    """In-process request counters shared between the middleware and /metrics."""

    def __init__(self):
        self.requests_total = 0
        self.requests_in_progress = 0
        self.degraded_responses = 0
        self.total_duration_seconds = 0.0
        self.requests_by_endpoint: Dict[str, Dict[str, float]] = {}
        self.requests_by_status: Dict[int, int] = {}

    def record(self, endpoint: str, status_code: int, duration: float, degraded: bool) -> None:
        """Record one completed request."""
        self.requests_total += 1
        self.total_duration_seconds += duration
        if degraded:
            self.degraded_responses += 1

        stats = self.requests_by_endpoint.setdefault(endpoint, {"count": 0, "total_duration": 0.0})
        stats["count"] += 1
        stats["total_duration"] += duration

        self.requests_by_status[status_code] = self.requests_by_status.get(status_code, 0) + 1

    def snapshot(self) -> dict:
        """Get current metrics with average durations."""
        avg_duration = 0.0
        if self.requests_total > 0:
            avg_duration = self.total_duration_seconds / self.requests_total

        endpoints = {}
        for endpoint, data in self.requests_by_endpoint.items():
            avg_endpoint_duration = data["total_duration"] / data["count"] if data["count"] else 0.0
            endpoints[endpoint] = {
                "count": int(data["count"]),
                "avg_duration_seconds": round(avg_endpoint_duration, 4),
            }

        return {
            "requests_total": self.requests_total,
            "requests_in_progress": self.requests_in_progress,
            "degraded_responses": self.degraded_responses,
            "avg_duration_seconds": round(avg_duration, 4),
            "requests_by_endpoint": endpoints,
            "requests_by_status": self.requests_by_status,
        }


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for collecting request metrics.

    Tracks:
    - Request count by endpoint and method
    - Response status codes
    - Request duration
    - Responses served from fallback data
    """

    def __init__(self, app: ASGIApp, metrics: RequestMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Track request metrics.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        self.metrics.requests_in_progress += 1
        start_time = time.time()

        try:
            response = await call_next(request)
            self.metrics.record(
                endpoint=f"{request.method} {request.url.path}",
                status_code=response.status_code,
                duration=time.time() - start_time,
                degraded=response.headers.get(DEGRADED_HEADER) == "true",
            )
            return response

        finally:
            self.metrics.requests_in_progress -= 1
