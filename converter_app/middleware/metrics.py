"""Prometheus metrics middleware for FastAPI."""

import re
import time
from collections.abc import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_COUNT = Counter(
    "http_requests_total", "Total number of HTTP requests", ["method", "endpoint", "status_code"]
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["method", "endpoint"]
)

IN_PROGRESS_REQUESTS = Gauge(
    "http_requests_in_progress", "Number of HTTP requests currently being processed"
)

# Application-specific metrics
ACTIONS_TOTAL = Counter(
    "conversion_store_actions_total",
    "Total number of conversion store actions performed",
    ["action", "status"],
)

DATABASE_OPERATIONS_TOTAL = Counter(
    "database_operations_total",
    "Total number of database operations",
    ["operation", "table", "status"],
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = self._get_endpoint_pattern(request)
        method = request.method

        IN_PROGRESS_REQUESTS.inc()
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
            return response

        except Exception:
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code="500").inc()
            raise

        finally:
            duration = time.time() - start_time
            REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)
            IN_PROGRESS_REQUESTS.dec()

    def _get_endpoint_pattern(self, request: Request) -> str:
        """Extract endpoint pattern from request for consistent labeling."""
        if hasattr(request, "scope") and "route" in request.scope:
            route = request.scope["route"]
            if hasattr(route, "path"):
                return route.path

        # Fallback to actual path, but normalize record ids
        path = request.url.path
        path = re.sub(
            r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", "/{id}", path
        )
        return re.sub(r"/\d+", "/{id}", path)


def get_metrics() -> str:
    """Get current metrics in Prometheus format."""
    return generate_latest().decode("utf-8")


def record_action(action: str, *, success: bool = True):
    """Record a conversion store action outcome."""
    status = "success" if success else "error"
    ACTIONS_TOTAL.labels(action=action, status=status).inc()


def record_database_operation(operation: str, table: str, *, success: bool = True):
    """Record database operation metrics."""
    status = "success" if success else "error"
    DATABASE_OPERATIONS_TOTAL.labels(operation=operation, table=table, status=status).inc()
