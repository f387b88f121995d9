"""Logging middleware for HTTP request/response tracking."""

import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from converter_app.logging_config import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses using structlog context binding."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details.

        Args:
            request: The incoming request
            call_next: The next middleware/route handler

        Returns:
            The response from downstream handlers
        """
        request_id = str(uuid.uuid4())

        method = request.method
        url = str(request.url)

        request_logger = logger.bind(
            request_id=request_id,
            method=method,
            endpoint=url,
            client_ip=self._get_client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
        )

        start_time = time.time()
        request_logger.info(f"Incoming request: {method} {url}")

        # Route handlers pick these up from request state
        request.state.request_id = request_id
        request.state.logger = request_logger

        try:
            response = await call_next(request)
        except Exception as e:
            response_time_ms = round((time.time() - start_time) * 1000, 2)
            user_context_fields = self._bind_user_context(request)
            request_logger.error(
                f"Request failed: {method} {url} - {e!s}",
                response_time_ms=response_time_ms,
                exc_info=True,
                **user_context_fields,
            )
            raise

        response_time_ms = round((time.time() - start_time) * 1000, 2)
        user_context_fields = self._bind_user_context(request)
        request_logger.info(
            f"Request completed: {method} {url} - {response.status_code}",
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            **user_context_fields,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    def _bind_user_context(self, request: Request) -> dict[str, Any]:
        """Collect the authenticated user for logging and tag the current span.

        Args:
            request: The HTTP request

        Returns:
            Log fields describing the caller, empty if unauthenticated
        """
        user_context = getattr(request.state, "user_context", None)
        if not user_context:
            return {}

        current_span = trace.get_current_span()
        if current_span.is_recording():
            current_span.set_attribute("user.id", user_context.user_id)

        return {"user_id": user_context.user_id}

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request.

        Args:
            request: The HTTP request

        Returns:
            Client IP address
        """
        # Check for forwarded headers (for load balancers/proxies)
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        forwarded_host = request.headers.get("x-forwarded-host")
        if forwarded_host:
            return forwarded_host

        if request.client:
            return request.client.host

        return "unknown"
