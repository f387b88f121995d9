"""JWT Authentication middleware for FastAPI."""

from typing import ClassVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from converter_app.auth.jwt_auth import (
    AuthenticationError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    UserContext,
    extract_token_from_header,
    validate_jwt_token,
)
from converter_app.exceptions import UnauthorizedError
from converter_app.models.conversion import ErrorResponse


def unauthorized_response(message: str) -> JSONResponse:
    """Build the 401 error envelope."""
    error_response = ErrorResponse.create(code=UnauthorizedError.code, message=message)
    return JSONResponse(status_code=401, content=error_response.model_dump(mode="json"))


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle JWT authentication for all requests."""

    # Paths that don't require authentication
    EXCLUDED_PATHS: ClassVar[set[str]] = {
        "/api",
        "/metrics",
        "/metrics/",
        "/docs",
        "/docs/",
        "/redoc",
        "/redoc/",
        "/openapi.json",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request with JWT authentication.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response, or a 401 error envelope if authentication fails
        """
        path = request.url.path
        if path in self.EXCLUDED_PATHS or path.startswith(("/health", "/docs/")):
            return await call_next(request)

        try:
            authorization_header = request.headers.get("authorization", "")
            token = extract_token_from_header(authorization_header)
            request.state.user_context = validate_jwt_token(token)

        except MissingTokenError:
            return unauthorized_response("Missing or invalid Authorization header")

        except (InvalidTokenError, ExpiredTokenError) as e:
            return unauthorized_response(str(e))

        except AuthenticationError as e:
            return unauthorized_response(f"Authentication failed: {e}")

        return await call_next(request)


def get_user_context(request: Request) -> UserContext:
    """Get the authenticated caller for a request.

    Args:
        request: FastAPI request object

    Returns:
        UserContext of the caller

    Raises:
        UnauthorizedError: If no user context was attached to the request
    """
    user_context = getattr(request.state, "user_context", None)
    if user_context is None:
        raise UnauthorizedError()

    return user_context
