"""Main FastAPI application for the conversion store API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from converter_app.database import create_tables
from converter_app.exceptions import ActionError
from converter_app.logging_config import get_logger
from converter_app.middleware.auth import AuthenticationMiddleware
from converter_app.middleware.logging import LoggingMiddleware
from converter_app.middleware.metrics import PrometheusMiddleware, get_metrics
from converter_app.models.conversion import ErrorResponse
from converter_app.routers import favorites, health, history
from converter_app.tracing_config import configure_tracing, instrument_application

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Conversion Store API application")

    try:
        configure_tracing(service_name="converter-api", enable_console_export=True)
        instrument_application()
        logger.info("OpenTelemetry tracing configured successfully")
    except Exception:
        # Tracing is optional; the API still serves requests without it
        logger.error("Failed to configure tracing", exc_info=True)

    try:
        create_tables()
        logger.info("Database tables created successfully")
    except Exception:
        logger.error("Failed to create database tables", exc_info=True)
        raise

    logger.info("Conversion Store API application started successfully")
    yield

    logger.info("Shutting down Conversion Store API application")


app = FastAPI(
    title="Conversion Store API",
    description="Per-user history and favorites for unit and currency conversions",
    version="0.1.0",
    lifespan=lifespan,
)

# Auth runs innermost so logging and metrics still see rejected requests
app.add_middleware(AuthenticationMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(PrometheusMiddleware)

app.include_router(health.router)
app.include_router(history.router)
app.include_router(favorites.router)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(ActionError)
async def action_error_handler(request: Request, exc: ActionError) -> JSONResponse:
    """Render typed action errors as the error envelope."""
    error_response = ErrorResponse.create(
        code=exc.code,
        message=exc.message,
        details=exc.details,
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render input validation failures as the error envelope."""
    error_response = ErrorResponse.create(
        code="VALIDATION_ERROR",
        message="Request input failed validation",
        details={"errors": jsonable_encoder(exc.errors())},
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=422, content=error_response.model_dump(mode="json"))


HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing and HTTP errors as the error envelope."""
    error_response = ErrorResponse.create(
        code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=str(exc.detail),
        request_id=_request_id(request),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected failures as a generic internal error."""
    logger.error("Unhandled exception", error_type=type(exc).__name__, exc_info=exc)
    error_response = ErrorResponse.create(
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


@app.get("/api")
async def api_info() -> dict[str, str | dict[str, str]]:
    """API information endpoint.

    Returns:
        API information and available endpoints
    """
    return {
        "message": "Conversion Store API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "history": "/api/v1/history",
            "favorites": "/api/v1/favorites",
            "metrics": "/metrics",
        },
    }


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    return Response(content=get_metrics(), media_type="text/plain")


if __name__ == "__main__":
    import uvicorn

    from converter_app.config import settings

    uvicorn.run("converter_app.main:app", host=settings.api_host, port=settings.api_port)
