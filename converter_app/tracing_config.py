"""OpenTelemetry tracing configuration for the conversion store API."""

import os
import sys
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter


def configure_tracing(
    service_name: str = "converter-api",
    jaeger_endpoint: str | None = None,
    *,
    enable_console_export: bool = False,
) -> None:
    """Configure OpenTelemetry tracing for the application.

    Args:
        service_name: Name of the service for tracing
        jaeger_endpoint: Jaeger collector endpoint URL
        enable_console_export: Whether to enable console span export for debugging
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": os.getenv("SERVICE_VERSION", "1.0.0"),
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    jaeger_endpoint = jaeger_endpoint or os.getenv("JAEGER_ENDPOINT")
    if jaeger_endpoint:
        # OTLP gRPC listens on 4317
        otlp_endpoint = jaeger_endpoint.replace(":14250", ":4317")
        otlp_exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    # Console export stays off under pytest
    is_testing = "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST")
    if not is_testing and (
        enable_console_export or os.getenv("OTEL_CONSOLE_EXPORT", "").lower() == "true"
    ):
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))


def instrument_application() -> None:
    """Instrument the application with OpenTelemetry auto-instrumentation."""
    FastAPIInstrumentor().instrument()
    SQLAlchemyInstrumentor().instrument()


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance for the given name.

    Args:
        name: Name for the tracer, typically __name__

    Returns:
        OpenTelemetry tracer instance
    """
    return trace.get_tracer(name)


def add_span_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Add an event to the current span.

    Args:
        name: Event name
        attributes: Optional event attributes
    """
    current_span = trace.get_current_span()
    if current_span:
        current_span.add_event(name, attributes or {})
