"""Logging configuration for the conversion store API."""

from common.logging_config import configure_structlog, get_logger

# Configure structlog for the conversion store API
configure_structlog("converter-api")

__all__ = ["get_logger"]
