"""Tests for Prometheus metrics middleware and helpers."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import Request, Response

from converter_app.middleware.metrics import (
    ACTIONS_TOTAL,
    DATABASE_OPERATIONS_TOTAL,
    IN_PROGRESS_REQUESTS,
    REQUEST_COUNT,
    REQUEST_DURATION,
    PrometheusMiddleware,
    record_action,
    record_database_operation,
)


def total_samples(metric):
    """Return the _total samples of a counter."""
    samples = next(iter(metric.collect())).samples
    return [s for s in samples if s.name.endswith("_total")]


class TestPrometheusMiddleware:
    """Test cases for PrometheusMiddleware."""

    @pytest.fixture(autouse=True)
    def clear_metrics(self):
        """Clear Prometheus metrics before each test."""
        REQUEST_COUNT.clear()
        REQUEST_DURATION.clear()
        IN_PROGRESS_REQUESTS.set(0)

    @pytest.fixture
    def middleware(self):
        """Create PrometheusMiddleware instance."""
        return PrometheusMiddleware(Mock())

    @pytest.fixture
    def mock_request(self):
        """Create mock request."""
        request = Mock(spec=Request)
        request.method = "GET"
        request.url.path = "/api/v1/favorites"
        request.scope = {"route": Mock(path="/api/v1/favorites")}
        return request

    @pytest.fixture
    def mock_response(self):
        """Create mock response."""
        response = Mock(spec=Response)
        response.status_code = 200
        return response

    async def test_dispatch_successful_request(self, middleware, mock_request, mock_response):
        """Test successful request processing."""
        call_next = AsyncMock(return_value=mock_response)

        result = await middleware.dispatch(mock_request, call_next)

        assert result == mock_response
        call_next.assert_called_once_with(mock_request)

        samples = total_samples(REQUEST_COUNT)
        assert len(samples) == 1
        assert samples[0].labels == {
            "method": "GET",
            "endpoint": "/api/v1/favorites",
            "status_code": "200",
        }
        assert samples[0].value == 1.0
        assert IN_PROGRESS_REQUESTS._value.get() == 0

    async def test_dispatch_failed_request(self, middleware, mock_request):
        """Test failed request processing."""
        call_next = AsyncMock(side_effect=RuntimeError("Test error"))

        with pytest.raises(RuntimeError, match="Test error"):
            await middleware.dispatch(mock_request, call_next)

        samples = total_samples(REQUEST_COUNT)
        assert len(samples) == 1
        assert samples[0].labels["status_code"] == "500"
        assert IN_PROGRESS_REQUESTS._value.get() == 0

    async def test_dispatch_skips_metrics_endpoint(self, middleware):
        """Test that /metrics endpoint is skipped."""
        request = Mock(spec=Request)
        request.url.path = "/metrics"
        mock_response = Mock(spec=Response)
        call_next = AsyncMock(return_value=mock_response)

        result = await middleware.dispatch(request, call_next)

        assert result == mock_response
        assert total_samples(REQUEST_COUNT) == []

    async def test_dispatch_records_duration(self, middleware, mock_request, mock_response):
        """Test that request duration is recorded."""
        await middleware.dispatch(mock_request, AsyncMock(return_value=mock_response))

        duration_samples = next(iter(REQUEST_DURATION.collect())).samples
        count_sample = next(s for s in duration_samples if s.name.endswith("_count"))
        assert count_sample.value == 1.0

    def test_get_endpoint_pattern_with_route(self, middleware):
        """Test endpoint pattern extraction with FastAPI route."""
        request = Mock(spec=Request)
        request.scope = {"route": Mock(path="/api/v1/favorites/{favorite_id}")}
        request.url.path = "/api/v1/favorites/0190a4f2-7c1e-7d2a-9b7e-3f5c2a1b0c9d"

        assert middleware._get_endpoint_pattern(request) == "/api/v1/favorites/{favorite_id}"

    def test_get_endpoint_pattern_normalizes_record_ids(self, middleware):
        """Test that record ids in unmatched paths are normalized."""
        request = Mock(spec=Request)
        request.scope = {}
        request.url.path = "/api/v1/history/0190a4f2-7c1e-7d2a-9b7e-3f5c2a1b0c9d"

        assert middleware._get_endpoint_pattern(request) == "/api/v1/history/{id}"

    def test_get_endpoint_pattern_normalizes_numeric_ids(self, middleware):
        """Test that numeric ID patterns are normalized."""
        request = Mock(spec=Request)
        request.scope = {}
        request.url.path = "/api/v1/history/12345"

        assert middleware._get_endpoint_pattern(request) == "/api/v1/history/{id}"


class TestMetricsUtilities:
    """Test cases for metrics utility functions."""

    @pytest.fixture(autouse=True)
    def clear_metrics(self):
        """Clear Prometheus metrics before each test."""
        ACTIONS_TOTAL.clear()
        DATABASE_OPERATIONS_TOTAL.clear()

    def test_record_action(self):
        """Test action outcomes are labelled by status."""
        record_action("createFavoriteConversion")
        record_action("createFavoriteConversion")
        record_action("deleteFavoriteConversion", success=False)

        samples = {
            (s.labels["action"], s.labels["status"]): s.value
            for s in total_samples(ACTIONS_TOTAL)
        }
        assert samples == {
            ("createFavoriteConversion", "success"): 2.0,
            ("deleteFavoriteConversion", "error"): 1.0,
        }

    def test_record_database_operation(self):
        """Test database operations are labelled by table."""
        record_database_operation("insert", "conversion_history")
        record_database_operation("update", "favorite_conversions", success=False)

        samples = {
            (s.labels["operation"], s.labels["table"], s.labels["status"])
            for s in total_samples(DATABASE_OPERATIONS_TOTAL)
        }
        assert samples == {
            ("insert", "conversion_history", "success"),
            ("update", "favorite_conversions", "error"),
        }
