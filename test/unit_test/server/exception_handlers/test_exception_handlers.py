"""
Unit tests for server exception handlers.

Tests cover the global handler for unexpected errors and the handler turning
domain errors into client errors.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from prs_online.core.errors import NoticeWorkflowError, PrsOnlineError
from prs_online.server.exception_handlers import setup_exception_handlers
from prs_online.server.exception_handlers.global_handler import (
    domain_exception_handler,
    global_exception_handler,
)


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/test"
    request.query_params = {"page": "2"}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    @pytest.mark.asyncio
    async def test_exception_handler_logs_error(self, mock_request):
        exc = ValueError("Test error")

        with patch("prs_online.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["query_params"] == {"page": "2"}
            assert call_args[1]["extra"]["client"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_exception_handler_returns_500_json(self, mock_request):
        with patch("prs_online.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, RuntimeError("boom"))

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = json.loads(response.body.decode())
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
        assert len(body["error_id"]) == 12

    @pytest.mark.asyncio
    async def test_error_ids_are_unique(self, mock_request):
        with patch("prs_online.server.exception_handlers.global_handler.logger"):
            first = await global_exception_handler(mock_request, RuntimeError("boom"))
            second = await global_exception_handler(mock_request, RuntimeError("boom"))

        assert json.loads(first.body)["error_id"] != json.loads(second.body)["error_id"]

    @pytest.mark.asyncio
    async def test_request_without_client(self, mock_request):
        mock_request.client = None

        with patch("prs_online.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("boom"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


class TestDomainExceptionHandler:
    @pytest.mark.asyncio
    async def test_domain_error_is_a_client_error(self, mock_request):
        with patch("prs_online.server.exception_handlers.global_handler.logger") as mock_logger:
            response = await domain_exception_handler(mock_request, NoticeWorkflowError("fromDate is after toDate"))

        mock_logger.warning.assert_called_once()
        assert response.status_code == 400
        assert json.loads(response.body) == {
            "detail": "fromDate is after toDate",
            "error_type": "NoticeWorkflowError",
        }


class TestSetupExceptionHandlers:
    def test_registers_handlers(self):
        app = FastAPI()
        setup_exception_handlers(app)

        assert app.exception_handlers[Exception] is global_exception_handler
        assert app.exception_handlers[PrsOnlineError] is domain_exception_handler

    @pytest.mark.asyncio
    async def test_handlers_answer_requests(self):
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/domain")
        async def domain():
            raise NoticeWorkflowError("not allowed")

        @app.get("/crash")
        async def crash():
            raise RuntimeError("boom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            domain_response = await client.get("/domain")
            crash_response = await client.get("/crash")

        assert domain_response.status_code == 400
        assert domain_response.json()["detail"] == "not allowed"
        assert crash_response.status_code == 500
        assert crash_response.json()["detail"] == "Internal server error"
