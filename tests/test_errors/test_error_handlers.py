from __future__ import annotations

import json
import uuid
import pytest
from unittest.mock import Mock, patch
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_501_NOT_IMPLEMENTED,
)

from catalog.core.errors import (
    ErrorBody,
    ErrorEnvelope,
    _build_meta,
    _serialize_validation_errors,
    register_exception_handlers,
)
from catalog.core.exceptions import AuthorNotFound, NotImplementedOperation


def _mock_request(path: str = "/catalog/authors", method: str = "GET") -> Mock:
    mock_request = Mock()
    mock_request.state.correlation_id = "test-123"
    mock_request.url.path = path
    mock_request.method = method
    return mock_request


class TestErrorModels:
    """Test error model classes."""

    def test_error_body_without_details(self):
        error_body = ErrorBody(type="test_error", message="Test message")
        assert error_body.details is None

    def test_error_envelope_creation(self):
        error_body = ErrorBody(type="test_error", message="Test message", details={"k": "v"})
        envelope = ErrorEnvelope(error=error_body, meta={"request_id": "123"})
        assert envelope.error.details == {"k": "v"}
        assert envelope.meta == {"request_id": "123"}


class TestErrorHelpers:
    """Test error helper functions."""

    def test_build_meta_with_correlation_id(self):
        meta = _build_meta(_mock_request("/test/path", "POST"))

        assert meta == {"request_id": "test-123", "path": "/test/path", "method": "POST"}

    def test_build_meta_without_correlation_id(self):
        mock_request = _mock_request()
        del mock_request.state.correlation_id

        assert _build_meta(mock_request)["request_id"] == "-"

    def test_serialize_validation_errors_with_context(self):
        class CustomError:
            def __str__(self):
                return "Custom error message"

        error = {
            "loc": ["path", "author_id"],
            "msg": "error1",
            "type": "uuid_parsing",
            "ctx": {"error": CustomError(), "other": "value"},
        }

        result = _serialize_validation_errors([error])

        assert result[0]["ctx"] == {"error": "Custom error message", "other": "value"}
        # input error dict is not mutated
        assert isinstance(error["ctx"]["error"], CustomError)


class TestExceptionHandlers:
    """Test exception handler registration and execution."""

    def setup_method(self):
        self.app = FastAPI()
        register_exception_handlers(self.app)

    async def _handle(self, exc_type, exc):
        handler = self.app.exception_handlers[exc_type]
        response = await handler(_mock_request(), exc)
        return response.status_code, json.loads(response.body)

    @pytest.mark.asyncio
    async def test_author_not_found(self):
        author_id = uuid.uuid4()

        status_code, body = await self._handle(AuthorNotFound, AuthorNotFound(author_id))

        assert status_code == HTTP_404_NOT_FOUND
        assert body["error"]["type"] == "not_found"
        assert body["error"]["details"] == {"author_id": str(author_id)}
        assert body["meta"]["request_id"] == "test-123"

    @pytest.mark.asyncio
    async def test_not_implemented(self):
        exc = NotImplementedOperation("NOT IMPLEMENTED: Author update GET")

        status_code, body = await self._handle(NotImplementedOperation, exc)

        assert status_code == HTTP_501_NOT_IMPLEMENTED
        assert body["error"] == {
            "type": "not_implemented",
            "message": "NOT IMPLEMENTED: Author update GET",
            "details": None,
        }

    @pytest.mark.asyncio
    async def test_http_exception_with_string_detail(self):
        exc = StarletteHTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Bad input")

        status_code, body = await self._handle(StarletteHTTPException, exc)

        assert status_code == HTTP_400_BAD_REQUEST
        assert body["error"]["type"] == "http_error"
        assert body["error"]["message"] == "Bad input"

    @pytest.mark.asyncio
    async def test_http_exception_with_dict_detail(self):
        exc = StarletteHTTPException(status_code=HTTP_400_BAD_REQUEST, detail={"field": "x"})

        _, body = await self._handle(StarletteHTTPException, exc)

        assert body["error"]["details"] == {"field": "x"}

    @pytest.mark.asyncio
    async def test_request_validation_error(self):
        exc = RequestValidationError(
            [{"loc": ["path", "author_id"], "msg": "bad uuid", "type": "uuid_parsing"}]
        )

        status_code, body = await self._handle(RequestValidationError, exc)

        assert status_code == HTTP_422_UNPROCESSABLE_CONTENT
        assert body["error"]["details"]["errors"][0]["msg"] == "bad uuid"

    @patch("catalog.core.errors.get_logger")
    @pytest.mark.asyncio
    async def test_store_failure(self, mock_get_logger):
        mock_logger = Mock()
        mock_get_logger.return_value = mock_logger
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

        status_code, body = await self._handle(SQLAlchemyError, exc)

        assert status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert body["error"]["type"] == "store_failure"
        mock_logger.error.assert_called_once_with("Store failure: %s", exc)

    @patch("catalog.core.errors.get_logger")
    @pytest.mark.asyncio
    async def test_unhandled_exception(self, mock_get_logger):
        mock_logger = Mock()
        mock_get_logger.return_value = mock_logger
        exc = RuntimeError("boom")

        status_code, body = await self._handle(Exception, exc)

        assert status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert body["error"]["type"] == "server_error"
        mock_logger.exception.assert_called_once_with("Unhandled server error", exc_info=exc)


class TestStoreFailureThroughApp:
    """Store errors raised by a route surface as a generic failure page."""

    def test_store_failure_from_route(self, test_client):
        from catalog.services.author_service import AuthorService

        def broken(db):
            raise OperationalError("SELECT", {}, Exception("database is down"))

        with patch.object(AuthorService, "list_authors", side_effect=broken):
            response = test_client.get("/catalog/authors")

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"]["type"] == "store_failure"
