"""Tests for the application error responses."""

import pytest
from fastapi import FastAPI, Query
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import (
    ExternalServiceError,
    MalformedPayloadError,
    ValidationError,
    register_exception_handlers,
)


@pytest.fixture
async def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/invalid")
    async def invalid():
        raise ValidationError("Ranking limit must not be negative", field="limit")

    @app.get("/upstream")
    async def upstream():
        raise MalformedPayloadError("Missing 'data'", service="records")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    @app.get("/bounded")
    async def bounded(limit: int = Query(5, ge=1)):
        return {"limit": limit}

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_validation_error_response(self, error_client):
        response = await error_client.get("/invalid")

        assert response.status_code == 400
        data = response.json()

        assert data["success"] is False
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["message"] == "Ranking limit must not be negative"
        assert data["error"]["details"] == {"field": "limit"}
        assert "request_id" in data["error"]

    @pytest.mark.asyncio
    async def test_malformed_payload_is_bad_gateway(self, error_client):
        response = await error_client.get("/upstream")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "MALFORMED_PAYLOAD"

    @pytest.mark.asyncio
    async def test_unhandled_error_is_generic(self, error_client):
        response = await error_client.get("/crash")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "An unexpected error occurred"

    def test_malformed_payload_is_external_service_error(self):
        assert issubclass(MalformedPayloadError, ExternalServiceError)

    @pytest.mark.asyncio
    async def test_query_validation_uses_error_envelope(self, error_client):
        response = await error_client.get("/bounded", params={"limit": 0})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "REQUEST_VALIDATION_ERROR"
        assert error["details"][0]["field"] == "limit"
