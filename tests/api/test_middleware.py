"""Tests for request context and error handling middleware."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from product_svc.api.middleware import REQUEST_ID_HEADER, setup_middleware


@pytest.fixture
async def failing_client() -> AsyncGenerator[AsyncClient, None]:
    """Client for a bare app whose only route raises."""
    app = FastAPI()
    setup_middleware(app)

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database password is hunter2")

    @app.get("/ok")
    async def ok() -> dict:
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_unhandled_exception_becomes_500_envelope(failing_client: AsyncClient) -> None:
    response = await failing_client.get("/boom", headers={REQUEST_ID_HEADER: "req-500"})

    assert response.status_code == 500
    assert response.json() == {
        "error_code": "INTERNAL_ERROR",
        "message": "An internal error occurred",
        "details": [],
        "request_id": "req-500",
    }
    assert response.headers[REQUEST_ID_HEADER] == "req-500"


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(failing_client: AsyncClient) -> None:
    response = await failing_client.get("/ok")

    assert response.status_code == 200
    assert uuid.UUID(response.headers[REQUEST_ID_HEADER]).version == 4
