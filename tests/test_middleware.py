"""Middleware tests — request ID, CORS, error handling, logging."""

import io
import json
import logging

import pytest
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from satslab.config import Settings
from satslab.middleware.logging import setup_logging


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/api/v1/modules",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with JSON body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_422_returns_json(client: AsyncClient) -> None:
    """Request validation errors use the consistent JSON shape."""
    response = await client.get("/api/v1/modules/not-a-number")
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Validation error"
    assert data["errors"]


@pytest.mark.asyncio
async def test_500_returns_json(app: FastAPI) -> None:
    """Unhandled exceptions are turned into a JSON 500."""

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("kaboom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.fixture
def json_log_stream():
    """Configure JSON logging and capture what the root handler writes."""
    root = logging.getLogger()
    level = root.level
    setup_logging(Settings(log_format="json", log_level="INFO"))
    handler = root.handlers[0]
    stream = io.StringIO()
    handler.setStream(stream)
    yield stream
    root.removeHandler(handler)
    root.setLevel(level)


def _last_line(stream: io.StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_structlog_event_rendered_once(json_log_stream: io.StringIO) -> None:
    """A structlog event is one flat JSON object, not JSON nested in "event"."""
    structlog.get_logger("satslab.main").info("startup_complete", redis=False)
    payload = _last_line(json_log_stream)
    assert payload["event"] == "startup_complete"
    assert payload["redis"] is False
    assert payload["level"] == "info"
    assert payload["logger"] == "satslab.main"
    assert "timestamp" in payload


def test_stdlib_record_rendered_as_json(json_log_stream: io.StringIO) -> None:
    logging.getLogger("satslab.sessions.service").warning("Saving progress failed for %s", "learner-1")
    payload = _last_line(json_log_stream)
    assert payload["event"] == "Saving progress failed for learner-1"
    assert payload["level"] == "warning"
    assert payload["logger"] == "satslab.sessions.service"


def test_exception_rendered_into_line(json_log_stream: io.StringIO) -> None:
    try:
        raise ValueError("boom")
    except ValueError as e:
        structlog.get_logger("satslab.middleware").error("unhandled_exception", exc_info=e)
    payload = _last_line(json_log_stream)
    assert payload["event"] == "unhandled_exception"
    assert "ValueError: boom" in payload["exception"]
