"""Unit tests for LoggingMiddleware correlation ID handling."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from secure_estate.api.middleware.logging_middleware import (
    CORRELATION_HEADER,
    LoggingMiddleware,
)
from secure_estate.infrastructure.observability import get_correlation_id


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)

    @app.get("/echo")
    async def echo() -> dict[str, str]:
        return {"correlation_id": get_correlation_id()}

    return app


def test_incoming_correlation_id_is_propagated() -> None:
    client = TestClient(build_app())

    response = client.get("/echo", headers={CORRELATION_HEADER: "req-42"})

    assert response.headers[CORRELATION_HEADER] == "req-42"
    assert response.json() == {"correlation_id": "req-42"}


def test_correlation_id_generated_when_absent() -> None:
    client = TestClient(build_app())

    response = client.get("/echo")

    generated = response.headers[CORRELATION_HEADER]
    assert generated
    assert response.json() == {"correlation_id": generated}


def test_each_request_gets_its_own_id() -> None:
    client = TestClient(build_app())
    first = client.get("/echo").headers[CORRELATION_HEADER]
    second = client.get("/echo").headers[CORRELATION_HEADER]
    assert first != second


def test_malformed_incoming_id_is_replaced() -> None:
    client = TestClient(build_app())

    response = client.get("/echo", headers={CORRELATION_HEADER: "bad id\twith spaces"})

    replaced = response.headers[CORRELATION_HEADER]
    assert replaced != "bad id\twith spaces"
    assert response.json() == {"correlation_id": replaced}


def test_overlong_incoming_id_is_replaced() -> None:
    client = TestClient(build_app())

    response = client.get("/echo", headers={CORRELATION_HEADER: "a" * 129})

    assert response.headers[CORRELATION_HEADER] != "a" * 129
