"""Shared fixtures for API route tests.

Routes resolve their services through the bootstrap singleton, so each
test installs components built on stubs and a FakeTimeAuthority and
resets them afterwards.
"""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from secure_estate.api.middleware.logging_middleware import LoggingMiddleware
from secure_estate.api.routes.admin import router as admin_router
from secure_estate.api.routes.health import router as health_router
from secure_estate.api.routes.wellbeing import router as wellbeing_router
from secure_estate.bootstrap.wellbeing import (
    WellbeingComponents,
    build_wellbeing_components,
    reset_wellbeing_components,
    set_wellbeing_components,
)
from secure_estate.config import TEST_WELLBEING_CONFIG
from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.builders import T0


@pytest.fixture
def api_clock() -> FakeTimeAuthority:
    return FakeTimeAuthority(frozen_at=T0)


@pytest.fixture
def components(api_clock: FakeTimeAuthority) -> Iterator[WellbeingComponents]:
    """Stub-backed components installed as the process singleton."""
    built = build_wellbeing_components(TEST_WELLBEING_CONFIG, time_authority=api_clock)
    set_wellbeing_components(built)
    yield built
    reset_wellbeing_components()


@pytest.fixture
def app(components: WellbeingComponents) -> FastAPI:
    """Test app with the routers and middleware, without the lifespan."""
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.include_router(health_router)
    app.include_router(wellbeing_router)
    app.include_router(admin_router)
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
