"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, a fake rendering engine and API clients.
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("HTML2PNG_ENVIRONMENT", "testing")

from html2png.api.main import create_app
from html2png.core.rendering.pipeline import ConversionPipeline
from tests.utils.helpers import TestSettings
from tests.utils.mocks import FakeEngine


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Ready fake engine that records surface usage."""
    return FakeEngine()


@pytest.fixture
def pipeline(fake_engine: FakeEngine, test_settings: TestSettings) -> ConversionPipeline:
    """Conversion pipeline bound to the fake engine."""
    return ConversionPipeline(fake_engine, test_settings)


@pytest.fixture
def api_client(
    fake_engine: FakeEngine, test_settings: TestSettings
) -> Generator[TestClient, None, None]:
    """FastAPI test client running the full lifespan against the fake engine."""
    app = create_app(settings=test_settings, engine=fake_engine)  # type: ignore[arg-type]
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def hello_world_html() -> str:
    return "<html><body><h1>Hello World</h1></body></html>"
