"""
End-to-End Browser Tests
========================

Round trips through a real headless Chromium. Skipped when no browser can be
launched (for example before ``playwright install chromium``).
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from html2png.api.main import create_app
from html2png.core.rendering.engine import EngineHandle

from tests.utils.helpers import TestSettings

pytestmark = pytest.mark.e2e

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


@pytest.fixture(scope="module")
def browser_client() -> Generator[TestClient, None, None]:
    settings = TestSettings(settle_delay_seconds=0.1)
    engine = EngineHandle(settings)
    with TestClient(create_app(settings=settings, engine=engine)) as client:
        if not engine.is_available:
            pytest.skip("Chromium could not be launched")
        yield client


def test_hello_world_png(browser_client: TestClient):
    response = browser_client.post(
        "/convert", json={"html": "<html><body><h1>Hello World</h1></body></html>"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(PNG_SIGNATURE)


def test_jpeg_viewport(browser_client: TestClient):
    response = browser_client.post(
        "/convert",
        json={
            "html": "<div style='width:50px;height:50px;background:red'></div>",
            "options": {"width": 200, "height": 100, "fullPage": False, "type": "jpeg", "quality": 50},
        },
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content.startswith(JPEG_SIGNATURE)


def test_script_rendered_content(browser_client: TestClient):
    html = """
    <html><body><div id="out"></div>
    <script>setTimeout(() => { document.getElementById('out').textContent = 'late'; }, 10);</script>
    </body></html>
    """
    response = browser_client.post("/convert-form", data={"html": html})

    assert response.status_code == 200
    assert len(response.content) > 0
