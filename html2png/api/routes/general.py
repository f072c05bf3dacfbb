"""
General Routes
==============

Service information and health check endpoints.
"""

from fastapi import APIRouter, Request

from html2png.models.schemas import HealthStatus, ServiceInfo

router = APIRouter(tags=["General"])

AVAILABLE_ENDPOINTS = ["GET /", "POST /convert", "POST /convert-form", "GET /health"]

EXAMPLE_HTML = "<html><body><h1>Hello World</h1></body></html>"


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request) -> HealthStatus:
    """Report that the service is up, along with the engine state."""
    engine = request.app.state.engine
    return HealthStatus(
        message="HTML to PNG service is running",
        engine=engine.state.value,
    )


@router.get("/", response_model=ServiceInfo)
async def root(request: Request) -> ServiceInfo:
    """
    Root endpoint with service metadata and a usage example.
    """
    settings = request.app.state.settings
    return ServiceInfo(
        service=settings.app_name,
        version=settings.app_version,
        endpoints={
            "POST /convert": "Convert HTML to PNG or JPEG",
            "POST /convert-form": "Convert an uploaded HTML file or form field",
            "GET /health": "Health check",
        },
        usage={
            "method": "POST",
            "url": "/convert",
            "contentType": "application/json",
            "body": {
                "html": "HTML content as string",
                "options": {
                    "width": "viewport width (default: 1920)",
                    "height": "viewport height (default: 1080)",
                    "fullPage": "capture full page (default: true)",
                    "quality": "image quality 0-100, jpeg only (default: 100)",
                    "type": "image type: png or jpeg (default: png)",
                },
            },
        },
        example={
            "html": EXAMPLE_HTML,
            "options": {"width": 800, "height": 600, "fullPage": True},
        },
    )
