"""
Pydantic Models and Schemas
===========================

Core data models for conversion requests, render options, conversion
outcomes and API responses.
"""

from typing import Optional, Dict, Any, List, Union, Literal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# Enums
class ImageType(str, Enum):
    """Supported output image formats."""
    PNG = "png"
    JPEG = "jpeg"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self]


MIME_TYPES = {
    ImageType.PNG: "image/png",
    ImageType.JPEG: "image/jpeg",
}


class FailureKind(str, Enum):
    """Classification of a failed conversion."""
    INVALID_INPUT = "invalid_input"
    TIMEOUT = "timeout"
    ENGINE_UNAVAILABLE = "engine_unavailable"
    INTERNAL_ERROR = "internal_error"


class PipelineState(str, Enum):
    """Stages a single conversion passes through."""
    CREATED = "created"
    SURFACE_ACQUIRED = "surface_acquired"
    CONTENT_LOADING = "content_loading"
    CAPTURING = "capturing"
    COMPLETED = "completed"
    FAILED = "failed"


# Rendering Models
class RenderOptions(BaseModel):
    """Options for rendering HTML to an image."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    width: int = Field(1920, gt=0, description="Viewport width")
    height: int = Field(1080, gt=0, description="Viewport height")
    full_page: bool = Field(True, alias="fullPage", description="Capture full page instead of viewport")
    quality: int = Field(100, ge=0, le=100, description="JPEG quality (0-100), ignored for PNG")
    type: ImageType = Field(ImageType.PNG, description="Output image type")

    @property
    def mime_type(self) -> str:
        return self.type.mime_type

    @property
    def filename(self) -> str:
        return f"converted.{self.type.value}"


class ConversionRequest(BaseModel):
    """Validated HTML content together with its render options."""
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., min_length=1, description="HTML markup to render")
    options: RenderOptions = Field(default_factory=RenderOptions, description="Render options")


# Conversion Outcomes
class ConversionSuccess(BaseModel):
    """Captured image bytes."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    data: bytes = Field(..., description="Image binary data")
    image_type: ImageType = Field(..., description="Image format")

    @property
    def mime_type(self) -> str:
        return self.image_type.mime_type

    @property
    def filename(self) -> str:
        return f"converted.{self.image_type.value}"


class ConversionFailure(BaseModel):
    """Classified conversion failure."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    kind: FailureKind = Field(..., description="Failure classification")
    detail: str = Field(..., description="Human readable failure detail")


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]


# API Response Models
class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    message: Optional[str] = Field(None, description="Underlying error detail")


class NotFoundResponse(BaseModel):
    """Response for unknown endpoints."""
    error: str = Field("Endpoint not found", description="Error message")
    available_endpoints: List[str] = Field(..., serialization_alias="availableEndpoints")


class HealthStatus(BaseModel):
    """Health check status."""
    status: Literal["OK"] = Field("OK", description="Service status")
    message: str = Field(..., description="Status message")
    engine: str = Field(..., description="Rendering engine state")


class ServiceInfo(BaseModel):
    """Service metadata with a usage example."""
    service: str
    version: str
    endpoints: Dict[str, str]
    usage: Dict[str, Any]
    example: Dict[str, Any]
