"""
Response Mapping
================

Translates conversion outcomes into HTTP responses.
"""

from typing import Optional

from fastapi.responses import JSONResponse, Response

from html2png.models.schemas import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    ErrorResponse,
    FailureKind,
)

TIMEOUT_ERROR = "Request timeout. HTML content took too long to load."
ENGINE_UNAVAILABLE_ERROR = "Rendering engine unavailable"
CONVERSION_ERROR = "Internal server error during conversion"

# kind -> (status, error message); None means the failure detail is the error
FAILURE_RESPONSES: dict[FailureKind, tuple[int, Optional[str]]] = {
    FailureKind.INVALID_INPUT: (400, None),
    FailureKind.TIMEOUT: (408, TIMEOUT_ERROR),
    FailureKind.ENGINE_UNAVAILABLE: (500, ENGINE_UNAVAILABLE_ERROR),
    FailureKind.INTERNAL_ERROR: (500, CONVERSION_ERROR),
}


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    """Build a ``{error, message?}`` JSON response."""
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def image_response(result: ConversionSuccess) -> Response:
    return Response(
        content=result.data,
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "Content-Length": str(len(result.data)),
        },
    )


def failure_response(failure: ConversionFailure) -> JSONResponse:
    status_code, error = FAILURE_RESPONSES[failure.kind]
    if error is None:
        return error_response(status_code, failure.detail)
    return error_response(status_code, error, failure.detail)


def build_conversion_response(outcome: ConversionOutcome) -> Response:
    """Map a pipeline outcome to its HTTP response."""
    if isinstance(outcome, ConversionSuccess):
        return image_response(outcome)
    return failure_response(outcome)
