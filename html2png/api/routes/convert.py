"""
Conversion Routes
=================

FastAPI routes for HTML to image conversion. The JSON and form endpoints
both hand off to ``convert_html``, which validates the request and runs the
shared conversion pipeline in-process.
"""

from typing import Any, Dict
import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.datastructures import FormData, UploadFile

from html2png.api.responses import build_conversion_response, error_response
from html2png.config.logging import get_logger
from html2png.core.rendering.pipeline import ConversionPipeline
from html2png.core.rendering.validator import (
    MISSING,
    InvalidInputError,
    validate_conversion_request,
)
from html2png.models.schemas import ConversionFailure, FailureKind

logger = get_logger(__name__)

router = APIRouter(tags=["Conversion"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_pipeline(request: Request) -> ConversionPipeline:
    """Dependency returning the application's conversion pipeline."""
    return request.app.state.pipeline


def options_from_form(form: FormData) -> Dict[str, Any]:
    """Collect render options sent as individual form fields."""
    options: Dict[str, Any] = {}

    for field in ("width", "height", "quality", "type"):
        value = form.get(field)
        if isinstance(value, str) and value:
            options[field] = value

    if "fullPage" in form:
        options["fullPage"] = form.get("fullPage") == "true"

    return options


async def convert_html(pipeline: ConversionPipeline, html: Any, options: Any) -> Response:
    """
    Validate raw request fields and run the conversion.

    Args:
        pipeline: Conversion pipeline bound to the shared engine
        html: Markup as received, or ``MISSING``
        options: Partial render options as received

    Returns:
        Image response or structured error response
    """
    try:
        conversion = validate_conversion_request(html, options)
    except InvalidInputError as e:
        logger.info("Conversion request rejected", reason=str(e))
        failure = ConversionFailure(kind=FailureKind.INVALID_INPUT, detail=str(e))
        return build_conversion_response(failure)

    outcome = await pipeline.convert(conversion)
    return build_conversion_response(outcome)


@router.post("/convert")
async def convert(request: Request, pipeline: ConversionPipeline = Depends(get_pipeline)) -> Response:
    """
    Convert HTML to an image.

    Expects a JSON body ``{"html": "...", "options": {...}}``. Form encoded
    bodies with an ``html`` field and flat option fields are accepted too.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return await convert_html(pipeline, form.get("html", MISSING), options_from_form(form))

    body = await request.body()
    try:
        payload = json.loads(body) if body.strip() else {}
    except ValueError as e:
        return error_response(400, "Invalid JSON body", str(e))

    if not isinstance(payload, dict):
        return error_response(400, "Request body must be a JSON object")

    return await convert_html(pipeline, payload.get("html", MISSING), payload.get("options"))


@router.post("/convert-form")
async def convert_form(
    request: Request, pipeline: ConversionPipeline = Depends(get_pipeline)
) -> Response:
    """
    Convert HTML sent as a multipart upload (``html_file``) or form field
    (``html``), with options as individual form fields.
    """
    form = await request.form()

    upload = form.get("html_file")
    html_field = form.get("html")

    if isinstance(upload, UploadFile) and upload.filename:
        html = (await upload.read()).decode("utf-8", errors="replace")
    elif isinstance(html_field, str) and html_field:
        html = html_field
    else:
        return error_response(400, "HTML content required either as file upload or form field")

    return await convert_html(pipeline, html, options_from_form(form))
