"""
Conversion Request Validator
============================

Normalizes raw request fields into a ``ConversionRequest``. Every rejection
happens here, before any browser resource is touched.
"""

from typing import Any, Dict, Optional
import math
import re

from pydantic import ValidationError

from html2png.models.schemas import ConversionRequest, ImageType, RenderOptions

MISSING: Any = object()
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_NUMERIC_FIELDS = ("width", "height", "quality")


class InvalidInputError(ValueError):
    """Raised when a conversion request cannot be accepted."""

    pass


def describe_type(value: Any) -> str:
    """Name a value's type the way a JSON client would see it."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def coerce_int(value: Any) -> int:
    """
    Read an integer the way ``parseInt`` would.

    Integers pass through, finite floats are truncated and strings yield their
    leading integer (``"800px"`` is 800). Anything else has no numeric reading
    and raises ``ValueError``.
    """
    if isinstance(value, bool):
        raise ValueError("is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("is not a finite number")
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    raise ValueError("is not a number")


def _normalize_options(options: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(options)

    for field in _NUMERIC_FIELDS:
        if field in normalized:
            try:
                normalized[field] = coerce_int(normalized[field])
            except ValueError as e:
                raise InvalidInputError(
                    f"Invalid {field}: {normalized[field]!r} {e}"
                ) from None

    if "type" in normalized:
        image_type = normalized["type"]
        valid = [t.value for t in ImageType]
        if not isinstance(image_type, str) or image_type not in valid:
            raise InvalidInputError(
                f'Invalid image type {image_type!r}. Use "png" or "jpeg"'
            )

    return normalized


def _format_validation_error(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"Invalid {location}: {error.get('msg')}")
    return "; ".join(messages)


def build_render_options(options: Optional[Dict[str, Any]] = None) -> RenderOptions:
    """Merge caller overrides onto the default render options."""
    if options is None:
        return RenderOptions()
    if not isinstance(options, dict):
        raise InvalidInputError(
            f"Options must be an object, received {describe_type(options)}"
        )

    try:
        return RenderOptions.model_validate(_normalize_options(options))
    except ValidationError as e:
        raise InvalidInputError(_format_validation_error(e)) from None


def validate_conversion_request(html: Any = MISSING, options: Any = None) -> ConversionRequest:
    """
    Validate raw request fields.

    Args:
        html: Markup as received from the transport, possibly missing
        options: Partial render options, possibly missing

    Returns:
        ConversionRequest with defaults applied

    Raises:
        InvalidInputError: If the content or any option is unacceptable
    """
    if not isinstance(html, str) or not html:
        raise InvalidInputError(
            f"HTML content is required (received {describe_type(html)})"
        )

    render_options = build_render_options(options)
    return ConversionRequest(content=html, options=render_options)
