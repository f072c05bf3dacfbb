"""
Conversion Pipeline
===================

Drives one conversion from a validated request to image bytes:
surface acquisition, viewport setup, content load, settling delay, capture
and unconditional surface teardown. Every failure is classified into a
``ConversionFailure`` instead of being raised to the caller.
"""

from typing import Optional, Dict, Any, AsyncContextManager, Protocol
import asyncio
import contextlib
import time

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from html2png.config.logging import get_logger
from html2png.config.settings import Settings, get_settings
from html2png.core.rendering.engine import EngineState, EngineUnavailableError, RenderSurface
from html2png.models.schemas import (
    ConversionFailure,
    ConversionOutcome,
    ConversionRequest,
    ConversionSuccess,
    FailureKind,
    ImageType,
    PipelineState,
    RenderOptions,
)

logger = get_logger(__name__)


class SurfaceProvider(Protocol):
    """What the pipeline needs from the engine handle."""

    state: EngineState

    @property
    def is_available(self) -> bool: ...

    async def new_surface(self) -> RenderSurface: ...


def build_capture_options(options: RenderOptions) -> Dict[str, Any]:
    """Screenshot arguments; quality is only ever sent for JPEG."""
    capture_options: Dict[str, Any] = {
        "type": options.type.value,
        "full_page": options.full_page,
    }
    if options.type == ImageType.JPEG:
        capture_options["quality"] = options.quality
    return capture_options


class ConversionPipeline:
    """Converts HTML to images using surfaces from a shared engine."""

    def __init__(self, engine: SurfaceProvider, settings: Optional[Settings] = None):
        self.engine = engine
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="pipeline")  # structlog.BoundLoggerBase

        limit = self.settings.max_concurrent_surfaces
        self._slots: Optional[asyncio.Semaphore] = asyncio.Semaphore(limit) if limit > 0 else None

    def _slot(self) -> AsyncContextManager[Any]:
        if self._slots is None:
            return contextlib.nullcontext()
        return self._slots

    async def convert(self, request: ConversionRequest) -> ConversionOutcome:
        """
        Render a validated request.

        Args:
            request: Validated conversion request

        Returns:
            ConversionSuccess with the image, or ConversionFailure describing
            what went wrong
        """
        if not self.engine.is_available:
            state = self.engine.state.value
            self.logger.error("Rendering engine unavailable", engine=state)
            return ConversionFailure(
                kind=FailureKind.ENGINE_UNAVAILABLE,
                detail=f"Rendering engine is not ready (state: {state})",
            )

        async with self._slot():
            return await self._convert(request)

    async def _convert(self, request: ConversionRequest) -> ConversionOutcome:
        options = request.options
        started = time.perf_counter()
        state = PipelineState.CREATED
        log = self.logger.bind(
            width=options.width,
            height=options.height,
            image_type=options.type.value,
            html_length=len(request.content),
        )

        try:
            surface = await self.engine.new_surface()
        except EngineUnavailableError as e:
            log.error("Rendering engine unavailable", error=str(e))
            return ConversionFailure(kind=FailureKind.ENGINE_UNAVAILABLE, detail=str(e))
        except Exception as e:
            log.error("Failed to create render surface", error=str(e))
            return ConversionFailure(
                kind=FailureKind.INTERNAL_ERROR, detail=f"Failed to create render surface: {e}"
            )

        state = PipelineState.SURFACE_ACQUIRED
        outcome: ConversionOutcome
        try:
            await surface.set_viewport(options.width, options.height)

            state = PipelineState.CONTENT_LOADING
            await asyncio.wait_for(
                surface.load(request.content, timeout_ms=self.settings.load_timeout_ms),
                timeout=self.settings.load_timeout_seconds,
            )

            # Deferred scripts may still be drawing after the load signal;
            # this is a fixed heuristic wait, not a readiness guarantee.
            if self.settings.settle_delay_seconds > 0:
                await asyncio.sleep(self.settings.settle_delay_seconds)

            state = PipelineState.CAPTURING
            data = await surface.capture(**build_capture_options(options))

            state = PipelineState.COMPLETED
            outcome = ConversionSuccess(data=data, image_type=options.type)

        except (PlaywrightTimeoutError, asyncio.TimeoutError) as e:
            log.warning("Content load timed out", state=state.value, error=str(e))
            state = PipelineState.FAILED
            outcome = ConversionFailure(
                kind=FailureKind.TIMEOUT,
                detail=str(e) or f"Timed out after {self.settings.load_timeout_seconds}s",
            )
        except Exception as e:
            log.error("Conversion failed", state=state.value, error=str(e))
            state = PipelineState.FAILED
            outcome = ConversionFailure(kind=FailureKind.INTERNAL_ERROR, detail=str(e))
        finally:
            try:
                await surface.close()
            except Exception as e:
                log.warning("Failed to close render surface", error=str(e))

        log.info(
            "Conversion finished",
            state=state.value,
            success=outcome.ok,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return outcome
