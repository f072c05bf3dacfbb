"""
Rendering Engine
================

Shared headless Chromium process and the isolated render surfaces created
from it. One engine handle lives for the lifetime of the service; each
conversion gets its own browser context and page, closed when it is done.
"""

from typing import Optional, Any
from enum import Enum

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from html2png.config.logging import get_logger
from html2png.config.settings import Settings, get_settings

logger = get_logger(__name__)


class EngineUnavailableError(Exception):
    """Raised when a surface is requested from an engine that is not ready."""

    pass


class EngineLaunchError(Exception):
    """Raised when the browser process cannot be started."""

    pass


class EngineState(str, Enum):
    """Lifecycle states of the shared engine handle."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"


class RenderSurface:
    """A single isolated browser context and page owned by one conversion."""

    def __init__(self, context: BrowserContext, page: Page):
        self.context = context
        self.page = page
        self.closed = False

    async def set_viewport(self, width: int, height: int) -> None:
        await self.page.set_viewport_size({"width": width, "height": height})

    async def load(self, html: str, timeout_ms: float) -> None:
        """
        Load markup and wait for it to settle.

        ``networkidle`` fires after ``load``, which itself follows
        ``DOMContentLoaded``, so a single wait covers both conditions.
        """
        await self.page.set_content(html, wait_until="networkidle", timeout=timeout_ms)

    async def capture(self, **screenshot_options: Any) -> bytes:
        return await self.page.screenshot(**screenshot_options)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.context.close()


class EngineHandle:
    """Process-wide handle to the headless browser."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.state = EngineState.UNINITIALIZED
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.logger: Any = logger.bind(component="engine")  # structlog.BoundLoggerBase

    @property
    def is_available(self) -> bool:
        return self.state == EngineState.READY and self._browser is not None

    async def launch(self) -> None:
        """Start Playwright and launch the browser once."""
        if self.state != EngineState.UNINITIALIZED:
            raise EngineLaunchError(f"Engine cannot be launched from state {self.state.value}")

        launch_options: dict[str, Any] = {
            "headless": self.settings.headless,
            "args": list(self.settings.browser_args),
        }
        if self.settings.chrome_bin:
            launch_options["executable_path"] = self.settings.chrome_bin

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(**launch_options)
        except Exception as e:
            self.logger.error("Failed to launch browser", error=str(e))
            await self._stop_playwright()
            raise EngineLaunchError(f"Browser launch failed: {e}") from e

        self.state = EngineState.READY
        self.logger.info(
            "Browser launched",
            executable=self.settings.chrome_bin or "bundled",
            headless=self.settings.headless,
        )

    async def new_surface(self) -> RenderSurface:
        """Create an isolated surface; the caller owns and must close it."""
        if not self.is_available:
            raise EngineUnavailableError(f"Rendering engine is not available ({self.state.value})")

        assert self._browser is not None
        context = await self._browser.new_context()
        try:
            page = await context.new_page()
        except Exception:
            await context.close()
            raise
        return RenderSurface(context, page)

    async def close(self) -> bool:
        """
        Terminate the browser process.

        Returns:
            True if a running browser was closed by this call
        """
        if self.state == EngineState.SHUTTING_DOWN:
            return False

        was_running = self._browser is not None
        self.state = EngineState.SHUTTING_DOWN

        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            await self._stop_playwright()

        self.logger.info("Browser closed", was_running=was_running)
        return was_running

    async def _stop_playwright(self) -> None:
        if self._playwright is not None:
            playwright, self._playwright = self._playwright, None
            try:
                await playwright.stop()
            except Exception as e:
                self.logger.warning("Error stopping Playwright", error=str(e))
