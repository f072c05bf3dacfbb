"""
Engine Lifecycle
================

Startup and shutdown of the shared rendering engine, independent of any
single request. A failed launch leaves the service running in a degraded
state where every conversion reports the engine as unavailable.
"""

from typing import Any

from html2png.config.logging import get_logger
from html2png.core.rendering.engine import EngineHandle, EngineLaunchError

logger = get_logger(__name__)


class EngineLifecycle:
    """Owns the launch and termination of one engine handle."""

    def __init__(self, engine: EngineHandle):
        self.engine = engine
        self._shut_down = False
        self.logger: Any = logger.bind(component="lifecycle")  # structlog.BoundLoggerBase

    async def startup(self) -> bool:
        """
        Launch the engine.

        Returns:
            True if the engine is ready, False if the service runs degraded
        """
        try:
            await self.engine.launch()
        except EngineLaunchError as e:
            self.logger.error("Rendering engine failed to start, running degraded", error=str(e))
            return False
        except Exception as e:
            self.logger.error(
                "Unexpected error during engine startup, running degraded", error=str(e)
            )
            return False

        self.logger.info("Rendering engine started")
        return True

    async def shutdown(self) -> None:
        """Terminate the engine. Safe to call more than once."""
        if self._shut_down:
            return
        self._shut_down = True

        self.logger.info("Shutting down rendering engine")
        try:
            await self.engine.close()
        except Exception as e:
            self.logger.error("Error closing rendering engine", error=str(e))
