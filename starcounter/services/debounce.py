"""Single-slot debounce timer for re-running link discovery."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Run an async callback once activity has been quiet for ``delay`` seconds.

    At most one run is scheduled at a time: every trigger cancels the
    pending timer and starts a new one.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self.callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)schedule the callback. Must be called from the event loop."""
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self._task = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        try:
            await self.callback()
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}")

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def wait(self) -> None:
        """Wait for the most recently started run to finish."""
        if self._task is not None:
            await self._task
