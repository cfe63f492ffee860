"""
timer.py — Repeating asyncio timer used for the goal countdown
"""
import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class IntervalTimer:
    """Await callback() once every `interval` seconds until cancel().

    cancel() may be called from inside the callback; the loop then stops
    after the callback returns instead of cancelling it mid-flight.
    """

    def __init__(self, interval: float, callback: Callable[[], Awaitable[None]]):
        self.interval = interval
        self.callback = callback
        self._task: asyncio.Task | None = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done() and not self._cancelled

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval)
            if self._cancelled:
                break
            try:
                await self.callback()
            except Exception:
                logger.exception("Timer callback failed")

    def cancel(self) -> None:
        self._cancelled = True
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
