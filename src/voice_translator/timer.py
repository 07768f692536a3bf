"""Periodic tick source for the recording elapsed-time display."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable


class RecordingTimer:
    """Ticks ``on_tick`` every ``interval_seconds`` on the running event loop."""

    def __init__(
        self,
        on_tick: Callable[[], None],
        *,
        interval_seconds: float = 1.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._on_tick = on_tick
        self._interval_seconds = interval_seconds
        self._logger = logger or logging.getLogger("voice_translator.timer")
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; a running timer is restarted from zero."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._tick_loop(), name="recording-timer")
        self._logger.debug("recording_timer_started", extra={"interval_seconds": self._interval_seconds})

    def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        self._logger.debug("recording_timer_cancelled")

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            self._on_tick()
