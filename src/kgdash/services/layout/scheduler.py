"""
Frame scheduling for the layout engine.

The host owns the timer (an animation frame callback, an event loop, a plain
loop in a CLI); ``FrameScheduler`` turns those frames into engine ticks at a
capped rate. Throttling is cooperative: a frame that arrives too early simply
does no work.
"""

import asyncio
import time
from typing import Callable, Optional

from ...shared import get_logger
from .engine import ForceLayoutEngine


class FrameScheduler:
    """
    Drives ``ForceLayoutEngine.step()`` from host frames.

    Args:
        engine: Engine to drive
        target_fps: Frame rate cap (defaults to the engine parameters)
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(self,
                 engine: ForceLayoutEngine,
                 target_fps: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.logger = get_logger(__name__)
        self.engine = engine
        self.target_fps = target_fps or engine.params.target_fps
        self.clock = clock
        self._last_frame_time: Optional[float] = None
        self.frames_seen = 0
        self.ticks_run = 0

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.target_fps

    def on_frame(self, now: Optional[float] = None) -> bool:
        """
        Handle one host frame.

        Args:
            now: Frame timestamp in seconds (defaults to the clock)

        Returns:
            True if the engine ticked on this frame
        """
        self.frames_seen += 1
        if not self.engine.is_running():
            return False

        now = self.clock() if now is None else now
        if self._last_frame_time is not None and now - self._last_frame_time < self.frame_interval:
            return False

        self._last_frame_time = now
        ticked = self.engine.step()
        if ticked:
            self.ticks_run += 1
        return ticked

    def run_until_idle(self, max_ticks: Optional[int] = None) -> int:
        """
        Tick back-to-back, without frame pacing, until the engine stops.

        Args:
            max_ticks: Optional extra bound on top of the engine's own budget

        Returns:
            Number of ticks run
        """
        ticks = 0
        while self.engine.is_running():
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.engine.step()
            ticks += 1

        self.ticks_run += ticks
        self.logger.debug(f"Layout idle after {ticks} ticks")
        return ticks

    async def run(self) -> int:
        """
        Pace ticks at the target frame rate until the engine goes idle.

        Returns:
            Number of ticks run
        """
        ticks = 0
        while self.engine.is_running():
            if self.on_frame():
                ticks += 1
            await asyncio.sleep(self.frame_interval)
        return ticks
