"""Frame-driven tick loop around a sampling controller."""

from __future__ import annotations

import logging
import time
from typing import Callable

from dftscope.live.controller import ControllerView, SamplingController
from dftscope.playback.sources import PlaybackTransport


Clock = Callable[[], float]
Scheduler = Callable[[float], None]
FrameListener = Callable[[ControllerView], None]

DEFAULT_FRAME_INTERVAL_S = 1.0 / 60.0

logger = logging.getLogger(__name__)


class TickLoop:
    """Run one controller tick per frame until stopped.

    Each iteration measures the elapsed time on `clock`, lets a
    :class:`PlaybackTransport` source move its playhead by that amount,
    ticks the controller, hands the resulting view to every listener, then
    yields the rest of the frame to `scheduler`. A single `running` flag
    controls continuation; :meth:`stop` clears it and the loop exits after
    the current iteration.
    """

    def __init__(
        self,
        controller: SamplingController,
        *,
        clock: Clock = time.perf_counter,
        scheduler: Scheduler = time.sleep,
        frame_interval_s: float = DEFAULT_FRAME_INTERVAL_S,
    ) -> None:
        if frame_interval_s <= 0:
            raise ValueError("frame_interval_s must be > 0")
        self._controller = controller
        self._clock = clock
        self._scheduler = scheduler
        self._frame_interval_s = frame_interval_s
        self._listeners: list[FrameListener] = []
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def stop(self) -> None:
        self._running = False

    def run(self, *, max_ticks: int | None = None) -> int:
        """Loop until stopped, playback ends, or `max_ticks` frames ran; return frames run."""
        if max_ticks is not None and max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")

        source = self._controller.source
        transport = source if isinstance(source, PlaybackTransport) else None
        self._running = True
        frames = 0
        last = self._clock()
        try:
            while self._running:
                frame_start = self._clock()
                elapsed = max(0.0, frame_start - last)
                last = frame_start

                if transport is not None:
                    transport.advance(elapsed)
                self._controller.tick()
                view = self._controller.view()
                for listener in self._listeners:
                    listener(view)
                frames += 1

                if max_ticks is not None and frames >= max_ticks:
                    break
                if transport is not None and transport.ended:
                    logger.info("Playback ended after %d frames", frames)
                    break

                spent = self._clock() - frame_start
                self._scheduler(max(0.0, self._frame_interval_s - spent))
        finally:
            self._running = False
        return frames
