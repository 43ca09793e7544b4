"""
Frame synchronization between video playback and telemetry.

The flight log has one row every 0.1 s, so the row for playback time ``t``
is ``floor(t * 10)``. Indices wrap with the sequence length: a looping video
that plays past the recorded flight starts the footprints over from the
first row instead of freezing on the last one.

There is no background thread. The host calls a tick callback roughly once
per display refresh; each tick registers the next one through an explicit
``TickScheduler`` and then does one synchronous recomputation, so a
footprint published on tick N is always computed from the playback time
read at the start of tick N.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Protocol

from drone_overlay.config import OverlayConfig
from drone_overlay.footprint import project_footprint
from drone_overlay.render import RenderSurface
from drone_overlay.telemetry import FootprintQuad, TelemetrySequence
from drone_overlay.video import VideoHandle

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


def sample_index(t: float, length: int, sample_rate_hz: float = 10.0) -> int:
    """Telemetry row for playback time ``t`` (seconds), wrapping at ``length``.

    ``t * sample_rate_hz`` is rounded to 9 decimals before flooring, so a time
    within 1e-9 of a sample boundary counts as that boundary.
    """
    if length <= 0:
        raise ValueError("Cannot index an empty telemetry sequence")
    return math.floor(round(t * sample_rate_hz, 9)) % length


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class TickScheduler(Protocol):
    def schedule_next_tick(self, callback: TickCallback) -> Any:
        """Run ``callback`` on the next display refresh; returns a handle."""
        ...

    def cancel(self, handle: Any) -> None: ...


class ManualTickScheduler:
    """Scheduler driven explicitly by the caller, one refresh at a time."""

    def __init__(self):
        self._next_handle = 0
        self._queue: dict[int, TickCallback] = {}

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule_next_tick(self, callback: TickCallback) -> int:
        self._next_handle += 1
        self._queue[self._next_handle] = callback
        return self._next_handle

    def cancel(self, handle: int) -> None:
        self._queue.pop(handle, None)

    def run_pending(self) -> int:
        """Fire the callbacks registered before this refresh.

        Callbacks registered while firing wait for the next call.
        """
        due = list(self._queue.items())
        self._queue.clear()
        for _, callback in due:
            callback()
        return len(due)


# ---------------------------------------------------------------------------
# FrameSynchronizer
# ---------------------------------------------------------------------------


class FrameSynchronizer:
    """Keeps the overlay footprint in step with video playback."""

    def __init__(
        self,
        sequence: TelemetrySequence,
        video: VideoHandle,
        surface: RenderSurface,
        scheduler: TickScheduler,
        config: OverlayConfig | None = None,
    ):
        if not sequence:
            raise ValueError("FrameSynchronizer needs a non-empty telemetry sequence")
        self._sequence = sequence
        self._video = video
        self._surface = surface
        self._scheduler = scheduler
        self._config = config or OverlayConfig()

        self._running = False
        self._handle: Any = None
        self.last_index: int | None = None
        self.last_footprint: FootprintQuad | None = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.debug(f"Synchronizer started ({len(self._sequence)} samples)")
        self._handle = self._scheduler.schedule_next_tick(self.tick)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        logger.debug("Synchronizer stopped")

    def tick(self) -> None:
        if not self._running:
            return
        self._handle = self._scheduler.schedule_next_tick(self.tick)

        t = self._video.current_time
        width, height = self._video.width, self._video.height
        if not width:
            # Player has not reported its frame size yet
            return

        index = sample_index(t, len(self._sequence), self._config.SAMPLE_RATE_HZ)
        record = self._sequence[index]
        if not record.is_projectable:
            logger.debug(f"Skipping tick at t={t:.2f}s: sample {index} not projectable")
            return

        footprint = project_footprint(record, width, height, self._config)
        self._surface.set_overlay_coordinates(
            self._config.OVERLAY_SOURCE_ID, footprint.coordinates()
        )
        self.last_index = index
        self.last_footprint = footprint
