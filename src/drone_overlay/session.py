"""One active (video, flight log) pairing and its overlay on the map."""

from __future__ import annotations

import logging

from drone_overlay.config import OverlayConfig
from drone_overlay.errors import OverlayError
from drone_overlay.extent import bounds_span_m, compute_bounds, initial_placement_quad
from drone_overlay.ingest import load_video_phase_sequence
from drone_overlay.path import build_path, path_feature
from drone_overlay.render import RenderSurface
from drone_overlay.sync import FrameSynchronizer, TickScheduler
from drone_overlay.telemetry import TelemetrySequence
from drone_overlay.video import VideoHandle

logger = logging.getLogger(__name__)


class OverlaySession:
    """Owns the active telemetry sequence, video handle and synchronizer.

    Supplying new files replaces all three wholesale. The previous
    synchronizer is stopped before anything else happens, so no footprint
    from the old flight is ever published against the new video.
    """

    def __init__(
        self,
        surface: RenderSurface,
        scheduler: TickScheduler,
        config: OverlayConfig | None = None,
    ):
        self.surface = surface
        self.scheduler = scheduler
        self.config = config or OverlayConfig()

        self.sequence: TelemetrySequence = ()
        self.video: VideoHandle | None = None
        self.synchronizer: FrameSynchronizer | None = None
        self.error: str | None = None

    def process(self, video: VideoHandle, flight_log: str | bytes) -> TelemetrySequence:
        self.stop()

        try:
            sequence = load_video_phase_sequence(flight_log)
            bounds = compute_bounds(sequence)
            placeholder = initial_placement_quad(sequence, self.config)
        except OverlayError as exc:
            self.error = str(exc)
            logger.error(f"Could not process flight log: {exc}")
            raise
        self.error = None

        east_west, north_south = bounds_span_m(bounds)
        logger.info(
            f"Flight extent {east_west:.0f} m x {north_south:.0f} m "
            f"({len(sequence)} video samples)"
        )

        cfg = self.config
        self.surface.fit_bounds(bounds, cfg.FIT_BOUNDS_PADDING_PX)

        self.surface.remove_path(cfg.PATH_SOURCE_ID)
        self.surface.add_path(
            cfg.PATH_SOURCE_ID,
            cfg.PATH_LAYER_ID,
            path_feature(build_path(sequence)),
            cfg.PATH_LINE_COLOR,
            cfg.PATH_LINE_WIDTH,
        )

        if self.surface.has_overlay(cfg.OVERLAY_SOURCE_ID):
            self.surface.set_overlay_coordinates(
                cfg.OVERLAY_SOURCE_ID, placeholder.coordinates()
            )
        else:
            self.surface.add_overlay(cfg.OVERLAY_SOURCE_ID, placeholder.coordinates())

        video.loop = cfg.VIDEO_LOOP
        video.playback_rate = cfg.VIDEO_PLAYBACK_RATE

        self.sequence = sequence
        self.video = video
        self.synchronizer = FrameSynchronizer(
            sequence, video, self.surface, self.scheduler, cfg
        )
        self.synchronizer.start()
        return sequence

    def stop(self) -> None:
        if self.synchronizer is not None:
            self.synchronizer.stop()
            self.synchronizer = None
