#!/usr/bin/env python3
"""
Export Footprints Script

Replays a flight log against a simulated video of the given frame size and
writes every projected footprint, the flight path and the camera bounds to a
GeoJSON FeatureCollection.

Usage:
    python export_footprints.py FLIGHT_LOG [--width W] [--height H] [--fps F]
                                [--duration S] [--output PATH] [--verbose]

Examples:
    python export_footprints.py flight.csv --width 1920 --height 1080
    python export_footprints.py flight.csv --duration 30 --output out.geojson
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import rich.console
import rich.logging

from drone_overlay.config import OverlayConfig
from drone_overlay.errors import OverlayError
from drone_overlay.render import GeoJSONSurface
from drone_overlay.session import OverlaySession
from drone_overlay.sync import ManualTickScheduler
from drone_overlay.video import SimulatedVideo

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    log_format = "\\[[bold]%(name)s[/bold]] %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=log_format,
        datefmt="[%X]",
        handlers=[
            rich.logging.RichHandler(
                console=rich.console.Console(color_system="auto"),
                show_level=True,
                show_path=False,
                enable_link_path=False,
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                markup=True,
            )
        ],
    )


def replay_footprints(
    flight_log: bytes,
    width: int,
    height: int,
    fps: float,
    duration_s: float | None = None,
    config: OverlayConfig | None = None,
) -> dict:
    """Run the overlay against a simulated player and collect every footprint.

    The simulated video lasts as long as the recorded video phase unless
    ``duration_s`` says otherwise; it is stepped one display refresh
    (``1 / fps`` seconds of wall-clock time) per tick.
    """
    config = config or OverlayConfig()
    surface = GeoJSONSurface(style=config.MAP_STYLE)
    scheduler = ManualTickScheduler()
    session = OverlaySession(surface, scheduler, config)

    # Duration is only known after parsing; start with a placeholder clock
    video = SimulatedVideo(width, height, duration_s=0.0)
    sequence = session.process(video, flight_log)
    video.duration_s = duration_s or len(sequence) / config.SAMPLE_RATE_HZ
    # Export one pass of the video rather than looping forever
    video.loop = False

    footprints = []
    wall_dt = 1.0 / fps
    while not video.ended:
        t = video.current_time
        published = surface.updates[config.OVERLAY_SOURCE_ID]
        scheduler.run_pending()
        sync = session.synchronizer
        if sync is not None and surface.updates[config.OVERLAY_SOURCE_ID] > published:
            footprints.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [
                            sync.last_footprint.coordinates()
                            + [list(sync.last_footprint.top_right)]
                        ],
                    },
                    "properties": {"time_s": round(t, 3), "sample": sync.last_index},
                }
            )
        video.advance(wall_dt)

    session.stop()
    logger.info(f"Projected {len(footprints)} footprints over {video.duration_s:.1f}s")

    collection = surface.to_feature_collection()
    collection["features"].extend(footprints)
    return collection


def main():
    parser = argparse.ArgumentParser(description="Export drone video footprints")
    parser.add_argument("flight_log", type=Path, help="Flight log CSV")
    parser.add_argument("--width", type=int, default=1920, help="Frame width (px)")
    parser.add_argument("--height", type=int, default=1080, help="Frame height (px)")
    parser.add_argument("--fps", type=float, default=60.0, help="Display refresh rate")
    parser.add_argument("--duration", type=float, help="Video duration (s)")
    parser.add_argument("--output", type=Path, help="GeoJSON output path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        collection = replay_footprints(
            args.flight_log.read_bytes(),
            args.width,
            args.height,
            args.fps,
            args.duration,
        )
    except (OverlayError, OSError) as e:
        logger.error(f"{args.flight_log.name}: {e}")
        return 1

    output = args.output or args.flight_log.with_suffix(".footprints.geojson")
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w") as f:
        json.dump(collection, f, indent=2)
    logger.info(f"Saved {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
