"""Geographic extent of a telemetry sequence.

The bounding box frames the map camera once per session and its midpoint
anchors the placeholder footprint shown before the first projection tick.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pandera.pandas as pa
import pyproj

from drone_overlay.config import OverlayConfig
from drone_overlay.errors import NoValidCoordinates
from drone_overlay.telemetry import (
    BoundingBox,
    FootprintQuad,
    LonLat,
    TelemetrySequence,
)

logger = logging.getLogger(__name__)

_GEOD = pyproj.Geod(ellps="WGS84")

# ---------------------------------------------------------------------------
# Coordinate dataframe schema
# ---------------------------------------------------------------------------

coordinates_schema = pa.DataFrameSchema(
    columns={
        "lon": pa.Column(
            float,
            checks=pa.Check(
                lambda s: np.isfinite(s),
                name="is_finite",
                error="lon must be finite. Did the finiteness filter fail?",
            ),
            nullable=False,
        ),
        "lat": pa.Column(
            float,
            checks=pa.Check(
                lambda s: np.isfinite(s),
                name="is_finite",
                error="lat must be finite. Did the finiteness filter fail?",
            ),
            nullable=False,
        ),
    },
    strict=True,
    coerce=True,
)


def coordinates_frame(sequence: TelemetrySequence) -> pd.DataFrame:
    """Finite (lon, lat) pairs of the sequence, in log order."""
    rows = [r.position for r in sequence if r.has_valid_coordinates]
    df = pd.DataFrame(rows, columns=["lon", "lat"], dtype=np.float64)
    return coordinates_schema.validate(df)


def compute_bounds(sequence: TelemetrySequence) -> BoundingBox:
    """Componentwise min/max over the records with finite coordinates."""
    df = coordinates_frame(sequence)
    if df.empty:
        raise NoValidCoordinates(
            f"None of the {len(sequence)} telemetry records has a finite "
            f"latitude/longitude"
        )

    return BoundingBox(
        min_lon=float(df["lon"].min()),
        min_lat=float(df["lat"].min()),
        max_lon=float(df["lon"].max()),
        max_lat=float(df["lat"].max()),
    )


def compute_centroid(bounds: BoundingBox) -> LonLat:
    """Midpoint of the bounding box (not the centroid of the points)."""
    return (
        (bounds.min_lon + bounds.max_lon) / 2,
        (bounds.min_lat + bounds.max_lat) / 2,
    )


def initial_placement_quad(
    sequence: TelemetrySequence, config: OverlayConfig | None = None
) -> FootprintQuad:
    """Fixed-size placeholder footprint centered on the flight.

    This is a visual default only; its size has nothing to do with the
    camera and it is replaced by the first real projection tick.
    """
    config = config or OverlayConfig()
    lon, lat = compute_centroid(compute_bounds(sequence))
    offset = config.PLACEMENT_OFFSET_DEG
    return FootprintQuad(
        top_right=(lon + offset, lat - offset),
        bottom_right=(lon + offset, lat + offset),
        bottom_left=(lon - offset, lat + offset),
        top_left=(lon - offset, lat - offset),
    )


def bounds_span_m(bounds: BoundingBox) -> tuple[float, float]:
    """East-west and north-south extent of the box in metres (WGS 84)."""
    mid_lat = (bounds.min_lat + bounds.max_lat) / 2
    mid_lon = (bounds.min_lon + bounds.max_lon) / 2
    _, _, east_west = _GEOD.inv(bounds.min_lon, mid_lat, bounds.max_lon, mid_lat)
    _, _, north_south = _GEOD.inv(mid_lon, bounds.min_lat, mid_lon, bounds.max_lat)
    return float(east_west), float(north_south)
