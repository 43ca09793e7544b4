"""
Footprint projection: where on the ground a single video frame belongs.

For one telemetry sample the frame is treated as a flat-ground pinhole image
taken straight down from the drone:

1. ``altitude_m = ascent(feet) * 0.3048``
2. ``half_diagonal = altitude_m * tan(FOV) / 2`` with the diagonal FOV of 59°
3. ``bearing = (heading - 90) mod 360`` is the reference axis for the corners
4. ``aspect = atan(height / width)`` fans the corners out around that axis,
   so non-square frames get a rectangular rather than square footprint
5. every corner lies ``half_diagonal`` metres from the drone along a rhumb
   line (constant bearing). At tens to hundreds of metres this is as good as
   a great circle and has no antipodal edge cases.

Camera tilt, lens distortion and terrain are ignored.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

from drone_overlay.config import OverlayConfig
from drone_overlay.telemetry import FootprintQuad, LonLat, TelemetryRecord

# Mean Earth radius used for rhumb-line distances (metres)
EARTH_RADIUS_M = 6371008.8


class CornerBearings(NamedTuple):
    """Bearings (degrees, (-180, 180]) from the drone to each frame corner."""

    top_right: float
    bottom_right: float
    bottom_left: float
    top_left: float


def normalize_bearing(degrees: float) -> float:
    """Map any angle in degrees into (-180, 180]."""
    if -180.0 < degrees <= 180.0:
        return float(degrees)
    wrapped = ((degrees % 360.0) + 540.0) % 360.0 - 180.0
    return 180.0 if wrapped == -180.0 else wrapped


def aspect_offset_deg(frame_width: float, frame_height: float) -> float:
    """Angle between the frame diagonal and its width axis."""
    return math.degrees(math.atan(frame_height / frame_width))


def corner_bearings(
    heading_deg: float, frame_width: float, frame_height: float
) -> CornerBearings:
    bearing = (heading_deg - 90.0) % 360.0
    aspect = aspect_offset_deg(frame_width, frame_height)
    return CornerBearings(
        top_right=normalize_bearing(bearing + aspect + 180.0),
        bottom_right=normalize_bearing(bearing - aspect),
        bottom_left=normalize_bearing(bearing + aspect),
        top_left=normalize_bearing(bearing - aspect + 180.0),
    )


def rhumb_destination(
    origin: LonLat,
    distance_m: float,
    bearing_deg: npt.ArrayLike,
    radius_m: float = EARTH_RADIUS_M,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Destination(s) along a rhumb line from ``origin``.

    ``bearing_deg`` may be a scalar or an array; the returned longitude and
    latitude arrays have its shape. Longitudes crossing the antimeridian are
    kept continuous with the origin (e.g. 180.01 rather than -179.99) so the
    footprint does not tear across the map.
    """
    lon1, lat1 = origin
    theta = np.radians(np.asarray(bearing_deg, dtype=np.float64))
    delta = distance_m / radius_m  # angular distance

    lam1 = np.radians(lon1)
    phi1 = np.radians(lat1)

    d_phi = delta * np.cos(theta)
    phi2 = phi1 + d_phi
    # Going past a pole folds back onto the other side
    phi2 = np.where(phi2 > np.pi / 2, np.pi - phi2, phi2)
    phi2 = np.where(phi2 < -np.pi / 2, -np.pi - phi2, phi2)

    d_psi = np.log(np.tan(phi2 / 2 + np.pi / 4) / np.tan(phi1 / 2 + np.pi / 4))
    # E-W courses are ill-conditioned (0/0): fall back to cos(phi1)
    ill_conditioned = np.abs(d_psi) <= 1e-11
    q = np.where(
        ill_conditioned, np.cos(phi1), d_phi / np.where(ill_conditioned, 1.0, d_psi)
    )
    lam2 = lam1 + delta * np.sin(theta) / q

    lon2 = (np.degrees(lam2) + 540.0) % 360.0 - 180.0
    lon2 = np.where(lon2 - lon1 > 180.0, lon2 - 360.0, lon2)
    lon2 = np.where(lon1 - lon2 > 180.0, lon2 + 360.0, lon2)
    return lon2, np.degrees(phi2)


def half_diagonal_m(altitude_m: float, field_of_view_deg: float) -> float:
    return altitude_m * math.tan(math.radians(field_of_view_deg)) / 2


def project_footprint(
    record: TelemetryRecord,
    frame_width: float,
    frame_height: float,
    config: OverlayConfig | None = None,
) -> FootprintQuad:
    """
    Ground quadrilateral for one telemetry sample and the current frame size.

    Args:
        record: A projectable telemetry record (finite position, ascent and
            heading).
        frame_width: Video frame width in pixels. Must be known (non-zero).
        frame_height: Video frame height in pixels.
        config: Camera and unit constants; defaults to ``OverlayConfig()``.

    Returns:
        FootprintQuad: Corners ordered top-right, bottom-right, bottom-left,
        top-left. Zero altitude collapses all four onto the drone position.

    Raises:
        ValueError: The frame width is unknown or the record lacks usable
            position, altitude or heading.
    """
    if not frame_width:
        raise ValueError("Frame width is unknown; wait for the video to report it")
    if not record.is_projectable:
        raise ValueError(
            f"Telemetry record is not projectable: lat={record.latitude!r}, "
            f"lon={record.longitude!r}, ascent={record.ascent_feet!r}, "
            f"heading={record.compass_heading_degrees!r}"
        )

    config = config or OverlayConfig()

    altitude_m = float(record.ascent_feet) * config.FEET_TO_METERS
    distance = half_diagonal_m(altitude_m, config.FIELD_OF_VIEW_DEG)
    bearings = corner_bearings(
        float(record.compass_heading_degrees),
        frame_width,
        frame_height,
    )

    lons, lats = rhumb_destination(record.position, distance, list(bearings))
    corners = [(float(lon), float(lat)) for lon, lat in zip(lons, lats)]
    return FootprintQuad(
        top_right=corners[0],
        bottom_right=corners[1],
        bottom_left=corners[2],
        top_left=corners[3],
    )
