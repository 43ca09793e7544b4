"""Telemetry data models for the drone video overlay.

A flight log is a table with one row per 0.1 s of flight. Only five columns
are interpreted (``isVideo``, ``latitude``, ``longitude``, ``ascent(feet)``
and ``compass_heading(degrees)``); everything else is carried along in
``extras`` untouched.

Cells are dynamically typed when the log is parsed, so a numeric field may
still hold text or ``None``. Records are never coerced: the ``has_valid_*``
properties decide whether a record can take part in geometry.
"""

from __future__ import annotations

import math
from typing import Any

import pydantic

CellValue = bool | int | float | str | None
LonLat = tuple[float, float]

# ---------------------------------------------------------------------------
# Flight log column names
# ---------------------------------------------------------------------------

IS_VIDEO_COLUMN = "isVideo"
LATITUDE_COLUMN = "latitude"
LONGITUDE_COLUMN = "longitude"
ASCENT_COLUMN = "ascent(feet)"
HEADING_COLUMN = "compass_heading(degrees)"

KNOWN_COLUMNS = (
    IS_VIDEO_COLUMN,
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
    ASCENT_COLUMN,
    HEADING_COLUMN,
)


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


# ---------------------------------------------------------------------------
# Telemetry record
# ---------------------------------------------------------------------------


class TelemetryRecord(pydantic.BaseModel):
    """One flight log row."""

    model_config = pydantic.ConfigDict(frozen=True)

    is_video_phase: bool = False
    latitude: CellValue = None
    longitude: CellValue = None
    ascent_feet: CellValue = None
    compass_heading_degrees: CellValue = None

    extras: dict[str, CellValue] = pydantic.Field(default_factory=dict)
    """Unrecognized columns, preserved but never interpreted."""

    @classmethod
    def from_row(cls, row: dict[str, CellValue]) -> TelemetryRecord:
        is_video = row.get(IS_VIDEO_COLUMN)
        return cls(
            # Only a numeric 1 marks the video phase; "true" or "1.5" do not.
            is_video_phase=is_finite_number(is_video) and is_video == 1,
            latitude=row.get(LATITUDE_COLUMN),
            longitude=row.get(LONGITUDE_COLUMN),
            ascent_feet=row.get(ASCENT_COLUMN),
            compass_heading_degrees=row.get(HEADING_COLUMN),
            extras={k: v for k, v in row.items() if k not in KNOWN_COLUMNS},
        )

    @property
    def has_valid_coordinates(self) -> bool:
        return is_finite_number(self.latitude) and is_finite_number(self.longitude)

    @property
    def is_projectable(self) -> bool:
        """Coordinates, altitude and heading are all usable for projection."""
        return (
            self.has_valid_coordinates
            and is_finite_number(self.ascent_feet)
            and is_finite_number(self.compass_heading_degrees)
        )

    @property
    def position(self) -> LonLat:
        if not self.has_valid_coordinates:
            raise ValueError(
                f"Record has no valid coordinates: "
                f"lat={self.latitude!r}, lon={self.longitude!r}"
            )
        return float(self.longitude), float(self.latitude)


TelemetrySequence = tuple[TelemetryRecord, ...]


# ---------------------------------------------------------------------------
# Derived geometry
# ---------------------------------------------------------------------------


class BoundingBox(pydantic.BaseModel):
    """Geographic extent of a telemetry sequence (degrees)."""

    model_config = pydantic.ConfigDict(frozen=True)

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def as_list(self) -> list[list[float]]:
        """``[[minLon, minLat], [maxLon, maxLat]]``, the map camera format."""
        return [[self.min_lon, self.min_lat], [self.max_lon, self.max_lat]]

    def contains(self, lon: float, lat: float) -> bool:
        return (
            self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat
        )


class FootprintQuad(pydantic.BaseModel):
    """Ground corners a single video frame is texture-mapped onto.

    The rendering surface expects the corners as
    ``[top_right, bottom_right, bottom_left, top_left]``; any other order
    shows the frame mirrored or rotated.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    top_right: LonLat
    bottom_right: LonLat
    bottom_left: LonLat
    top_left: LonLat

    def coordinates(self) -> list[list[float]]:
        return [
            list(self.top_right),
            list(self.bottom_right),
            list(self.bottom_left),
            list(self.top_left),
        ]

    def centroid(self) -> LonLat:
        corners = self.coordinates()
        return (
            sum(c[0] for c in corners) / 4.0,
            sum(c[1] for c in corners) / 4.0,
        )
