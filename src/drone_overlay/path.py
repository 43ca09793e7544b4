"""Static flight path polyline, drawn once per session."""

from __future__ import annotations

from typing import Any

from drone_overlay.telemetry import LonLat, TelemetrySequence


def build_path(sequence: TelemetrySequence) -> list[LonLat]:
    """(lon, lat) of every record with finite coordinates, in log order."""
    return [r.position for r in sequence if r.has_valid_coordinates]


def path_feature(path: list[LonLat]) -> dict[str, Any]:
    """GeoJSON LineString feature for the flight path."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [[lon, lat] for lon, lat in path],
        },
        "properties": {},
    }
