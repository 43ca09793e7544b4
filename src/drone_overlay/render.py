"""Rendering surface boundary.

The overlay core hands three things to the map: a bounding box to frame
the camera, a static flight path and a four-corner video footprint that is
repositioned in place on every animation tick.
"""

from __future__ import annotations

from typing import Any, Protocol

from drone_overlay.telemetry import BoundingBox

Coordinates = list[list[float]]


class RenderSurface(Protocol):
    def fit_bounds(self, bounds: BoundingBox, padding: int) -> None: ...

    def add_path(
        self,
        source_id: str,
        layer_id: str,
        feature: dict[str, Any],
        color: str,
        width: float,
    ) -> None: ...

    def remove_path(self, source_id: str) -> None: ...

    def has_overlay(self, source_id: str) -> bool: ...

    def add_overlay(self, source_id: str, coordinates: Coordinates) -> None: ...

    def set_overlay_coordinates(
        self, source_id: str, coordinates: Coordinates
    ) -> None: ...


class GeoJSONSurface:
    """In-memory rendering surface that keeps everything as GeoJSON.

    Overlays are keyed by source id and their coordinates replaced in place;
    ``updates`` counts how often each one was repositioned.
    """

    def __init__(self, style: str | None = None):
        self.style = style
        self.bounds: BoundingBox | None = None
        self.padding: int = 0
        self.paths: dict[str, dict[str, Any]] = {}
        self.overlays: dict[str, Coordinates] = {}
        self.updates: dict[str, int] = {}

    def fit_bounds(self, bounds: BoundingBox, padding: int) -> None:
        self.bounds = bounds
        self.padding = padding

    def add_path(
        self,
        source_id: str,
        layer_id: str,
        feature: dict[str, Any],
        color: str,
        width: float,
    ) -> None:
        if source_id in self.paths:
            raise ValueError(f"Path source '{source_id}' already exists")
        styled = dict(feature)
        styled["properties"] = {
            **feature.get("properties", {}),
            "layer": layer_id,
            "line-color": color,
            "line-width": width,
        }
        self.paths[source_id] = styled

    def remove_path(self, source_id: str) -> None:
        self.paths.pop(source_id, None)

    def has_overlay(self, source_id: str) -> bool:
        return source_id in self.overlays

    def add_overlay(self, source_id: str, coordinates: Coordinates) -> None:
        if source_id in self.overlays:
            raise ValueError(f"Overlay source '{source_id}' already exists")
        self.overlays[source_id] = [list(c) for c in coordinates]
        self.updates[source_id] = 0

    def set_overlay_coordinates(self, source_id: str, coordinates: Coordinates) -> None:
        if source_id not in self.overlays:
            raise KeyError(f"Unknown overlay source '{source_id}'")
        self.overlays[source_id][:] = [list(c) for c in coordinates]
        self.updates[source_id] += 1

    def to_feature_collection(self) -> dict[str, Any]:
        features = list(self.paths.values())
        for source_id, coords in self.overlays.items():
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [coords + [coords[0]]],
                    },
                    "properties": {"source": source_id},
                }
            )
        collection: dict[str, Any] = {"type": "FeatureCollection", "features": features}
        if self.style is not None:
            collection["properties"] = {"style": self.style}
        if self.bounds is not None:
            collection["bbox"] = [
                self.bounds.min_lon,
                self.bounds.min_lat,
                self.bounds.max_lon,
                self.bounds.max_lat,
            ]
        return collection
