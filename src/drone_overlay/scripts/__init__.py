"""
Drone Overlay Scripts Package

Command-line tools for inspecting footprint projections offline.

Available scripts:
- export_footprints: Replay a flight log and export footprints as GeoJSON
"""

__all__ = ["export_footprints"]
