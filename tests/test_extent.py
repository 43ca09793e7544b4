"""
Tests for the extent calculator and flight path builder.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from drone_overlay.config import OverlayConfig
from drone_overlay.errors import NoValidCoordinates
from drone_overlay.extent import (
    bounds_span_m,
    compute_bounds,
    compute_centroid,
    initial_placement_quad,
)
from drone_overlay.ingest import load_video_phase_sequence
from drone_overlay.path import build_path, path_feature
from drone_overlay.telemetry import BoundingBox

from conftest import make_record


def random_sequence(rng, n):
    lons = rng.uniform(-180, 180, n)
    lats = rng.uniform(-90, 90, n)
    return tuple(make_record(lon=float(x), lat=float(y)) for x, y in zip(lons, lats))


class TestComputeBounds:
    def test_two_row_scenario(self, two_row_log):
        bounds = compute_bounds(load_video_phase_sequence(two_row_log))
        assert bounds.as_list() == [[20.0, 20.0], [20.0, 20.0]]

    def test_min_max(self):
        sequence = (
            make_record(lon=1.0, lat=5.0),
            make_record(lon=-2.0, lat=7.0),
            make_record(lon=3.0, lat=-1.0),
        )
        bounds = compute_bounds(sequence)
        assert bounds.as_list() == [[-2.0, -1.0], [3.0, 7.0]]

    @pytest.mark.parametrize("seed", range(5))
    def test_box_is_ordered_and_contains_every_record(self, seed):
        rng = np.random.default_rng(seed)
        sequence = random_sequence(rng, 50)
        bounds = compute_bounds(sequence)

        assert bounds.min_lon <= bounds.max_lon
        assert bounds.min_lat <= bounds.max_lat
        for record in sequence:
            assert bounds.contains(*record.position)

    def test_invalid_coordinates_are_ignored(self):
        sequence = (
            make_record(lon="abc", lat=50.0),
            make_record(lon=float("nan"), lat=1.0),
            make_record(lon=float("inf"), lat=1.0),
            make_record(lon=None, lat=1.0),
            make_record(lon=10.0, lat=11.0),
        )
        assert compute_bounds(sequence).as_list() == [[10.0, 11.0], [10.0, 11.0]]

    def test_oversized_coordinates_are_ignored(self):
        text = "isVideo,latitude,longitude\n1," + "9" * 400 + ",20\n1,10,20\n"
        sequence = load_video_phase_sequence(text)
        assert compute_bounds(sequence).as_list() == [[20, 10], [20, 10]]

        huge = (make_record(lon=10**400, lat=1.0), make_record(lon=3.0, lat=4.0))
        assert compute_bounds(huge).as_list() == [[3.0, 4.0], [3.0, 4.0]]

    def test_no_valid_coordinates(self):
        sequence = (make_record(lon="abc", lat="def"), make_record(lat=None))
        with pytest.raises(NoValidCoordinates):
            compute_bounds(sequence)

    def test_empty_sequence(self):
        with pytest.raises(NoValidCoordinates):
            compute_bounds(())


class TestCentroid:
    def test_midpoint_of_box_not_of_points(self):
        sequence = (
            make_record(lon=0.0, lat=0.0),
            make_record(lon=0.0, lat=0.0),
            make_record(lon=0.0, lat=0.0),
            make_record(lon=4.0, lat=2.0),
        )
        assert compute_centroid(compute_bounds(sequence)) == (2.0, 1.0)


class TestInitialPlacementQuad:
    def test_corner_order(self):
        sequence = (make_record(lon=10.0, lat=40.0), make_record(lon=12.0, lat=42.0))
        quad = initial_placement_quad(sequence)
        d = 0.0007

        assert_allclose(
            quad.coordinates(),
            [
                [11.0 + d, 41.0 - d],
                [11.0 + d, 41.0 + d],
                [11.0 - d, 41.0 + d],
                [11.0 - d, 41.0 - d],
            ],
        )

    def test_offset_from_config(self):
        config = OverlayConfig(PLACEMENT_OFFSET_DEG=0.5)
        quad = initial_placement_quad((make_record(lon=0.0, lat=0.0),), config)
        assert quad.top_right == (0.5, -0.5)
        assert quad.centroid() == (0.0, 0.0)


class TestBoundsSpan:
    def test_degenerate_box(self):
        bounds = BoundingBox(min_lon=20.0, min_lat=20.0, max_lon=20.0, max_lat=20.0)
        assert bounds_span_m(bounds) == pytest.approx((0.0, 0.0), abs=1e-6)

    def test_hundredth_of_a_degree(self):
        bounds = BoundingBox(min_lon=0.0, min_lat=0.0, max_lon=0.01, max_lat=0.01)
        east_west, north_south = bounds_span_m(bounds)
        assert east_west == pytest.approx(1113.2, rel=1e-2)
        assert north_south == pytest.approx(1105.7, rel=1e-2)


class TestBuildPath:
    def test_keeps_order_and_skips_invalid(self):
        sequence = (
            make_record(lon=1.0, lat=1.0),
            make_record(lon="x", lat=2.0),
            make_record(lon=3.0, lat=3.0),
        )
        assert build_path(sequence) == [(1.0, 1.0), (3.0, 3.0)]

    def test_empty(self):
        assert build_path(()) == []

    def test_feature(self):
        feature = path_feature([(1.0, 2.0), (3.0, 4.0)])
        assert feature["geometry"] == {
            "type": "LineString",
            "coordinates": [[1.0, 2.0], [3.0, 4.0]],
        }
