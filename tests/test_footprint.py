"""Tests for wall footprint construction."""

import pytest

from d25d.core.exceptions import MalformedInputError, SelfIntersectionError, ZeroAreaFootprintError
from d25d.core.models import Point2D, Polyline
from d25d.geometry.footprint import build_footprint, build_footprint_from_pair, validate_footprint
from d25d.geometry.offsetter import offset_polyline


def _polyline(points, closed=False):
    return Polyline(points=tuple(Point2D(x=x, y=y) for x, y in points), closed=closed)


def test_open_segment_footprint():
    """Left forward plus right reversed makes the wall rectangle."""
    pair = offset_polyline([[0, 0], [1000, 0]], 200)
    footprint = build_footprint(pair.left, pair.right)

    assert [p.as_tuple() for p in footprint.points] == [
        (0.0, 100.0), (1000.0, 100.0), (1000.0, -100.0), (0.0, -100.0),
    ]
    assert footprint.area() == pytest.approx(200000.0)


def test_closed_loop_footprint_is_outer_ring():
    """A closed wall loop is outlined by its outer boundary."""
    pair = offset_polyline([[0, 0], [4000, 0], [4000, 3000], [0, 3000], [0, 0]], 200)
    footprint = build_footprint_from_pair(pair)

    assert len(footprint) == 4
    assert footprint.area() == pytest.approx(4200.0 * 3200.0)


def test_bent_wall_footprint_is_simple():
    """An L-shaped wall gives a six-vertex simple polygon."""
    pair = offset_polyline([[0, 0], [1000, 0], [1000, 1000]], 200)
    footprint = build_footprint_from_pair(pair)

    assert len(footprint) == 6
    assert validate_footprint(list(footprint.points)).valid


def test_mismatched_closure():
    left = _polyline([(0, 0), (10, 0), (10, 10)], closed=True)
    right = _polyline([(0, 1), (10, 1)])
    with pytest.raises(MalformedInputError):
        build_footprint(left, right)


def test_zero_area_footprint():
    """Coincident boundaries collapse to nothing."""
    line = _polyline([(0, 0), (10, 0)])
    with pytest.raises(ZeroAreaFootprintError):
        build_footprint(line, line)


def test_self_intersecting_footprint():
    """Crossing boundaries are reported, not repaired."""
    left = _polyline([(0, 0), (10, 10)])
    right = _polyline([(0, 5), (20, 0)])
    with pytest.raises(SelfIntersectionError):
        build_footprint(left, right)


def test_validate_footprint_reports():
    """validate_footprint reports problems instead of raising."""
    square = [Point2D(x=x, y=y) for x, y in [(0, 0), (10, 0), (10, 10), (0, 10)]]
    report = validate_footprint(square)
    assert report.valid
    assert report.area == pytest.approx(100.0)
    assert report.vertex_count == 4

    flat = [Point2D(x=x, y=0) for x in (0, 5, 10)]
    report = validate_footprint(flat)
    assert not report.valid
    assert report.error == "Polygon area is zero"

    report = validate_footprint(square[:2])
    assert not report.valid
    assert report.vertex_count == 2
