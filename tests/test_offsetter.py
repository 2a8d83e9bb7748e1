"""Tests for centerline offsetting."""

import math

import pytest

from d25d.core.exceptions import DegenerateJoinError, MalformedInputError
from d25d.core.models import Point2D, Polyline
from d25d.geometry.offsetter import miter_offset, offset_polyline


def _xy(polyline):
    return [p.as_tuple() for p in polyline.points]


def test_straight_segment():
    """A single segment is shifted by half the thickness on either side."""
    pair = offset_polyline([[0, 0], [1000, 0]], 200)

    assert _xy(pair.left) == [(0.0, 100.0), (1000.0, 100.0)]
    assert _xy(pair.right) == [(0.0, -100.0), (1000.0, -100.0)]
    assert not pair.closed


def test_point_count_preserved():
    """Left and right have the same point count and closure as the centerline."""
    centerline = Polyline.from_points([[0, 0], [1000, 0], [1000, 1000], [2000, 1500]])
    pair = offset_polyline(centerline, 200)

    assert len(pair.left) == len(centerline)
    assert len(pair.right) == len(centerline)
    assert pair.left.closed == centerline.closed


def test_right_angle_miter():
    """A 90 degree corner is mitered to the corner of the wall."""
    pair = offset_polyline([[0, 0], [1000, 0], [1000, 1000]], 200)

    left_corner = pair.left.points[1]
    right_corner = pair.right.points[1]
    assert left_corner.x == pytest.approx(900.0)
    assert left_corner.y == pytest.approx(100.0)
    assert right_corner.x == pytest.approx(1100.0)
    assert right_corner.y == pytest.approx(-100.0)


def test_sharp_corner_falls_back_to_flat_join():
    """Past the miter limit the corner sits at half the thickness."""
    pair = offset_polyline([[0, 0], [1000, 0], [0, 10]], 200)

    corner = Point2D(x=1000, y=0)
    assert pair.left.points[1].distance_to(corner) == pytest.approx(100.0)
    assert pair.right.points[1].distance_to(corner) == pytest.approx(100.0)
    assert len(pair.left) == 3


def test_miter_limit_is_configurable():
    """A tight limit flattens even a right angle."""
    pair = offset_polyline([[0, 0], [1000, 0], [1000, 1000]], 200, miter_limit=1.0)

    corner = pair.left.points[1]
    assert corner.x == pytest.approx(1000 - 100 / math.sqrt(2))
    assert corner.y == pytest.approx(100 / math.sqrt(2))


def test_miter_offset_vector():
    """The miter vector is the bisector scaled by 1 / cos(half angle)."""
    (vx, vy), mitered = miter_offset((0.0, 1.0), (-1.0, 0.0), 4.0)
    assert mitered
    assert vx == pytest.approx(-1.0)
    assert vy == pytest.approx(1.0)

    (ux, uy), mitered = miter_offset((0.0, 1.0), (-1.0, 0.0), 1.0)
    assert not mitered
    assert math.hypot(ux, uy) == pytest.approx(1.0)


def test_closed_loop():
    """A closed loop yields two closed rings, left inside for a CCW centerline."""
    pair = offset_polyline([[0, 0], [4000, 0], [4000, 3000], [0, 3000], [0, 0]], 200)

    assert pair.closed
    assert len(pair.left) == 4
    assert _xy(pair.left)[0] == pytest.approx((100.0, 100.0))
    assert _xy(pair.right)[0] == pytest.approx((-100.0, -100.0))


def test_accepts_mapping_points():
    """Centerline points may be {x, y} mappings."""
    pair = offset_polyline([{"x": 0, "y": 0}, {"x": 0, "y": 500}], 100)
    assert _xy(pair.left) == [(-50.0, 0.0), (-50.0, 500.0)]


def test_rejects_non_positive_thickness():
    with pytest.raises(MalformedInputError):
        offset_polyline([[0, 0], [1000, 0]], 0)
    with pytest.raises(MalformedInputError):
        offset_polyline([[0, 0], [1000, 0]], -10)


def test_rejects_single_point():
    with pytest.raises(MalformedInputError):
        offset_polyline([[0, 0]], 200)


def test_rejects_zero_length_segment():
    with pytest.raises(MalformedInputError):
        offset_polyline([[0, 0], [0, 0], [1000, 0]], 200)


def test_reversal_is_degenerate_join():
    """A centerline that doubles back on itself cannot be joined."""
    centerline = Polyline(
        points=(Point2D(x=0, y=0), Point2D(x=1000, y=0), Point2D(x=500, y=0)),
        closed=False,
    )
    with pytest.raises(DegenerateJoinError):
        offset_polyline(centerline, 200)
