"""Tests for the axonometric projection."""

import math

import numpy as np
import pytest

from d25d.core.models import Face, FaceStyle, Point3D
from d25d.rendering.camera import HEIGHT_SCALE, VIEW_DIRECTION
from d25d.rendering.projection import project, project_face, project_points, project_xyz


COS30 = math.cos(math.pi / 6)
SIN30 = math.sin(math.pi / 6)


def test_origin():
    p = project((0, 0, 0))
    assert (p.x, p.y) == (0.0, 0.0)


def test_x_axis_sample():
    p = project((10, 0, 0))
    assert p.x == pytest.approx(10 * COS30)
    assert p.y == pytest.approx(10 * SIN30)


def test_y_axis_sample():
    p = project((0, 10, 0))
    assert p.x == pytest.approx(-10 * COS30)
    assert p.y == pytest.approx(10 * SIN30)


def test_height_is_compressed_and_points_up():
    p = project((0, 0, 10))
    assert p.x == 0.0
    assert p.y == pytest.approx(-10 * HEIGHT_SCALE)


def test_accepts_all_point_forms():
    expected = project_xyz(3.0, 4.0, 5.0)
    assert project(Point3D(x=3, y=4, z=5)) == expected
    assert project({"x": 3, "y": 4, "z": 5}) == expected
    assert project([3, 4, 5]) == expected


def test_pure_and_deterministic():
    """Projection never changes its argument and repeats bit for bit."""
    point = [1234.5, -678.25, 2700.0]
    first = project(point)
    second = project(point)

    assert point == [1234.5, -678.25, 2700.0]
    assert first == second
    assert first is not second


def test_batch_matches_single():
    points = [(0, 0, 0), (10, 0, 0), (1234.5, -678.25, 2700.0), (-5, 7, 3)]
    batch = project_points(points)

    for row, point in zip(batch, points):
        single = project(point)
        assert row[0] == single.x
        assert row[1] == single.y


def test_batch_does_not_mutate_input():
    points = np.array([[1.0, 2.0, 3.0]])
    project_points(points)
    assert points.tolist() == [[1.0, 2.0, 3.0]]


def test_view_direction_projects_to_a_point():
    """Moving along the view direction does not move the projected point."""
    moved = project_points([VIEW_DIRECTION])
    assert np.allclose(moved, 0.0)


def test_project_face_carries_style_and_depth():
    face = Face(
        vertices=(Point3D(x=0, y=0, z=5), Point3D(x=10, y=0, z=5), Point3D(x=10, y=10, z=5)),
        normal=Point3D(x=0, y=0, z=1),
        style=FaceStyle.TOP,
    )
    axon = project_face(face, wall_index=3)

    assert axon.style == FaceStyle.TOP
    assert axon.wall_index == 3
    assert len(axon.points) == 3
    assert axon.points[1] == project((10, 0, 5))
    assert axon.to_dict()["style"] == "top"
