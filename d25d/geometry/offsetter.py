"""
Polyline offsetting (wall thickness).

Creates the left and right boundary curves of a wall centerline at half the
wall thickness. Corners use a miter join capped by ``miter_limit``; past the
cap the vertex falls back to a flat join so both curves keep the
centerline's point count.
"""

import math
from typing import Any, List, Sequence, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from d25d.core.exceptions import DegenerateJoinError, MalformedInputError
from d25d.core.models import OffsetPair, Point2D, Polyline


DEFAULT_MITER_LIMIT = 4.0  # miter length / half thickness, i.e. at most 2x wall thickness

Vector = Tuple[float, float]


def _segment_normal(start: Point2D, end: Point2D) -> Vector:
    """Unit normal pointing to the left of start->end (CCW rotation)."""
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)

    if length < 1e-10:
        raise MalformedInputError(
            "Centerline has a zero-length segment",
            {"start": str(start.as_tuple()), "end": str(end.as_tuple())},
        )

    return (-dy / length, dx / length)


def miter_offset(prev_normal: Vector, next_normal: Vector, miter_limit: float) -> Tuple[Vector, bool]:
    """
    Offset direction at a joint between two segments.

    Args:
        prev_normal: Unit normal of the incoming segment
        next_normal: Unit normal of the outgoing segment
        miter_limit: Maximum miter scale before falling back to a flat join

    Returns:
        (vector, mitered): vector to scale by half the thickness, and whether
        the miter was kept

    Raises:
        DegenerateJoinError: If the segments reverse direction (normals cancel)
    """
    bx = prev_normal[0] + next_normal[0]
    by = prev_normal[1] + next_normal[1]
    length = math.hypot(bx, by)

    if length < 1e-9:
        raise DegenerateJoinError(
            "Centerline folds back on itself (180 degree turn)",
            {"prev_normal": str(prev_normal), "next_normal": str(next_normal)},
        )

    ux, uy = bx / length, by / length

    # cos(theta / 2) between the bisector and either normal is length / 2
    scale = 2.0 / length
    if scale > miter_limit:
        return (ux, uy), False

    return (ux * scale, uy * scale), True


def offset_polyline(
    centerline: Union[Polyline, Sequence[Any]],
    thickness: float,
    miter_limit: float = DEFAULT_MITER_LIMIT,
) -> OffsetPair:
    """
    Offset a centerline to the left and right by half the thickness.

    Args:
        centerline: Polyline, or raw points (closed if the last point repeats the first)
        thickness: Wall thickness (mm)
        miter_limit: Maximum miter length relative to half the thickness

    Returns:
        OffsetPair with the same point count and closure as the centerline

    Raises:
        MalformedInputError: Non-positive thickness or too few distinct points
        DegenerateJoinError: If a corner cannot be joined
    """
    if not isinstance(centerline, Polyline):
        centerline = Polyline.from_points(centerline)

    if not thickness > 0:
        raise MalformedInputError(
            f"Wall thickness must be positive, got {thickness}",
            {"thickness": str(thickness)},
        )

    points = centerline.points
    n = len(points)
    half = thickness / 2.0

    normals: List[Vector] = [_segment_normal(a, b) for a, b in centerline.segments()]

    left: List[Point2D] = []
    right: List[Point2D] = []
    flat_joins = 0

    for i, point in enumerate(points):
        if centerline.closed:
            prev_normal = normals[i - 1]
            next_normal = normals[i]
        elif i == 0:
            prev_normal = next_normal = normals[0]
        elif i == n - 1:
            prev_normal = next_normal = normals[-1]
        else:
            prev_normal = normals[i - 1]
            next_normal = normals[i]

        (ox, oy), mitered = miter_offset(prev_normal, next_normal, miter_limit)
        if not mitered:
            flat_joins += 1

        left.append(Point2D(x=point.x + ox * half, y=point.y + oy * half))
        right.append(Point2D(x=point.x - ox * half, y=point.y - oy * half))

    if flat_joins:
        logger.debug(f"Offset used {flat_joins} flat join(s) (miter limit {miter_limit})")

    try:
        return OffsetPair(
            left=Polyline(points=tuple(left), closed=centerline.closed),
            right=Polyline(points=tuple(right), closed=centerline.closed),
        )
    except ValidationError as e:
        raise DegenerateJoinError(
            "Offset curves collapsed (coincident boundary points)",
            {"thickness": str(thickness)},
        ) from e
