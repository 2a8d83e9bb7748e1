"""
Wall footprint polygon.

Combines the left and right offset curves of a wall into its closed plan
outline. Degenerate outlines are reported, never repaired: a silently fixed
footprint would hide topology bugs upstream.
"""

from typing import List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel

from d25d.core.exceptions import MalformedInputError, SelfIntersectionError, ZeroAreaFootprintError
from d25d.core.geometry_utils import EPSILON, find_self_intersection, signed_area
from d25d.core.models import Footprint, OffsetPair, Point2D, Polyline


MIN_FOOTPRINT_AREA = 1e-3  # mm^2


class FootprintValidation(BaseModel):
    """Result of checking a candidate footprint without raising."""
    valid: bool
    area: float
    vertex_count: int
    error: Optional[str] = None


def _drop_duplicate_vertices(points: Sequence[Point2D]) -> List[Point2D]:
    """Drop consecutive duplicates, including an explicit closing vertex."""
    result: List[Point2D] = []
    for p in points:
        if not result or result[-1].distance_to(p) >= EPSILON:
            result.append(p)
    while len(result) > 1 and result[0].distance_to(result[-1]) < EPSILON:
        result.pop()
    return result


def validate_footprint(points: Sequence[Point2D]) -> FootprintValidation:
    """
    Check a candidate footprint polygon.

    Args:
        points: Polygon vertices (closing edge implicit)

    Returns:
        FootprintValidation report
    """
    vertices = _drop_duplicate_vertices(points)
    coords = [p.as_tuple() for p in vertices]
    area = abs(signed_area(coords))

    if len(vertices) < 3:
        return FootprintValidation(valid=False, area=area, vertex_count=len(vertices),
                                   error="Polygon has fewer than 3 vertices")

    if area < MIN_FOOTPRINT_AREA:
        return FootprintValidation(valid=False, area=area, vertex_count=len(vertices),
                                   error="Polygon area is zero")

    crossing = find_self_intersection(coords)
    if crossing is not None:
        return FootprintValidation(valid=False, area=area, vertex_count=len(vertices),
                                   error=f"Edges {crossing[0]} and {crossing[1]} intersect")

    return FootprintValidation(valid=True, area=area, vertex_count=len(vertices))


def _outline_points(left: Polyline, right: Polyline) -> List[Point2D]:
    if left.closed != right.closed:
        raise MalformedInputError("Left and right boundaries disagree on closure")

    if not left.closed:
        # Left forward, right backward; the closing edge back to left[0] is implicit
        return list(left.points) + list(reversed(right.points))

    # A closed wall loop yields two nested rings; the solid's plan outline is the outer one
    left_area = abs(signed_area([p.as_tuple() for p in left.points]))
    right_area = abs(signed_area([p.as_tuple() for p in right.points]))
    outer = left if left_area >= right_area else right
    return list(outer.points)


def build_footprint(left: Polyline, right: Polyline) -> Footprint:
    """
    Build the footprint polygon of a wall from its offset curves.

    Args:
        left: Left offset polyline
        right: Right offset polyline

    Returns:
        Footprint (simple polygon, non-zero area)

    Raises:
        MalformedInputError: If the curves disagree on closure
        ZeroAreaFootprintError: If the polygon has (near) zero area
        SelfIntersectionError: If the polygon crosses itself
    """
    vertices = _drop_duplicate_vertices(_outline_points(left, right))
    coords = [p.as_tuple() for p in vertices]
    area = signed_area(coords)

    if len(vertices) < 3 or abs(area) < MIN_FOOTPRINT_AREA:
        raise ZeroAreaFootprintError(
            "Footprint has zero area",
            {"vertex_count": str(len(vertices)), "area": str(area)},
        )

    crossing = find_self_intersection(coords)
    if crossing is not None:
        raise SelfIntersectionError(
            f"Footprint edges {crossing[0]} and {crossing[1]} intersect",
            {"edges": str(crossing), "vertex_count": str(len(vertices))},
        )

    logger.debug(f"Built footprint: {len(vertices)} vertices, area {abs(area):.1f} mm^2")

    return Footprint(points=tuple(vertices))


def build_footprint_from_pair(pair: OffsetPair) -> Footprint:
    """Convenience wrapper for build_footprint(pair.left, pair.right)."""
    return build_footprint(pair.left, pair.right)
