"""
Plain-coordinate geometry helpers shared by the pipeline stages.

Everything here works on ``(x, y)`` / ``(x, y, z)`` float tuples so the
simplifier (raw ``[x, y]`` lists) and the model-based stages can share one
implementation.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

Coord2 = Tuple[float, float]
Coord3 = Tuple[float, float, float]

EPSILON = 1e-6  # mm


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def signed_area(points: Sequence[Sequence[float]]) -> float:
    """
    Signed polygon area using the shoelace formula.

    Positive for counter-clockwise winding, negative for clockwise. The
    polygon is closed implicitly; an explicit repeated end point contributes
    a zero-length edge and does not change the result.
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i][0] * points[j][1]
        area -= points[j][0] * points[i][1]
    return area / 2.0


def project_onto_segment(point: Sequence[float], start: Sequence[float], end: Sequence[float]) -> Coord2:
    """Closest point to ``point`` on the segment ``start``-``end``."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy

    if length_sq < 1e-10:
        return (start[0], start[1])

    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return (start[0] + t * dx, start[1] + t * dy)


def point_segment_distance(point: Sequence[float], start: Sequence[float], end: Sequence[float]) -> float:
    """Distance from ``point`` to the segment ``start``-``end``."""
    return distance(point, project_onto_segment(point, start, end))


def _orientation(a: Sequence[float], b: Sequence[float], c: Sequence[float], tolerance: float) -> int:
    cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
    if abs(cross) <= tolerance:
        return 0
    return 1 if cross > 0 else -1


def _on_segment(a: Sequence[float], b: Sequence[float], p: Sequence[float], tolerance: float) -> bool:
    return (min(a[0], b[0]) - tolerance <= p[0] <= max(a[0], b[0]) + tolerance and
            min(a[1], b[1]) - tolerance <= p[1] <= max(a[1], b[1]) + tolerance)


def segments_intersect(p1: Sequence[float], p2: Sequence[float],
                       q1: Sequence[float], q2: Sequence[float],
                       tolerance: float = 1e-9) -> bool:
    """Check whether segments ``p1``-``p2`` and ``q1``-``q2`` touch or cross."""
    o1 = _orientation(p1, p2, q1, tolerance)
    o2 = _orientation(p1, p2, q2, tolerance)
    o3 = _orientation(q1, q2, p1, tolerance)
    o4 = _orientation(q1, q2, p2, tolerance)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear cases
    if o1 == 0 and _on_segment(p1, p2, q1, tolerance):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2, tolerance):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1, tolerance):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2, tolerance):
        return True

    return False


def find_self_intersection(points: Sequence[Sequence[float]]) -> Optional[Tuple[int, int]]:
    """
    Find the first pair of non-adjacent polygon edges that touch or cross.

    Args:
        points: Implicitly closed polygon vertices

    Returns:
        ``(i, j)`` edge indices (edge ``i`` runs from vertex ``i`` to ``i + 1``)
        or None if the polygon is simple
    """
    n = len(points)
    if n < 4:
        return None

    for i in range(n):
        a1 = points[i]
        a2 = points[(i + 1) % n]
        for j in range(i + 1, n):
            # Adjacent edges share a vertex
            if j == i + 1 or (i == 0 and j == n - 1):
                continue
            b1 = points[j]
            b2 = points[(j + 1) % n]
            if segments_intersect(a1, a2, b1, b2):
                return (i, j)

    return None


def dot3(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two 3D vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def normalize3(v: Sequence[float]) -> Optional[Coord3]:
    """Unit vector along ``v``, or None for a (near) zero vector."""
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length < 1e-12:
        return None
    return (v[0] / length, v[1] / length, v[2] / length)


def newell_normal(vertices: Sequence[Sequence[float]]) -> Optional[Coord3]:
    """
    Unit normal of a planar polygon using Newell's method.

    Counter-clockwise vertices (seen from the tip of the normal) give the
    right-handed normal. Returns None for degenerate polygons.
    """
    nx = ny = nz = 0.0
    n = len(vertices)
    for i in range(n):
        cx, cy, cz = vertices[i]
        nxt = vertices[(i + 1) % n]
        nx += (cy - nxt[1]) * (cz + nxt[2])
        ny += (cz - nxt[2]) * (cx + nxt[0])
        nz += (cx - nxt[0]) * (cy + nxt[1])
    return normalize3((nx, ny, nz))


def centroid(coords: Iterable[Sequence[float]]) -> List[float]:
    """Vertex average of a set of points of any (equal) dimension."""
    items = list(coords)
    if not items:
        return []
    dims = len(items[0])
    return [sum(c[d] for c in items) / len(items) for d in range(dims)]
