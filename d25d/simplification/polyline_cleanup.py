"""
Pre-topology polyline cleanup.

Removes tracing noise before wall topology extraction: too-short polylines,
collinear runs and near-duplicate overlapping paths.
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from d25d.core.geometry_utils import distance
from d25d.simplification.path_simplifier import is_path, is_path_list, douglas_peucker


def _path_length(path: Sequence[Sequence[float]]) -> float:
    return sum(distance(path[i - 1], path[i]) for i in range(1, len(path)))


def _bounds(path: Sequence[Sequence[float]]) -> Tuple[float, float, float, float]:
    xs = [p[0] for p in path]
    ys = [p[1] for p in path]
    return (min(xs), min(ys), max(xs), max(ys))


def remove_short_polylines(polylines: Any, min_points: int = 5) -> Any:
    """
    Remove polylines with fewer than ``min_points`` points.

    Args:
        polylines: List of polylines
        min_points: Minimum number of points required

    Returns:
        Filtered polylines
    """
    if not is_path_list(polylines):
        return polylines

    return [p for p in polylines if isinstance(p, (list, tuple)) and len(p) >= min_points]


def _merge_collinear_in_polyline(polyline: Sequence[Any],
                                 angle_tolerance: float,
                                 distance_tolerance: float) -> List[Any]:
    if len(polyline) <= 2:
        return list(polyline)

    result = [polyline[0]]

    for i in range(1, len(polyline) - 1):
        prev_point = result[-1]
        curr_point = polyline[i]
        next_point = polyline[i + 1]

        angle1 = math.atan2(curr_point[1] - prev_point[1], curr_point[0] - prev_point[0])
        angle2 = math.atan2(next_point[1] - curr_point[1], next_point[0] - curr_point[0])

        # Same or opposite heading
        diff = abs(angle1 - angle2)
        diff = min(diff, abs(diff - math.pi), abs(diff - 2 * math.pi))

        # Perpendicular offset of the middle point from prev->next
        dx = next_point[0] - prev_point[0]
        dy = next_point[1] - prev_point[1]
        length = math.hypot(dx, dy)
        if length < 1e-9:
            offset = distance(curr_point, prev_point)
        else:
            offset = abs(dy * curr_point[0] - dx * curr_point[1]
                         + next_point[0] * prev_point[1] - next_point[1] * prev_point[0]) / length

        if diff <= angle_tolerance and offset <= distance_tolerance:
            continue  # collinear, drop the middle point

        result.append(curr_point)

    result.append(polyline[-1])
    return result


def merge_collinear_segments(polylines: Any,
                             angle_tolerance: float = 0.01,
                             distance_tolerance: float = 1.0) -> Any:
    """
    Merge consecutive collinear segments inside each polyline.

    Args:
        polylines: List of polylines
        angle_tolerance: Heading tolerance in radians (~0.57 degrees)
        distance_tolerance: Maximum offset of a dropped point from its chord

    Returns:
        Polylines with collinear runs merged
    """
    if not is_path_list(polylines):
        return polylines

    return [
        _merge_collinear_in_polyline(p, angle_tolerance, distance_tolerance) if is_path(p) else p
        for p in polylines
    ]


def _are_near_duplicates(path1: Sequence[Sequence[float]],
                         path2: Sequence[Sequence[float]],
                         point_tolerance: float,
                         overlap_ratio: float) -> bool:
    if not path1 or not path2:
        return False

    b1 = _bounds(path1)
    b2 = _bounds(path2)
    area1 = (b1[2] - b1[0]) * (b1[3] - b1[1])
    area2 = (b2[2] - b2[0]) * (b2[3] - b2[1])
    overlap_x = max(0.0, min(b1[2], b2[2]) - max(b1[0], b2[0]))
    overlap_y = max(0.0, min(b1[3], b2[3]) - max(b1[1], b2[1]))

    min_area = min(area1, area2)
    if min_area == 0 or (overlap_x * overlap_y) / min_area < overlap_ratio:
        return False

    sample_size = min(len(path1), len(path2), 10)
    step1 = max(1, len(path1) // sample_size)
    step2 = max(1, len(path2) // sample_size)
    samples1 = path1[::step1]
    samples2 = path2[::step2]

    matching = 0
    total = 0
    for source, target in ((samples1, samples2), (samples2, samples1)):
        for point in source:
            nearest = min(distance(point, other) for other in target)
            if nearest <= point_tolerance:
                matching += 1
            total += 1

    return total > 0 and matching / total >= 0.7


def remove_near_duplicates(polylines: Any,
                           point_tolerance: float = 3.0,
                           overlap_ratio: float = 0.8) -> Any:
    """
    Remove near-duplicate overlapping paths, keeping the longer of each pair.

    Args:
        polylines: List of polylines
        point_tolerance: Distance for two sampled points to match
        overlap_ratio: Minimum bounding box overlap (relative to the smaller box)

    Returns:
        Polylines with duplicates removed
    """
    if not isinstance(polylines, (list, tuple)) or len(polylines) <= 1:
        return polylines

    kept: List[Any] = []
    for current in polylines:
        if not is_path(current) or not current:
            kept.append(current)
            continue

        duplicate_of: Optional[int] = None
        for idx, other in enumerate(kept):
            if is_path(other) and _are_near_duplicates(current, other, point_tolerance, overlap_ratio):
                duplicate_of = idx
                break

        if duplicate_of is None:
            kept.append(current)
        elif _path_length(current) > _path_length(kept[duplicate_of]):
            kept[duplicate_of] = current

    return kept


def cleanup_polylines(polylines: Any, options: Optional[Dict[str, Any]] = None) -> Any:
    """
    Complete pre-topology cleanup.

    Steps:
    1. Remove short polylines (< min_points)
    2. Douglas-Peucker simplification
    3. Merge collinear segments
    4. Remove near-duplicate paths

    Large inputs get more aggressive parameters (above 200 and 500 polylines).

    Args:
        polylines: List of polylines to clean
        options: Overrides for min_points, douglas_peucker_tolerance,
                 angle_tolerance, distance_tolerance,
                 duplicate_point_tolerance, duplicate_overlap_ratio

    Returns:
        Cleaned polylines
    """
    if not is_path_list(polylines):
        return polylines

    options = options or {}
    initial_count = len(polylines)

    min_points = options.get("min_points", 5)
    dp_tolerance = options.get("douglas_peucker_tolerance", 2.0)
    angle_tolerance = options.get("angle_tolerance", 0.01)
    distance_tolerance = options.get("distance_tolerance", 1.0)
    duplicate_tolerance = options.get("duplicate_point_tolerance", 3.0)
    overlap_ratio = options.get("duplicate_overlap_ratio", 0.8)

    if initial_count > 200:
        logger.info(f"High polyline count ({initial_count}), applying aggressive cleanup")
        min_points = max(min_points, 8)
        dp_tolerance = max(dp_tolerance, 4.0)
        duplicate_tolerance = max(duplicate_tolerance, 5.0)
        overlap_ratio = min(overlap_ratio, 0.7)

    if initial_count > 500:
        logger.info(f"Very high polyline count ({initial_count}), applying very aggressive cleanup")
        min_points = max(min_points, 10)
        dp_tolerance = max(dp_tolerance, 6.0)
        duplicate_tolerance = max(duplicate_tolerance, 8.0)
        overlap_ratio = min(overlap_ratio, 0.6)

    result = remove_short_polylines(polylines, min_points)
    if dp_tolerance > 0:
        result = douglas_peucker(result, dp_tolerance)
    result = merge_collinear_segments(result, angle_tolerance, distance_tolerance)
    result = remove_near_duplicates(result, duplicate_tolerance, overlap_ratio)

    final_count = len(result)
    reduction = initial_count - final_count
    logger.debug(
        f"Cleanup: {initial_count} -> {final_count} polylines "
        f"({reduction / initial_count * 100:.1f}% reduction)"
    )

    return result
