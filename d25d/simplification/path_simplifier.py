"""
Path simplification for raw vectorized polylines.

Reduces path complexity while keeping the visual shape: Douglas-Peucker
reduction, short segment removal, winding normalization and optional
smoothing. All functions are pure and deterministic.

Malformed input (anything that is not a non-empty list of paths) is returned
unchanged instead of raising. Upstream tracing quality varies a lot and the
simplifier is expected to pass through what it cannot clean.
"""

from numbers import Real
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from loguru import logger
from pydantic import BaseModel, Field

from d25d.core.geometry_utils import distance, point_segment_distance, signed_area
from d25d.core.models import RawPath


class SimplifyOptions(BaseModel):
    """Toggles and tolerances for simplify()."""
    douglas_peucker_tolerance: float = Field(default=1.0, ge=0.0)
    min_segment_length: float = Field(default=2.0, ge=0.0)
    target_direction: Literal["ccw", "cw"] = "ccw"
    apply_douglas_peucker: bool = True
    remove_small_segments: bool = True
    equalize_direction: bool = True

    # Smoothing runs before everything else when enabled
    smooth: bool = False
    smoothness: float = Field(default=0.5, ge=0.0, le=1.0)
    window_size: int = 3


def is_path_list(paths: Any) -> bool:
    return isinstance(paths, (list, tuple)) and len(paths) > 0


def is_path(path: Any) -> bool:
    """A path is a list of points, each with at least two real coordinates."""
    if not isinstance(path, (list, tuple)):
        return False
    for point in path:
        if not isinstance(point, (list, tuple)) or len(point) < 2:
            return False
        if not isinstance(point[0], Real) or not isinstance(point[1], Real):
            return False
    return True


def is_closed_path(points: Sequence[Sequence[float]], tolerance: float = 1.0) -> bool:
    """Check if a path is closed (first and last points within tolerance)."""
    if len(points) < 3:
        return False
    return distance(points[0], points[-1]) < tolerance


def reduce_points(points: Sequence[Sequence[float]], tolerance: float = 1.0) -> List[Any]:
    """
    Douglas-Peucker reduction of a single path.

    A point is dropped when its distance to the chord segment between the
    endpoints of the current run is not greater than ``tolerance``. The result
    is a subsequence of the input (the same point objects) and always keeps
    the first and last point.

    Args:
        points: Path as a sequence of [x, y] points
        tolerance: Maximum distance tolerance

    Returns:
        Simplified list of points
    """
    n = len(points)
    if n <= 2:
        return list(points)

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]

    while stack:
        start, end = stack.pop()
        max_distance = 0.0
        max_index = 0

        for i in range(start + 1, end):
            dist = point_segment_distance(points[i], points[start], points[end])
            if dist > max_distance:
                max_distance = dist
                max_index = i

        if max_distance > tolerance:
            keep[max_index] = True
            stack.append((start, max_index))
            stack.append((max_index, end))

    return [p for p, kept in zip(points, keep) if kept]


def douglas_peucker(paths: Any, tolerance: float = 1.0) -> Any:
    """
    Simplify paths using the Douglas-Peucker algorithm.

    Args:
        paths: List of paths, each a list of [x, y] points
        tolerance: Maximum distance tolerance for simplification

    Returns:
        Simplified paths (input returned unchanged if malformed)
    """
    if not is_path_list(paths):
        return paths

    return [
        reduce_points(path, tolerance) if is_path(path) and len(path) > 2 else path
        for path in paths
    ]


def _remove_small_segments_in_path(path: Sequence[Any], min_length: float) -> List[Any]:
    if len(path) == 1:
        return list(path)

    filtered = [path[0]]
    last_kept = 0

    for i in range(1, len(path)):
        if distance(path[last_kept], path[i]) >= min_length:
            filtered.append(path[i])
            last_kept = i

    # Closed paths stay closed
    if len(filtered) >= 2 and is_closed_path(path, min_length):
        first = filtered[0]
        if distance(first, filtered[-1]) > min_length:
            filtered.append([first[0], first[1]])

    if len(filtered) >= 2:
        return filtered
    return [path[0], path[-1]]


def remove_small_segments(paths: Any, min_length: float = 2.0) -> Any:
    """
    Remove segments shorter than ``min_length``.

    Walks each path keeping a point only if it is at least ``min_length`` from
    the last kept point. The first point is always kept. A path that collapses
    keeps its first and last original point; empty paths are dropped.

    Args:
        paths: List of paths, each a list of [x, y] points
        min_length: Minimum segment length to keep

    Returns:
        Paths with small segments removed
    """
    if not is_path_list(paths):
        return paths

    result = []
    for path in paths:
        if not is_path(path):
            result.append(path)
        elif len(path) > 0:
            result.append(_remove_small_segments_in_path(path, min_length))
    return result


def equalize_path_direction(paths: Any, target_direction: str = "ccw", tolerance: float = 1.0) -> Any:
    """
    Give all closed paths the same winding.

    Open paths and paths with fewer than 3 points are left as they are. A
    reversed path keeps its first point and reverses the remainder.

    Args:
        paths: List of paths, each a list of [x, y] points
        target_direction: 'ccw' (counter-clockwise) or 'cw' (clockwise)
        tolerance: Distance below which first and last point count as equal

    Returns:
        Paths with equalized direction
    """
    if not is_path_list(paths):
        return paths

    target_ccw = target_direction.lower() == "ccw"

    result = []
    for path in paths:
        if not is_path(path) or not is_closed_path(path, tolerance):
            result.append(path)
            continue

        is_ccw = signed_area(path) > 0
        if is_ccw != target_ccw:
            result.append([path[0]] + list(reversed(path[1:])))
        else:
            result.append(path)
    return result


def smooth_paths(paths: Any, smoothness: float = 0.5, window_size: int = 3) -> Any:
    """
    Smooth paths by averaging each point with its neighbours.

    Closed paths wrap around, open paths clamp at their ends. The averaged
    position is blended with the original by ``smoothness``.

    Args:
        paths: List of paths
        smoothness: Blend factor 0-1 (0 = no change)
        window_size: Size of the averaging window

    Returns:
        Smoothed paths
    """
    if not is_path_list(paths):
        return paths

    if smoothness <= 0 or window_size < 2:
        return paths

    half_window = window_size // 2
    result = []

    for path in paths:
        if not is_path(path) or len(path) <= 2:
            result.append(path)
            continue

        n = len(path)
        closed = is_closed_path(path)
        smoothed = []

        for i in range(n):
            sum_x = sum_y = 0.0
            count = 0
            for offset in range(-half_window, half_window + 1):
                idx = i + offset
                if closed:
                    idx %= n
                else:
                    idx = min(max(idx, 0), n - 1)
                sum_x += path[idx][0]
                sum_y += path[idx][1]
                count += 1

            original = path[i]
            smoothed.append([
                original[0] * (1 - smoothness) + (sum_x / count) * smoothness,
                original[1] * (1 - smoothness) + (sum_y / count) * smoothness,
            ])

        result.append(smoothed)

    return result


def simplify(paths: Any, options: Union[SimplifyOptions, Dict[str, Any], None] = None) -> Any:
    """
    Complete path simplification pipeline.

    Order: (smoothing) -> Douglas-Peucker -> small segment removal ->
    direction equalization, each stage toggled by ``options``.

    Args:
        paths: List of paths, each a list of [x, y] points
        options: SimplifyOptions or a dict of its fields

    Returns:
        Simplified paths (input returned unchanged if malformed)
    """
    if not is_path_list(paths):
        return paths

    if options is None:
        options = SimplifyOptions()
    elif isinstance(options, dict):
        options = SimplifyOptions.model_validate(options)

    result = paths
    input_points = sum(len(p) for p in paths if is_path(p))

    if options.smooth:
        result = smooth_paths(result, options.smoothness, options.window_size)

    if options.apply_douglas_peucker:
        result = douglas_peucker(result, options.douglas_peucker_tolerance)

    if options.remove_small_segments:
        result = remove_small_segments(result, options.min_segment_length)

    if options.equalize_direction:
        result = equalize_path_direction(result, options.target_direction)

    output_points = sum(len(p) for p in result if is_path(p))
    logger.debug(
        f"Simplified {len(paths)} paths: {input_points} -> {output_points} points"
    )

    return result


def _orient_closed_ring(path: List[Any], target_direction: str) -> List[Any]:
    """Wind an explicitly closed path, reversing the ring between its closing points."""
    ring = path[:-1] if len(path) > 1 and distance(path[0], path[-1]) == 0 else list(path)
    if len(ring) < 3:
        return path
    if (signed_area(ring) > 0) != (target_direction == "ccw"):
        ring = [ring[0]] + list(reversed(ring[1:]))
    return ring + [ring[0]]


def simplify_raw_paths(
    raw_paths: Sequence[Union[RawPath, Dict[str, Any]]],
    options: Union[SimplifyOptions, Dict[str, Any], None] = None,
) -> List[Any]:
    """
    Simplify ``{points, closed}`` paths as delivered by the tracer.

    Closed paths are explicitly closed (first point repeated) before
    simplification so the closure survives; the ``closed`` flag is kept.
    Their winding is equalized on the ring without the repeated point, so
    they come out explicitly closed. Items that cannot be read as raw paths
    are passed through.

    Args:
        raw_paths: RawPath models or dicts with 'points' and 'closed'
        options: SimplifyOptions or a dict of its fields

    Returns:
        List of RawPath (or the unreadable items, unchanged)
    """
    if not is_path_list(raw_paths):
        return raw_paths

    if options is None:
        options = SimplifyOptions()
    elif isinstance(options, dict):
        options = SimplifyOptions.model_validate(options)
    ring_options = options.model_copy(update={"equalize_direction": False})

    result: List[Any] = []
    for item in raw_paths:
        if isinstance(item, RawPath):
            points = [list(p) for p in item.points]
            closed = item.closed
        elif isinstance(item, dict) and is_path(item.get("points")):
            points = [list(p[:2]) for p in item["points"]]
            closed = bool(item.get("closed", False))
        else:
            result.append(item)
            continue

        if not points:
            continue

        if not closed:
            simplified = simplify([points], options)
        else:
            if len(points) >= 2 and distance(points[0], points[-1]) > 0:
                points.append(list(points[0]))
            simplified = simplify([points], ring_options)
            if options.equalize_direction:
                simplified = [_orient_closed_ring(path, options.target_direction) for path in simplified]

        for path in simplified:
            result.append(RawPath(points=[(p[0], p[1]) for p in path], closed=closed))

    return result
