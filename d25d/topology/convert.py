"""
Topology to wall conversion.

Upstream topology describes walls as straight ``{start, end}`` segments; the
geometry pipeline wants a Wall with a centerline. Wall dicts in the
``{centerline, thickness, height}`` form are converted here too, so every
entry point builds Walls the same way.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger
from pydantic import ValidationError

from d25d.core.exceptions import MalformedInputError
from d25d.core.models import Point2D, Polyline, RawPath, Wall


DEFAULT_THICKNESS = 200.0  # mm
DEFAULT_HEIGHT = 2700.0  # mm


def _require_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MalformedInputError(f"{kind} must be a mapping", {"value": repr(data)})
    return data


def _make_wall(centerline: Polyline, thickness: Any, height: Any, name: Optional[str]) -> Wall:
    try:
        return Wall(centerline=centerline, thickness=thickness, height=height, name=name)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"])
        raise MalformedInputError(
            f"Invalid wall {field}: {error['msg']}",
            {"thickness": str(thickness), "height": str(height)},
        ) from e


def _infer_closed(points: Sequence[Any]) -> bool:
    # Without an explicit flag, anything longer than a segment is a loop.
    # A repeated first point needs three entries, so it is covered too.
    return len(points) >= 3


def wall_from_dict(
    data: Mapping[str, Any],
    default_thickness: Optional[float] = None,
    default_height: Optional[float] = None,
) -> Wall:
    """
    Build a Wall from a ``{centerline, thickness, height, closed?}`` mapping.

    Without a ``closed`` key, a centerline is closed when it repeats its first
    point or has three or more points; two points make an open segment.

    Args:
        data: Wall mapping
        default_thickness: Used when the mapping has no thickness
        default_height: Used when the mapping has no height

    Returns:
        Wall

    Raises:
        MalformedInputError: If the mapping cannot be turned into a valid wall
    """
    data = _require_mapping(data, "Wall")

    points = data.get("centerline")
    if points is None:
        raise MalformedInputError("Wall has no centerline", {"keys": str(sorted(data))})

    closed = data.get("closed")
    if closed is None:
        if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
            raise MalformedInputError("Wall centerline must be a sequence", {"value": repr(points)})
        closed = _infer_closed(points)
    elif not isinstance(closed, bool):
        raise MalformedInputError("Wall closed flag must be a boolean", {"closed": repr(closed)})

    centerline = Polyline.from_points(points, closed=closed)

    thickness = data.get("thickness", default_thickness)
    height = data.get("height", default_height)
    if thickness is None or height is None:
        raise MalformedInputError(
            "Wall needs both thickness and height",
            {"thickness": str(thickness), "height": str(height)},
        )

    return _make_wall(centerline, thickness, height, data.get("name"))


def topology_wall_to_wall(segment: Mapping[str, Any]) -> Wall:
    """
    Convert a topology segment ``{start, end, thickness?, height?}`` to a Wall.

    Endpoints may be ``[x, y]`` pairs or ``{x, y}`` mappings. Missing
    thickness and height default to 200 mm and 2700 mm; explicit values are
    validated, not replaced.

    Returns:
        Wall with an open two-point centerline

    Raises:
        MalformedInputError: If the segment is malformed or zero length
    """
    segment = _require_mapping(segment, "Topology wall")

    if "start" not in segment or "end" not in segment:
        raise MalformedInputError("Topology wall needs start and end", {"keys": str(sorted(segment))})

    start = Point2D.coerce(segment["start"])
    end = Point2D.coerce(segment["end"])
    centerline = Polyline.from_points([start, end], closed=False)

    thickness = segment.get("thickness")
    height = segment.get("height")

    return _make_wall(
        centerline,
        DEFAULT_THICKNESS if thickness is None else thickness,
        DEFAULT_HEIGHT if height is None else height,
        segment.get("name"),
    )


def topology_walls_to_walls(segments: Sequence[Mapping[str, Any]]) -> List[Wall]:
    """
    Convert every topology segment independently.

    Connected segments are not merged into longer centerlines.
    """
    walls = [topology_wall_to_wall(segment) for segment in segments]
    logger.debug(f"Converted {len(walls)} topology walls")
    return walls


def mock_rectangular_topology(
    width: float = 10000.0,
    depth: float = 8000.0,
    wall_thickness: float = DEFAULT_THICKNESS,
    wall_height: float = DEFAULT_HEIGHT,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> Dict[str, Any]:
    """
    Topology of a plain rectangular building: four walls, one room, no openings.

    Args:
        width: Building width along x (mm)
        depth: Building depth along y (mm)
        wall_thickness: Thickness of every wall (mm)
        wall_height: Height of every wall (mm)
        origin_x: X of the first corner
        origin_y: Y of the first corner

    Returns:
        Dict with ``walls``, ``openings``, ``rooms`` and ``meta``
    """
    corners = [
        [origin_x, origin_y],
        [origin_x + width, origin_y],
        [origin_x + width, origin_y + depth],
        [origin_x, origin_y + depth],
    ]

    walls = [
        {
            "start": corners[i],
            "end": corners[(i + 1) % 4],
            "thickness": wall_thickness,
            "height": wall_height,
        }
        for i in range(4)
    ]

    return {
        "walls": walls,
        "openings": [],
        "rooms": [{"boundary": corners, "area": width * depth, "type": "room"}],
        "meta": {
            "type": "mock_rectangular",
            "dimensions": {"width": width, "depth": depth},
            "wall_thickness": wall_thickness,
            "origin": {"x": origin_x, "y": origin_y},
        },
    }


def mock_rectangular_building(**kwargs: Any) -> List[Wall]:
    """The mock rectangular building as Walls (keyword arguments as mock_rectangular_topology)."""
    return topology_walls_to_walls(mock_rectangular_topology(**kwargs)["walls"])


def golden_wall() -> Wall:
    """Reference wall: a closed 4000 x 3000 mm loop, 200 mm thick, 2700 mm high."""
    return wall_from_dict({
        "centerline": [[0, 0], [4000, 0], [4000, 3000], [0, 3000], [0, 0]],
        "thickness": 200,
        "height": 2700,
    })


def walls_from_raw_paths(
    paths: Sequence[RawPath],
    thickness: float = DEFAULT_THICKNESS,
    height: float = DEFAULT_HEIGHT,
) -> List[Wall]:
    """
    Turn simplified raw paths into walls of uniform thickness and height.

    Paths that no longer form a valid centerline (fewer than two distinct
    points after simplification) are skipped with a warning.
    """
    walls: List[Wall] = []
    for i, path in enumerate(paths):
        try:
            centerline = Polyline.from_points(list(path.points), closed=path.closed)
        except MalformedInputError as e:
            logger.warning(f"Skipping path {i}: {e.message}")
            continue
        walls.append(_make_wall(centerline, thickness, height, None))

    logger.debug(f"Built {len(walls)} walls from {len(paths)} paths")
    return walls
