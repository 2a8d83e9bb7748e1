"""
Per-wall pipeline and scene assembly.

Each wall runs offset -> footprint -> extrude -> cull -> project on its own.
Walls never share state, so they can be fanned out over a thread pool; the
only cross-wall step is the final depth sort over the concatenated faces.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger

from d25d.core.exceptions import AxonError
from d25d.core.models import AxonDrawing, AxonFace, Wall, WallResult, WallVolume
from d25d.geometry.extruder import extrude
from d25d.geometry.footprint import build_footprint
from d25d.geometry.offsetter import DEFAULT_MITER_LIMIT, offset_polyline
from d25d.rendering.culling import cull_faces
from d25d.rendering.depth_sort import depth_sort
from d25d.rendering.projection import project_faces
from d25d.topology.convert import wall_from_dict


WallInput = Union[Wall, Dict[str, Any]]


def build_wall_volume(wall: Wall, miter_limit: float = DEFAULT_MITER_LIMIT) -> WallVolume:
    """
    Run the geometric stages for one wall (offset, footprint, extrude).

    Args:
        wall: Wall to build
        miter_limit: Maximum miter length relative to half the thickness

    Returns:
        WallVolume with all faces, before culling

    Raises:
        AxonError: If any stage rejects the wall
    """
    pair = offset_polyline(wall.centerline, wall.thickness, miter_limit)
    footprint = build_footprint(pair.left, pair.right)
    return extrude(footprint, wall.height)


def process_wall(
    wall: Wall,
    wall_index: Optional[int] = None,
    miter_limit: float = DEFAULT_MITER_LIMIT,
) -> List[AxonFace]:
    """
    Turn one wall into its visible axonometric faces.

    The faces are not depth sorted; ordering is decided once for the whole
    scene in process_walls.

    Args:
        wall: Wall to process
        wall_index: Index recorded on every produced face
        miter_limit: Maximum miter length relative to half the thickness

    Returns:
        Visible AxonFaces in extrusion order

    Raises:
        AxonError: If any stage rejects the wall
    """
    volume = build_wall_volume(wall, miter_limit)
    visible = cull_faces(volume.faces)
    return project_faces(visible, wall_index)


def _run_wall(index: int, wall: WallInput, miter_limit: float) -> WallResult:
    try:
        if not isinstance(wall, Wall):
            wall = wall_from_dict(wall)
        faces = process_wall(wall, index, miter_limit)
    except AxonError as e:
        logger.error(f"Wall {index} failed ({type(e).__name__}): {e.message}")
        return WallResult(wall_index=index, error=e.message, error_type=type(e).__name__)

    logger.debug(f"Wall {index}: {len(faces)} visible faces")
    return WallResult(wall_index=index, faces=tuple(faces))


def process_walls(
    walls: Iterable[WallInput],
    max_workers: Optional[int] = None,
    miter_limit: float = DEFAULT_MITER_LIMIT,
) -> AxonDrawing:
    """
    Process a set of walls into one depth-ordered drawing.

    A wall that raises an AxonError is logged and recorded as failed; its
    siblings are still drawn. Any other exception propagates.

    Args:
        walls: Wall models or wall dicts ({centerline, thickness, height, closed?})
        max_workers: Thread pool size; None or 1 runs sequentially
        miter_limit: Maximum miter length relative to half the thickness

    Returns:
        AxonDrawing with faces in draw order (farthest first) and one
        WallResult per input wall, in input order
    """
    walls = list(walls)
    logger.info(f"Processing {len(walls)} walls")

    if max_workers is not None and max_workers > 1 and len(walls) > 1:
        by_index: Dict[int, WallResult] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_run_wall, i, wall, miter_limit)
                for i, wall in enumerate(walls)
            ]
            for future in as_completed(futures):
                result = future.result()
                by_index[result.wall_index] = result
        results = [by_index[i] for i in range(len(walls))]
    else:
        results = [_run_wall(i, wall, miter_limit) for i, wall in enumerate(walls)]

    faces = depth_sort([face for result in results for face in result.faces])
    drawing = AxonDrawing(faces=faces, results=results)

    failed = len(drawing.failed_walls)
    if failed:
        logger.warning(f"{failed} of {len(walls)} walls skipped")
    logger.success(f"Drew {len(faces)} faces from {len(walls) - failed} walls")

    return drawing


def render_walls(walls: Iterable[WallInput], max_workers: Optional[int] = None) -> List[Dict[str, Any]]:
    """Process walls and return the ordered ``{points, style}`` face dicts."""
    return process_walls(walls, max_workers=max_workers).to_dicts()
