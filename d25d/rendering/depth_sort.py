"""
Depth sorting (painter's algorithm).

Orders axonometric faces back to front so nearer faces overpaint farther
ones. The depth key is the face centroid measured along the camera's view
direction; larger values are farther away and are drawn first.
"""

from typing import Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger

from d25d.core.models import AxonFace, Point3D
from d25d.rendering.camera import VIEW_DIRECTION


DEPTH_PRECISION = 6  # decimals kept in the sort key


def face_depth(vertices: Iterable[Point3D], view_direction: Optional[Sequence[float]] = None) -> float:
    """
    Depth of a face: its vertex centroid projected onto the view direction.

    Args:
        vertices: Pre-projection 3D vertices
        view_direction: Unit view vector (camera -> scene); defaults to the fixed camera

    Returns:
        Scalar depth (larger = farther from the camera)
    """
    coords = np.array([v.as_tuple() for v in vertices], dtype=float)
    if coords.size == 0:
        return 0.0

    view = np.asarray(view_direction if view_direction is not None else VIEW_DIRECTION, dtype=float)
    return float(coords.mean(axis=0) @ view)


def depth_key(face: AxonFace) -> float:
    """Sort key with float noise rounded away so equal depths compare equal."""
    return round(face.depth, DEPTH_PRECISION)


def depth_sort(faces: Sequence[AxonFace]) -> List[AxonFace]:
    """
    Sort faces back to front.

    The sort is stable: faces with equal depth keys keep their input order,
    and sorting an already sorted list returns it unchanged.

    Args:
        faces: Axonometric faces from any number of walls

    Returns:
        New list in draw order (farthest first)
    """
    ordered = sorted(faces, key=depth_key, reverse=True)
    logger.debug(f"Depth sorted {len(ordered)} faces")
    return ordered
