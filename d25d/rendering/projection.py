"""
Axonometric projection.

The single canonical 3D -> 2D transform of the system:

    x' = (x - y) * cos(30)
    y' = (x + y) * sin(30) - z * HEIGHT_SCALE

Every caller that needs 2D drawing coordinates goes through this module.
Projection never mutates its argument and always returns new objects.
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from d25d.core.models import AxonFace, Face, Point2D, Point3D
from d25d.rendering.camera import COS_ISO, HEIGHT_SCALE, SIN_ISO
from d25d.rendering.depth_sort import face_depth


def project_xyz(x: float, y: float, z: float) -> Point2D:
    """Project world coordinates (mm) to axonometric 2D."""
    return Point2D(
        x=(x - y) * COS_ISO,
        y=(x + y) * SIN_ISO - z * HEIGHT_SCALE,
    )


def project(point: Any) -> Point2D:
    """
    Project a 3D point to 2D axonometric space.

    Args:
        point: Point3D, ``{x, y, z}`` mapping or ``(x, y, z)`` sequence

    Returns:
        New Point2D (the argument is only read)
    """
    p = Point3D.coerce(point)
    return project_xyz(p.x, p.y, p.z)


def project_points(points: Any) -> np.ndarray:
    """
    Project many points at once.

    Uses the same per-coordinate arithmetic as project_xyz, so batch and
    single-point results are identical.

    Args:
        points: (N, 3) array-like of x, y, z

    Returns:
        New (N, 2) float array
    """
    coords = np.array(points, dtype=float).reshape(-1, 3)
    result = np.empty((coords.shape[0], 2), dtype=float)
    result[:, 0] = (coords[:, 0] - coords[:, 1]) * COS_ISO
    result[:, 1] = (coords[:, 0] + coords[:, 1]) * SIN_ISO - coords[:, 2] * HEIGHT_SCALE
    return result


def project_face(face: Face, wall_index: Optional[int] = None) -> AxonFace:
    """
    Project a 3D face into an AxonFace carrying its depth key.

    Args:
        face: Face to project
        wall_index: Index of the wall the face came from, if known

    Returns:
        AxonFace with projected points, depth, style and normal
    """
    return AxonFace(
        points=tuple(project(v) for v in face.vertices),
        depth=face_depth(face.vertices),
        style=face.style,
        normal=face.normal,
        wall_index=wall_index,
    )


def project_faces(faces: Sequence[Face], wall_index: Optional[int] = None) -> List[AxonFace]:
    """Project every face, keeping input order."""
    return [project_face(face, wall_index) for face in faces]
