"""
Hidden face culling for the fixed axonometric view.

Bottom caps can never be seen from above the horizon and are always dropped.
A side face stays as long as its footprint edge projects to a real segment;
the depth sort takes care of side faces that point away. Any other face is
kept only when its outward normal faces the camera.
"""

from typing import List, Optional, Sequence

from loguru import logger

from d25d.core.geometry_utils import dot3
from d25d.core.models import Face, FaceStyle
from d25d.rendering.camera import VIEW_DIRECTION
from d25d.rendering.projection import project


DEGENERATE_EDGE_LENGTH = 1e-6  # mm


def projected_edge_length(face: Face) -> float:
    """Length of the face's first edge (its footprint edge for side faces) after projection."""
    a = project(face.vertices[0])
    b = project(face.vertices[1])
    return a.distance_to(b)


def is_visible(face: Face, view_direction: Sequence[float] = VIEW_DIRECTION) -> bool:
    """
    Check whether a single face survives culling.

    Args:
        face: Face with outward normal
        view_direction: Camera -> scene unit vector

    Returns:
        True if the face should be drawn
    """
    if face.style == FaceStyle.BOTTOM:
        return False

    if face.style == FaceStyle.SIDE:
        return projected_edge_length(face) > DEGENERATE_EDGE_LENGTH

    return dot3(face.normal.as_tuple(), view_direction) < 0


def cull_faces(faces: Sequence[Face], view_direction: Optional[Sequence[float]] = None) -> List[Face]:
    """
    Drop faces that cannot be seen from the camera.

    Args:
        faces: Faces to cull
        view_direction: Override for the fixed camera -> scene direction

    Returns:
        Visible faces, in their original order
    """
    view = tuple(view_direction) if view_direction is not None else VIEW_DIRECTION
    visible = [face for face in faces if is_visible(face, view)]

    dropped = len(faces) - len(visible)
    if dropped:
        logger.debug(f"Culled {dropped} of {len(faces)} faces")

    return visible
