"""
Footprint extrusion into a 3D wall volume.

Lifts a 2D footprint into a prism: a bottom cap at z=0, a top cap at
z=height and one rectangular side face per footprint edge. All faces are
wound counter-clockwise when seen from outside, so their normals point out
of the solid whatever the footprint's own winding.
"""

from typing import Any, List, Sequence, Union

from loguru import logger
from pydantic import ValidationError

from d25d.core.exceptions import GeometryError, MalformedInputError, ZeroAreaFootprintError
from d25d.core.geometry_utils import newell_normal
from d25d.core.models import Face, FaceStyle, Footprint, Point2D, Point3D, WallVolume


UP = Point3D(x=0.0, y=0.0, z=1.0)
DOWN = Point3D(x=0.0, y=0.0, z=-1.0)


def _as_footprint(footprint: Union[Footprint, Sequence[Any]]) -> Footprint:
    if isinstance(footprint, Footprint):
        return footprint
    try:
        return Footprint(points=tuple(Point2D.coerce(p) for p in footprint))
    except ValidationError as e:
        raise MalformedInputError("Footprint must have at least 3 vertices") from e


def _side_face(vertices: List[Point3D]) -> Face:
    normal = newell_normal([v.as_tuple() for v in vertices])
    if normal is None:
        raise GeometryError(
            "Side face is degenerate",
            {"vertices": str([v.as_tuple() for v in vertices])},
        )
    return Face(
        vertices=tuple(vertices),
        normal=Point3D(x=normal[0], y=normal[1], z=normal[2]),
        style=FaceStyle.SIDE,
    )


def extrude(footprint: Union[Footprint, Sequence[Any]], height: float) -> WallVolume:
    """
    Extrude a footprint polygon into a wall volume.

    Args:
        footprint: Footprint (or raw points) with non-zero area
        height: Wall height (mm)

    Returns:
        WallVolume with N side faces plus top and bottom caps (N + 2 faces,
        2N distinct vertices) for an N-vertex footprint

    Raises:
        MalformedInputError: If height is not positive or the footprint has < 3 vertices
        ZeroAreaFootprintError: If the footprint has zero area
    """
    footprint = _as_footprint(footprint)

    if not height > 0:
        raise MalformedInputError(
            f"Wall height must be positive, got {height}",
            {"height": str(height)},
        )

    area = footprint.signed_area()
    if area == 0.0:
        raise ZeroAreaFootprintError("Cannot extrude a zero-area footprint")

    # Work on a CCW copy so outward orientation is uniform
    outline = list(footprint.points) if area > 0 else list(reversed(footprint.points))
    n = len(outline)

    bottom = [Point3D(x=p.x, y=p.y, z=0.0) for p in outline]
    top = [Point3D(x=p.x, y=p.y, z=float(height)) for p in outline]

    faces: List[Face] = [
        Face(vertices=tuple(reversed(bottom)), normal=DOWN, style=FaceStyle.BOTTOM)
    ]

    for i in range(n):
        j = (i + 1) % n
        faces.append(_side_face([bottom[i], bottom[j], top[j], top[i]]))

    faces.append(Face(vertices=tuple(top), normal=UP, style=FaceStyle.TOP))

    logger.debug(f"Extruded {n}-vertex footprint to {height}mm: {len(faces)} faces")

    return WallVolume(faces=tuple(faces), footprint=footprint, height=float(height))
