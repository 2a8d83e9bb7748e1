"""
DXF export of axonometric drawings.

Writes depth-sorted faces as closed polylines, one layer per face style,
optionally under a solid hatch so the painter's order shows in viewers that
respect entity order. Axonometric y grows downward; DXF y grows upward, so
y is mirrored on export unless told otherwise.
"""

from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import ezdxf
from ezdxf import colors, units
from ezdxf.document import Drawing
from loguru import logger

from d25d.core.models import AxonDrawing, AxonFace, FaceStyle


DEFAULT_LAYERS: Dict[str, str] = {
    FaceStyle.TOP.value: "AXON-TOP",
    FaceStyle.SIDE.value: "AXON-SIDE",
}

# ACI colours: light grey caps, dark grey sides
LAYER_COLORS: Dict[str, int] = {
    FaceStyle.TOP.value: 254,
    FaceStyle.SIDE.value: 8,
}


def _face_list(drawing: Union[AxonDrawing, Sequence[AxonFace]]) -> Sequence[AxonFace]:
    return drawing.faces if isinstance(drawing, AxonDrawing) else drawing


def build_axon_document(
    drawing: Union[AxonDrawing, Sequence[AxonFace]],
    layers: Optional[Dict[str, str]] = None,
    fill: bool = True,
    flip_y: bool = True,
) -> Drawing:
    """
    Build an in-memory DXF document from ordered faces.

    Entities are added in draw order, so the first face in the list is the
    first entity in modelspace.

    Args:
        drawing: AxonDrawing or depth-sorted AxonFaces
        layers: Face style -> layer name (defaults to AXON-TOP / AXON-SIDE)
        fill: Add a solid hatch under each outline
        flip_y: Mirror y so the drawing reads upright in CAD

    Returns:
        ezdxf Drawing
    """
    layer_names = dict(DEFAULT_LAYERS)
    if layers:
        layer_names.update(layers)

    doc = ezdxf.new("R2010")
    doc.units = units.MM
    for style, name in layer_names.items():
        if name not in doc.layers:
            doc.layers.add(name, color=LAYER_COLORS.get(style, 7))

    msp = doc.modelspace()
    sign = -1.0 if flip_y else 1.0
    faces = _face_list(drawing)

    for face in faces:
        style = face.style.value
        layer = layer_names.get(style)
        if layer is None:
            layer = f"AXON-{style.upper()}"
            if layer not in doc.layers:
                doc.layers.add(layer)

        points = [(p.x, p.y * sign) for p in face.points]
        if fill:
            hatch = msp.add_hatch(color=colors.BYLAYER, dxfattribs={"layer": layer})
            hatch.paths.add_polyline_path(points, is_closed=True)
        msp.add_lwpolyline(points, close=True, dxfattribs={"layer": layer})

    logger.debug(f"Built DXF document with {len(faces)} faces")
    return doc


def write_axon_dxf(
    drawing: Union[AxonDrawing, Sequence[AxonFace]],
    file_path: Union[str, Path],
    layers: Optional[Dict[str, str]] = None,
    fill: bool = True,
    flip_y: bool = True,
) -> Path:
    """
    Write ordered faces to a DXF file.

    Args:
        drawing: AxonDrawing or depth-sorted AxonFaces
        file_path: Output path
        layers: Face style -> layer name
        fill: Add a solid hatch under each outline
        flip_y: Mirror y so the drawing reads upright in CAD

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    doc = build_axon_document(drawing, layers=layers, fill=fill, flip_y=flip_y)
    doc.saveas(str(file_path))

    logger.success(f"DXF exported: {file_path}")
    return file_path
