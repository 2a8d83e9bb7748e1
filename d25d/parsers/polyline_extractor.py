"""
Raw path extraction from DXF files.

Reads LWPOLYLINE and POLYLINE entities as ``{points, closed}`` raw paths,
the same shape the vectoriser hands to the path simplifier.
"""

from pathlib import Path
from typing import List, Optional, Union

import ezdxf
from ezdxf.document import Drawing
from loguru import logger

from d25d.core.models import RawPath


def _strip_closing_point(points: List[tuple], closed: bool) -> List[tuple]:
    # Some writers repeat the first vertex on closed polylines
    if closed and len(points) > 1 and points[0] == points[-1]:
        return points[:-1]
    return points


def extract_raw_paths(
    doc: Drawing,
    layers: Optional[List[str]] = None,
    min_points: int = 2,
) -> List[RawPath]:
    """
    Extract polylines from a DXF document as raw paths.

    Args:
        doc: ezdxf Drawing object
        layers: Layer names to extract from (None = all layers)
        min_points: Minimum number of vertices to keep a polyline

    Returns:
        List of RawPath in modelspace order (LWPOLYLINE first, then POLYLINE)
    """
    msp = doc.modelspace()
    paths: List[RawPath] = []

    for entity in msp.query("LWPOLYLINE"):
        if layers and entity.dxf.layer not in layers:
            continue

        closed = bool(entity.closed)
        points = _strip_closing_point([(p[0], p[1]) for p in entity.get_points("xy")], closed)
        if len(points) < min_points:
            continue

        paths.append(RawPath(points=points, closed=closed))

    for entity in msp.query("POLYLINE"):
        if layers and entity.dxf.layer not in layers:
            continue

        closed = bool(entity.is_closed)
        points = _strip_closing_point(
            [(v.dxf.location.x, v.dxf.location.y) for v in entity.vertices],
            closed,
        )
        if len(points) < min_points:
            continue

        paths.append(RawPath(points=points, closed=closed))

    logger.debug(
        f"Extracted {len(paths)} paths "
        f"from {len(layers) if layers else 'all'} layer(s)"
    )

    return paths


def read_raw_paths(file_path: Union[str, Path], layers: Optional[List[str]] = None) -> List[RawPath]:
    """
    Read a DXF file and extract its polylines as raw paths.

    Raises:
        FileNotFoundError: If the DXF file doesn't exist
        ezdxf.DXFError: If the file is not valid DXF
    """
    file_path = Path(file_path)
    logger.info(f"Reading DXF file: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"DXF file not found: {file_path}")

    try:
        doc = ezdxf.readfile(str(file_path))
    except ezdxf.DXFError as e:
        logger.error(f"Failed to parse DXF file: {e}")
        raise

    return extract_raw_paths(doc, layers)
