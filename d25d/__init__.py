"""
2D25D - Wall Centerlines to Axonometric Drawings

Turns 2D wall centerlines into depth-ordered 2.5D axonometric faces.
"""

__version__ = "0.1.0"

from d25d.simplification.path_simplifier import simplify, douglas_peucker, equalize_path_direction
from d25d.geometry.offsetter import offset_polyline
from d25d.geometry.footprint import build_footprint
from d25d.geometry.extruder import extrude
from d25d.rendering.culling import cull_faces
from d25d.rendering.projection import project
from d25d.rendering.depth_sort import depth_sort
from d25d.pipeline.wall_pipeline import process_wall, process_walls
from d25d.export.dxf_writer import write_axon_dxf

__all__ = [
    "simplify",
    "douglas_peucker",
    "equalize_path_direction",
    "offset_polyline",
    "build_footprint",
    "extrude",
    "cull_faces",
    "project",
    "depth_sort",
    "process_wall",
    "process_walls",
    "write_axon_dxf",
]
