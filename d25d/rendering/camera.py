"""
Fixed axonometric camera.

Two 30 degree axes plus a vertical compression factor. The view direction is
not an independent setting: it is the direction the projection collapses to
a single point, so culling, depth sorting and projection always agree.
"""

import math

import numpy as np

ISO_ANGLE = math.pi / 6  # 30 degrees
HEIGHT_SCALE = 0.6  # reduces vertical stretch

COS_ISO = math.cos(ISO_ANGLE)
SIN_ISO = math.sin(ISO_ANGLE)


def _view_direction() -> np.ndarray:
    # (1, 1, 2 sin30 / k) projects to the origin; the camera sits on its positive side
    toward_camera = np.array([1.0, 1.0, 2.0 * SIN_ISO / HEIGHT_SCALE])
    return -toward_camera / np.linalg.norm(toward_camera)


# Unit vector from the camera into the scene
VIEW_DIRECTION = tuple(float(c) for c in _view_direction())
