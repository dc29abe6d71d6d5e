"""
Projection Helpers

pyrr only builds OpenGL-style projections (clip depth -1..1). Frustum
extraction defaults to a 0..1 clip depth, so the matching perspective
matrix lives here.
"""

import math

import numpy as np
from pyrr import Matrix44


def perspective_projection_zero_to_one(fovy: float, aspect: float, near: float, far: float) -> Matrix44:
    """
    Right-handed perspective projection mapping view depth near..far to clip depth 0..1.

    Uses the same row-vector layout as pyrr (translation and perspective terms
    in row 3), so it composes with Matrix44.look_at().

    Args:
        fovy: Vertical field of view in degrees
        aspect: Viewport width / height
        near: Distance to the near plane (> 0)
        far: Distance to the far plane (> near)

    Returns:
        4x4 projection matrix
    """
    ymax = 1.0 / math.tan(math.radians(fovy) * 0.5)
    xmax = ymax / aspect
    depth = far / (near - far)

    return Matrix44(np.array([
        [xmax, 0.0, 0.0, 0.0],
        [0.0, ymax, 0.0, 0.0],
        [0.0, 0.0, depth, -1.0],
        [0.0, 0.0, near * depth, 0.0],
    ], dtype=float))
