"""
Frustum Culling

Extracts view frustum planes from camera view and projection matrices.
Used for culling objects outside camera view.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import List, Optional, Union

import numpy as np
from pyrr import Matrix44

from ..config import settings
from .bounds import BoundingBox, BoundingSphere, BoundingVolume
from .plane import Plane


class FrustumPlane(IntEnum):
    """Slot of each clipping plane in Frustum.planes"""

    LEFT = 0
    RIGHT = 1
    BOTTOM = 2
    TOP = 3
    NEAR = 4
    FAR = 5


class ClipDepth(Enum):
    """Clip-space depth range produced by the projection matrix."""

    ZERO_TO_ONE = "zero_to_one"
    NEGATIVE_ONE_TO_ONE = "negative_one_to_one"


def _as_matrix(value, name: str) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 {name} matrix, got shape {matrix.shape}")
    return matrix


class Frustum:
    """
    View frustum defined by 6 planes.

    Planes are extracted from the view and projection matrices with their
    normals pointing into the frustum, so the positive half-space of every
    plane is the inside. Re-extract whenever the camera changes.
    """

    def __init__(self, planes: Optional[List[Plane]] = None):
        """
        Args:
            planes: Six planes in FrustumPlane order (default: all zero planes).
                The frustum keeps its own copies.
        """
        if planes is None:
            planes = [Plane() for _ in FrustumPlane]
        if len(planes) != len(FrustumPlane):
            raise ValueError(f"A frustum needs exactly 6 planes, got {len(planes)}")
        self.planes: List[Plane] = [Plane(plane.normal.copy(), plane.offset) for plane in planes]

    @classmethod
    def from_matrices(cls, view: Matrix44, proj: Matrix44,
                      clip_depth: Union[ClipDepth, str, None] = None) -> "Frustum":
        """Build a frustum from separate view and projection matrices."""
        frustum = cls()
        frustum.extract_planes(view, proj, clip_depth)
        return frustum

    @classmethod
    def from_view_projection(cls, view_projection: Matrix44,
                             clip_depth: Union[ClipDepth, str, None] = None) -> "Frustum":
        """
        Build a frustum from an already combined view-projection matrix.

        Args:
            view_projection: view * proj in pyrr's row-vector layout
            clip_depth: Depth convention of the projection
        """
        frustum = cls()
        frustum._extract_from_combined(_as_matrix(view_projection, "view-projection"), clip_depth)
        return frustum

    def __getitem__(self, index: FrustumPlane) -> Plane:
        return self.planes[index]

    def extract_planes(self, view: Matrix44, proj: Matrix44,
                       clip_depth: Union[ClipDepth, str, None] = None) -> None:
        """
        Extract the 6 frustum planes (Gribb/Hartmann).

        Args:
            view: Camera view matrix
            proj: Camera projection matrix
            clip_depth: Depth convention of proj (default: DEFAULT_CLIP_DEPTH)
        """
        combined = np.dot(_as_matrix(view, "view"), _as_matrix(proj, "projection"))
        self._extract_from_combined(combined, clip_depth)

    def _extract_from_combined(self, vp: np.ndarray, clip_depth) -> None:
        if clip_depth is None:
            clip_depth = settings.DEFAULT_CLIP_DEPTH
        clip_depth = ClipDepth(clip_depth)

        # pyrr matrices are row-vector (translation in row 3); transpose so
        # row 3 is the homogeneous w row used by the extraction
        m = vp.T

        self._set_plane(FrustumPlane.LEFT, m[3] + m[0])
        self._set_plane(FrustumPlane.RIGHT, m[3] - m[0])
        self._set_plane(FrustumPlane.TOP, m[3] - m[1])
        self._set_plane(FrustumPlane.BOTTOM, m[3] + m[1])

        if clip_depth is ClipDepth.ZERO_TO_ONE:
            self._set_plane(FrustumPlane.NEAR, m[2])
        else:
            self._set_plane(FrustumPlane.NEAR, m[3] + m[2])

        self._set_plane(FrustumPlane.FAR, m[3] - m[2])

    def _set_plane(self, slot: FrustumPlane, coefficients: np.ndarray) -> None:
        plane = self.planes[slot]
        plane.set(coefficients[0], coefficients[1], coefficients[2], coefficients[3])
        plane.normalize()

    def point_in_frustum(self, point) -> bool:
        """
        Test if a point is inside the frustum.

        A point exactly on a clipping plane counts as outside.
        """
        for plane in self.planes:
            n = plane.normal
            if n[0] * point[0] + n[1] * point[1] + n[2] * point[2] + plane.offset <= 0.0:
                return False
        return True

    def sphere_in_frustum(self, sphere: BoundingSphere) -> bool:
        """
        Test if a sphere is inside or intersects the frustum.

        A sphere that only touches a plane from outside counts as outside.
        """
        center = sphere.center
        radius = sphere.radius
        for plane in self.planes:
            n = plane.normal
            distance = n[0] * center[0] + n[1] * center[1] + n[2] * center[2] + plane.offset
            if distance <= -radius:
                return False
        return True

    def box_in_frustum(self, box: BoundingBox) -> bool:
        """
        Test if a box is inside or intersects the frustum.

        The box is rejected only when all 8 corners lie behind a single
        plane. Boxes outside the frustum near its edges, where no one plane
        excludes every corner, are reported as inside: false positives are
        possible, false negatives are not.
        """
        corners = box.corners()
        for plane in self.planes:
            a, b, c = float(plane.normal[0]), float(plane.normal[1]), float(plane.normal[2])
            d = plane.offset
            for x, y, z in corners:
                if a * x + b * y + c * z + d > 0.0:
                    break
            else:
                return False
        return True

    def volume_in_frustum(self, volume: BoundingVolume) -> bool:
        """Sphere test first; the box test only runs for spheres that pass."""
        return self.sphere_in_frustum(volume.sphere) and self.box_in_frustum(volume.box)
