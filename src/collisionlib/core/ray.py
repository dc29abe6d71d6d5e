"""
Ray Intersection

Half-line (t >= 0) tests against spheres, axis-aligned boxes, planes and
compound bounding volumes. Used for picking and collision queries.

The direction does not need to be unit length; every test stays correct
for scaled directions, so a segment p1 -> p2 can be passed as
Ray(p1, p2 - p1).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np
from pyrr import Vector3

from .bounds import BoundingBox, BoundingSphere, BoundingVolume
from .plane import Plane
from .tolerance import as_vector3, close_enough

_Vec = Tuple[float, float, float]


class PlaneIntersection(NamedTuple):
    """Ray parameter and point where a ray meets a plane."""

    t: float
    point: Vector3


# ============================================================================
# Ray / box octant tests
# ============================================================================
#
# Mahovsky and Wyvill, "Fast Ray-Axis Aligned Bounding Box Overlap Tests
# with Plucker Coordinates", Journal of Graphics Tools 9(1):35-46.
#
# One function per sign pattern of the direction (M = negative,
# P = non-negative, in x/y/z order). Each rejects origins on the far side
# of the box, then runs six side tests of the ray against the box
# silhouette edges. Side tests use strict comparisons, so the handling of
# rays grazing an edge differs slightly between octants.

def _hit_mmm(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] < lo[0] or o[1] < lo[1] or o[2] < lo[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * ya - dy * xb < 0.0
        or dx * yb - dy * xa > 0.0
        or dx * zb - dz * xa > 0.0
        or dx * za - dz * xb < 0.0
        or dy * za - dz * yb < 0.0
        or dy * zb - dz * ya > 0.0
    )


def _hit_mmp(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] < lo[0] or o[1] < lo[1] or o[2] > hi[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * ya - dy * xb < 0.0
        or dx * yb - dy * xa > 0.0
        or dx * zb - dz * xb > 0.0
        or dx * za - dz * xa < 0.0
        or dy * za - dz * ya < 0.0
        or dy * zb - dz * yb > 0.0
    )


def _hit_mpm(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] < lo[0] or o[1] > hi[1] or o[2] < lo[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * ya - dy * xa < 0.0
        or dx * yb - dy * xb > 0.0
        or dx * zb - dz * xa > 0.0
        or dx * za - dz * xb < 0.0
        or dy * zb - dz * yb < 0.0
        or dy * za - dz * ya > 0.0
    )


def _hit_mpp(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] < lo[0] or o[1] > hi[1] or o[2] > hi[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * ya - dy * xa < 0.0
        or dx * yb - dy * xb > 0.0
        or dx * zb - dz * xb > 0.0
        or dx * za - dz * xa < 0.0
        or dy * zb - dz * ya < 0.0
        or dy * za - dz * yb > 0.0
    )


def _hit_pmm(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] > hi[0] or o[1] < lo[1] or o[2] < lo[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * yb - dy * xb < 0.0
        or dx * ya - dy * xa > 0.0
        or dx * za - dz * xa > 0.0
        or dx * zb - dz * xb < 0.0
        or dy * za - dz * yb < 0.0
        or dy * zb - dz * ya > 0.0
    )


def _hit_pmp(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] > hi[0] or o[1] < lo[1] or o[2] > hi[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * yb - dy * xb < 0.0
        or dx * ya - dy * xa > 0.0
        or dx * za - dz * xb > 0.0
        or dx * zb - dz * xa < 0.0
        or dy * za - dz * ya < 0.0
        or dy * zb - dz * yb > 0.0
    )


def _hit_ppm(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] > hi[0] or o[1] > hi[1] or o[2] < lo[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * yb - dy * xa < 0.0
        or dx * ya - dy * xb > 0.0
        or dx * za - dz * xa > 0.0
        or dx * zb - dz * xb < 0.0
        or dy * zb - dz * yb < 0.0
        or dy * za - dz * ya > 0.0
    )


def _hit_ppp(o: _Vec, d: _Vec, lo: _Vec, hi: _Vec) -> bool:
    if o[0] > hi[0] or o[1] > hi[1] or o[2] > hi[2]:
        return False

    xa, ya, za = lo[0] - o[0], lo[1] - o[1], lo[2] - o[2]
    xb, yb, zb = hi[0] - o[0], hi[1] - o[1], hi[2] - o[2]
    dx, dy, dz = d

    return not (
        dx * yb - dy * xa < 0.0
        or dx * ya - dy * xb > 0.0
        or dx * za - dz * xb > 0.0
        or dx * zb - dz * xa < 0.0
        or dy * zb - dz * ya < 0.0
        or dy * za - dz * yb > 0.0
    )


# Indexed by octant_code(): bit 2 = x, bit 1 = y, bit 0 = z (set = non-negative)
OCTANT_TESTS = (
    _hit_mmm,
    _hit_mmp,
    _hit_mpm,
    _hit_mpp,
    _hit_pmm,
    _hit_pmp,
    _hit_ppm,
    _hit_ppp,
)


def octant_code(direction) -> int:
    """3-bit sign code of a direction; a bit is set when the component is >= 0."""
    return (
        (4 if direction[0] >= 0.0 else 0)
        | (2 if direction[1] >= 0.0 else 0)
        | (1 if direction[2] >= 0.0 else 0)
    )


def _floats(v) -> _Vec:
    return float(v[0]), float(v[1]), float(v[2])


@dataclass(slots=True, eq=False)
class Ray:
    """
    Ray with an origin and a (not necessarily unit) direction.

    Intersection tests treat the ray as a half-line starting at the origin.
    """

    origin: Vector3 = field(default_factory=lambda: Vector3([0.0, 0.0, 0.0]))
    direction: Vector3 = field(default_factory=lambda: Vector3([0.0, 0.0, 0.0]))

    def __post_init__(self):
        self.origin = as_vector3(self.origin)
        self.direction = as_vector3(self.direction)

    def point_at(self, t: float) -> Vector3:
        """Point origin + direction * t"""
        return self.origin + self.direction * t

    def intersects_sphere(self, sphere: BoundingSphere) -> bool:
        """
        Test ray intersection with a sphere.

        Scaled by |direction|^2 instead of normalizing, so the test holds
        for any non-zero direction length.
        """
        w = sphere.center - self.origin
        wsq = float(np.dot(w, w))
        proj = float(np.dot(w, self.direction))
        rsq = sphere.radius * sphere.radius

        # Sphere is behind the ray and the origin is outside it
        if proj < 0.0 and wsq > rsq:
            return False

        vsq = float(np.dot(self.direction, self.direction))

        return vsq * wsq - proj * proj <= vsq * rsq

    def intersects_box(self, box: BoundingBox) -> bool:
        """Test ray intersection with an axis-aligned box."""
        d = _floats(self.direction)
        return OCTANT_TESTS[octant_code(d)](_floats(self.origin), d, _floats(box.min), _floats(box.max))

    def intersect_plane(self, plane: Plane) -> Optional[PlaneIntersection]:
        """
        Intersect the ray with a plane.

        Args:
            plane: Plane to test against

        Returns:
            PlaneIntersection(t, point), or None if the ray misses. A ray
            lying in the plane reports t = 0 at its origin.
        """
        denominator = float(np.dot(self.direction, plane.normal))

        # Parallel: only a ray lying in the plane intersects it
        if close_enough(abs(denominator), 0.0):
            if close_enough(plane.signed_distance(self.origin), 0.0):
                return PlaneIntersection(0.0, Vector3(self.origin.copy()))
            return None

        t = -plane.signed_distance(self.origin) / denominator

        if t < 0.0:
            return None

        return PlaneIntersection(t, self.point_at(t))

    def intersects_plane(self, plane: Plane) -> bool:
        """Boolean form of intersect_plane()"""
        return self.intersect_plane(plane) is not None

    def intersects_volume(self, volume: BoundingVolume) -> bool:
        """Sphere test first; the box test only runs when the sphere is hit."""
        return self.intersects_sphere(volume.sphere) and self.intersects_box(volume.box)

    def has_intersected(self, target: Union[BoundingSphere, BoundingBox, BoundingVolume, Plane]) -> bool:
        """
        Test the ray against any supported shape.

        Raises:
            TypeError: if target is not a sphere, box, volume or plane
        """
        if isinstance(target, BoundingSphere):
            return self.intersects_sphere(target)
        if isinstance(target, BoundingBox):
            return self.intersects_box(target)
        if isinstance(target, BoundingVolume):
            return self.intersects_volume(target)
        if isinstance(target, Plane):
            return self.intersects_plane(target)
        raise TypeError(f"Unsupported intersection target: {type(target).__name__}")
