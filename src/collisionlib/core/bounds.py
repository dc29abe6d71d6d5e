"""
Bounding Volumes

Axis-aligned boxes, spheres and the compound volume pairing one of each.
Scene code builds these from geometry; the frustum and ray tests consume them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np
from pyrr import Vector3

from .tolerance import as_vector3, close_enough, vectors_close


def _origin() -> Vector3:
    return Vector3([0.0, 0.0, 0.0])


@dataclass(slots=True, eq=False)
class BoundingBox:
    """
    Axis-aligned box given by its min and max corners.

    ``min <= max`` component-wise is the caller's responsibility.
    """

    min: Vector3 = field(default_factory=_origin)
    max: Vector3 = field(default_factory=_origin)

    def __post_init__(self):
        self.min = as_vector3(self.min)
        self.max = as_vector3(self.max)

    @classmethod
    def from_points(cls, points: Iterable[Iterable[float]]) -> "BoundingBox":
        """
        Build the tightest box around a set of points.

        Args:
            points: Iterable of 3-component points (at least one)

        Returns:
            BoundingBox enclosing every point
        """
        data = np.asarray(list(points), dtype=float).reshape(-1, 3)
        if data.shape[0] == 0:
            raise ValueError("Cannot build a bounding box from zero points")
        return cls(data.min(axis=0), data.max(axis=0))

    @property
    def center(self) -> Vector3:
        """Midpoint of the box"""
        return (self.min + self.max) * 0.5

    @property
    def size(self) -> float:
        """Length of the box diagonal"""
        return float(np.linalg.norm(self.max - self.min))

    @property
    def radius(self) -> float:
        """Half the diagonal length"""
        return self.size * 0.5

    def corners(self) -> List[tuple]:
        """Return the 8 corners as (x, y, z) float tuples."""
        x0, y0, z0 = float(self.min[0]), float(self.min[1]), float(self.min[2])
        x1, y1, z1 = float(self.max[0]), float(self.max[1]), float(self.max[2])
        return [
            (x0, y0, z0),
            (x1, y0, z0),
            (x0, y1, z0),
            (x1, y1, z0),
            (x0, y0, z1),
            (x1, y0, z1),
            (x0, y1, z1),
            (x1, y1, z1),
        ]

    def __eq__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return vectors_close(self.min, other.min) and vectors_close(self.max, other.max)


@dataclass(slots=True, eq=False)
class BoundingSphere:
    """Sphere given by a center and a non-negative radius."""

    center: Vector3 = field(default_factory=_origin)
    radius: float = 0.0

    def __post_init__(self):
        self.center = as_vector3(self.center)
        self.radius = float(self.radius)

    @classmethod
    def from_box(cls, box: BoundingBox) -> "BoundingSphere":
        """Sphere sharing the box center, with half the box diagonal as radius."""
        return cls(box.center, box.radius)

    def has_collided(self, other: "BoundingSphere") -> bool:
        """
        Test if two spheres overlap.

        Touching spheres (distance exactly equal to the sum of radii)
        do not count as collided.
        """
        dx = float(other.center[0] - self.center[0])
        dy = float(other.center[1] - self.center[1])
        dz = float(other.center[2] - self.center[2])
        length_sq = dx * dx + dy * dy + dz * dz
        radii = other.radius + self.radius
        return length_sq < radii * radii

    def __eq__(self, other):
        if not isinstance(other, BoundingSphere):
            return NotImplemented
        return vectors_close(self.center, other.center) and close_enough(self.radius, other.radius)


@dataclass(slots=True, eq=False)
class BoundingVolume:
    """
    A box and a sphere describing the same object.

    Used as a two-stage test unit: the sphere rejects cheaply, the box
    gives the tighter answer. Nothing keeps the two extents consistent.
    """

    box: BoundingBox = field(default_factory=BoundingBox)
    sphere: BoundingSphere = field(default_factory=BoundingSphere)

    @classmethod
    def from_points(cls, points: Iterable[Iterable[float]]) -> "BoundingVolume":
        """
        Build a box and a box-centred sphere around a set of points.

        The sphere radius is the distance to the furthest point, which is
        never larger than the box radius.
        """
        data = np.asarray(list(points), dtype=float).reshape(-1, 3)
        box = BoundingBox.from_points(data)
        center = np.asarray(box.center, dtype=float)
        radius = float(np.max(np.linalg.norm(data - center, axis=1)))
        return cls(box, BoundingSphere(center, radius))

    def __eq__(self, other):
        if not isinstance(other, BoundingVolume):
            return NotImplemented
        return self.box == other.box and self.sphere == other.sphere
