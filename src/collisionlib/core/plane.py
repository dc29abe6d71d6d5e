"""
Plane

Signed half-space stored as a normal and an offset.

Plane equation: dot(normal, p) + offset = 0. Points with a positive
signed distance lie in front of the plane, negative behind it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from pyrr import Vector3

from ..config import settings
from .tolerance import as_vector3, close_enough, vectors_close


class DegenerateGeometryError(ValueError):
    """Raised for degenerate input when DEBUG_GEOMETRY_CHECKS is enabled."""


def signed_distance(plane: "Plane", point) -> float:
    """
    Evaluate the plane equation at a point.

    Returns:
        > 0 if the point lies in front of the plane
        < 0 if the point lies behind the plane
          0 if the point lies on the plane
    """
    n = plane.normal
    return float(n[0] * point[0] + n[1] * point[1] + n[2] * point[2] + plane.offset)


@dataclass(slots=True, eq=False)
class Plane:
    """
    Plane with normal (a, b, c) and offset d.

    The raw constructor keeps the coefficients as given. The point/normal
    and three-point constructors always normalize.
    """

    normal: Vector3 = field(default_factory=lambda: Vector3([0.0, 0.0, 0.0]))
    offset: float = 0.0

    def __post_init__(self):
        self.normal = as_vector3(self.normal)
        self.offset = float(self.offset)

    @classmethod
    def from_coefficients(cls, a: float, b: float, c: float, d: float) -> "Plane":
        """Plane ax + by + cz + d = 0, not normalized."""
        return cls(Vector3([a, b, c]), d)

    @classmethod
    def from_point_normal(cls, point, normal) -> "Plane":
        """
        Plane through a point with the given normal.

        Args:
            point: Any point on the plane
            normal: Plane normal (need not be unit length)

        Returns:
            Normalized plane
        """
        plane = cls()
        plane.set_from_point_normal(point, normal)
        return plane

    @classmethod
    def from_points(cls, p1, p2, p3) -> "Plane":
        """
        Plane through three non-collinear points.

        The normal is cross(p2 - p1, p3 - p1), so counter-clockwise winding
        seen from the front. Collinear points leave a zero-length normal.
        """
        plane = cls()
        plane.set_from_points(p1, p2, p3)
        return plane

    def set(self, a: float, b: float, c: float, d: float) -> None:
        """Overwrite all four coefficients without normalizing."""
        self.normal = Vector3([float(a), float(b), float(c)])
        self.offset = float(d)

    def set_from_point_normal(self, point, normal) -> None:
        point = as_vector3(point)
        normal = as_vector3(normal)
        self.set(normal[0], normal[1], normal[2], -float(np.dot(normal, point)))
        self.normalize()

    def set_from_points(self, p1, p2, p3) -> None:
        p1 = as_vector3(p1)
        p2 = as_vector3(p2)
        p3 = as_vector3(p3)
        self.normal = Vector3(np.cross(p2 - p1, p3 - p1))
        self.offset = -float(np.dot(self.normal, p1))
        self.normalize()

    def normalize(self) -> None:
        """
        Scale normal and offset so that |normal| == 1.

        A zero-length normal is an unchecked precondition: the result is
        non-finite unless DEBUG_GEOMETRY_CHECKS is enabled.
        """
        length = float(np.linalg.norm(self.normal))
        if length == 0.0 and settings.DEBUG_GEOMETRY_CHECKS:
            raise DegenerateGeometryError("Cannot normalize a plane with a zero-length normal")
        with np.errstate(divide="ignore", invalid="ignore"):
            inv_length = np.float64(1.0) / np.float64(length)
            self.normal = Vector3(self.normal * inv_length)
            self.offset = float(self.offset * inv_length)

    def normalized(self) -> "Plane":
        """Return a normalized copy, leaving this plane untouched."""
        plane = Plane(self.normal.copy(), self.offset)
        plane.normalize()
        return plane

    def signed_distance(self, point) -> float:
        """Signed distance from the plane to a point (see module function)."""
        return signed_distance(self, point)

    def __eq__(self, other):
        if not isinstance(other, Plane):
            return NotImplemented
        return vectors_close(self.normal, other.normal) and close_enough(self.offset, other.offset)
