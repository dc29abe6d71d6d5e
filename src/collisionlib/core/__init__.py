"""Core geometric predicates"""
from .bounds import BoundingBox, BoundingSphere, BoundingVolume
from .plane import Plane, DegenerateGeometryError, signed_distance
from .frustum import Frustum, FrustumPlane, ClipDepth
from .projection import perspective_projection_zero_to_one
from .ray import Ray, PlaneIntersection, octant_code
from .scene import Scene, BoundedObject
from .object_selector import ObjectSelector, ray_from_screen

__all__ = [
    "BoundingBox",
    "BoundingSphere",
    "BoundingVolume",
    "Plane",
    "DegenerateGeometryError",
    "signed_distance",
    "Frustum",
    "FrustumPlane",
    "ClipDepth",
    "perspective_projection_zero_to_one",
    "Ray",
    "PlaneIntersection",
    "octant_code",
    "Scene",
    "BoundedObject",
    "ObjectSelector",
    "ray_from_screen",
]
