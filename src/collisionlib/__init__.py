"""
CollisionLib - Geometric predicates for culling and picking

Bounding volumes, planes, view frustum extraction and containment tests,
and ray intersection tests for a real-time rendering front end.
"""

# Bounding volumes and planes
from .core.bounds import BoundingBox, BoundingSphere, BoundingVolume
from .core.plane import Plane, DegenerateGeometryError, signed_distance

# Frustum culling
from .core.frustum import Frustum, FrustumPlane, ClipDepth
from .core.projection import perspective_projection_zero_to_one
from .core.scene import Scene, BoundedObject

# Ray queries
from .core.ray import Ray, PlaneIntersection
from .core.object_selector import ObjectSelector, ray_from_screen

__version__ = "0.1.0"
__all__ = [
    # Bounds
    "BoundingBox",
    "BoundingSphere",
    "BoundingVolume",
    "Plane",
    "DegenerateGeometryError",
    "signed_distance",
    # Culling
    "Frustum",
    "FrustumPlane",
    "ClipDepth",
    "perspective_projection_zero_to_one",
    "Scene",
    "BoundedObject",
    # Picking
    "Ray",
    "PlaneIntersection",
    "ObjectSelector",
    "ray_from_screen",
]
