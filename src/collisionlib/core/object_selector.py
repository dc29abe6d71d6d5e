"""
Object Selector - Raycasting and Object Selection

Turns a click on the screen into a pick ray and finds the bounded object
it hits.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

import numpy as np
from pyrr import Matrix44, Vector3

from ..config import settings
from .frustum import ClipDepth
from .ray import Ray
from .scene import BoundedObject

logger = logging.getLogger(__name__)


def ray_from_screen(
    view: Matrix44,
    proj: Matrix44,
    screen_x: float,
    screen_y: float,
    screen_width: int,
    screen_height: int,
    clip_depth: Union[ClipDepth, str, None] = None,
) -> Ray:
    """
    Build a pick ray through a screen position.

    The near-plane point under the cursor is the origin and the direction
    runs to the matching far-plane point, so it is not unit length.

    Args:
        view: Camera view matrix
        proj: Camera projection matrix
        screen_x: Screen X coordinate (0 = left)
        screen_y: Screen Y coordinate (0 = top)
        screen_width: Screen width in pixels
        screen_height: Screen height in pixels
        clip_depth: Depth convention of proj (default: DEFAULT_CLIP_DEPTH)

    Returns:
        Ray from the near plane towards the far plane
    """
    if clip_depth is None:
        clip_depth = settings.DEFAULT_CLIP_DEPTH
    clip_depth = ClipDepth(clip_depth)

    # Convert screen coordinates to normalized device coordinates
    ndc_x = (2.0 * screen_x) / screen_width - 1.0
    ndc_y = 1.0 - (2.0 * screen_y) / screen_height
    near_z = 0.0 if clip_depth is ClipDepth.ZERO_TO_ONE else -1.0

    inverse = np.linalg.inv(np.dot(np.asarray(view, dtype=float), np.asarray(proj, dtype=float)))

    def unproject(ndc_z: float) -> np.ndarray:
        point = np.dot(np.array([ndc_x, ndc_y, ndc_z, 1.0]), inverse)
        return point[:3] / point[3]

    near_point = unproject(near_z)
    far_point = unproject(1.0)

    return Ray(Vector3(near_point), Vector3(far_point - near_point))


class ObjectSelector:
    """Handles raycasting and object selection."""

    def __init__(self, raycast_range: Optional[float] = None):
        """
        Initialize object selector.

        Args:
            raycast_range: Maximum distance for raycasting (default: PICK_RAYCAST_RANGE)
        """
        self.raycast_range = raycast_range if raycast_range is not None else settings.PICK_RAYCAST_RANGE
        self.selected_object: Optional[BoundedObject] = None

    def select_from_screen_position(
        self,
        view: Matrix44,
        proj: Matrix44,
        objects: Iterable[BoundedObject],
        screen_x: float,
        screen_y: float,
        screen_width: int,
        screen_height: int,
        clip_depth: Union[ClipDepth, str, None] = None,
    ) -> Optional[BoundedObject]:
        """
        Select object from screen position using raycasting.

        Returns:
            Selected BoundedObject or None
        """
        ray = ray_from_screen(view, proj, screen_x, screen_y, screen_width, screen_height, clip_depth)
        return self.select_with_ray(ray, objects)

    def select_with_ray(self, ray: Ray, objects: Iterable[BoundedObject]) -> Optional[BoundedObject]:
        """
        Select the closest object whose bounding volume the ray hits.

        Objects are ordered by how far their sphere center projects along
        the ray; objects beyond raycast_range are ignored.

        Args:
            ray: Pick ray
            objects: Candidate objects (hidden ones are skipped)

        Returns:
            Selected BoundedObject or None
        """
        direction_length = float(np.linalg.norm(ray.direction))

        closest_object = None
        closest_distance = float('inf')

        if direction_length > 0.0:
            for obj in objects:
                if not obj.visible:
                    continue

                if not ray.intersects_volume(obj.volume):
                    continue

                to_center = obj.volume.sphere.center - ray.origin
                distance = max(0.0, float(np.dot(to_center, ray.direction)) / direction_length)

                if distance > self.raycast_range:
                    continue

                if distance < closest_distance:
                    closest_distance = distance
                    closest_object = obj

        self.selected_object = closest_object
        if closest_object is not None:
            logger.debug("Selected %s at distance %.3f", closest_object.name, closest_distance)
        return closest_object

    def get_selected_object(self) -> Optional[BoundedObject]:
        """
        Get currently selected object.

        Returns:
            Selected BoundedObject or None
        """
        return self.selected_object

    def deselect(self) -> None:
        """Deselect current object."""
        self.selected_object = None
