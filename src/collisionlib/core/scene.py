"""
Scene Culling

Holds bounded objects and runs frustum culling passes over them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import settings
from .bounds import BoundingVolume
from .frustum import Frustum

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class BoundedObject:
    """
    An object known to the culling and picking passes only by its bounds.

    Each object has:
    - A name used in debug statistics
    - A bounding volume (sphere for the fast reject, box for the tight fit)
    - A visibility flag (hidden objects are never returned)
    - Arbitrary user data for the caller
    """

    name: str
    volume: BoundingVolume
    visible: bool = True
    user_data: Dict[str, Any] = field(default_factory=dict)

    def is_visible(self, frustum: Frustum) -> bool:
        """
        Test if this object is visible in the given frustum.

        Args:
            frustum: View frustum to test against

        Returns:
            True if object is visible (inside or intersecting frustum)
        """
        return frustum.volume_in_frustum(self.volume)


class Scene:
    """
    Manages all bounded objects.

    Provides methods to add objects and cull them against a frustum.
    """

    def __init__(self):
        self.objects: List[BoundedObject] = []
        self.last_cull_stats: Dict[str, Dict[str, object]] = {}

    def add_object(self, obj: BoundedObject):
        """
        Add an object to the scene.

        Args:
            obj: BoundedObject to add
        """
        self.objects.append(obj)

    def clear(self):
        """Remove all objects from the scene"""
        self.objects.clear()
        self.last_cull_stats.clear()

    def get_object_count(self) -> int:
        return len(self.objects)

    def cull(self, frustum: Optional[Frustum] = None, label: str = "Main") -> List[BoundedObject]:
        """
        Collect the objects that survive frustum culling.

        Args:
            frustum: Frustum to cull against (if None, all objects pass)
            label: Key for the statistics in last_cull_stats (e.g. "Main", "Shadow Light 0")

        Returns:
            Visible objects in scene order
        """
        frustum_applied = frustum is not None and settings.ENABLE_FRUSTUM_CULLING

        visible: List[BoundedObject] = []
        culled_objects: List[str] = []
        culled_count = 0

        for obj in self.objects:
            if not obj.visible:
                continue

            if frustum_applied and not obj.is_visible(frustum):
                culled_count += 1
                if settings.DEBUG_SHOW_CULLED_OBJECTS:
                    sphere = obj.volume.sphere
                    culled_objects.append(f"{obj.name} (center: {list(sphere.center)}, radius: {sphere.radius})")
                continue

            visible.append(obj)

        self.last_cull_stats[label] = {
            'frustum_applied': frustum_applied,
            'rendered': len(visible),
            'total': len(self.objects),
            'culled': culled_count,
            'culled_objects': culled_objects,
        }

        if settings.DEBUG_FRUSTUM_CULLING and frustum_applied:
            logger.debug(
                "Frustum[%s]: %d/%d visible (culled %d)",
                label, len(visible), len(self.objects), culled_count,
            )

        return visible
