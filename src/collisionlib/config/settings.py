"""
Collision Kernel Configuration Settings

All configuration constants for the geometric predicates.
Modify these values to change kernel behavior.
"""

# ============================================================================
# Numeric Tolerance
# ============================================================================

EPSILON = 1e-5  # Relative tolerance for close_enough() and plane equality

# ============================================================================
# Frustum Settings
# ============================================================================

# Clip-space depth convention of the projection matrices handed to
# Frustum.extract_planes() when no convention is given.
# Options: "zero_to_one" (near plane = row 2), "negative_one_to_one" (OpenGL)
DEFAULT_CLIP_DEPTH = "zero_to_one"

# Frustum culling (skip objects outside camera view)
ENABLE_FRUSTUM_CULLING = True

# ============================================================================
# Picking Settings
# ============================================================================

PICK_RAYCAST_RANGE = 1000.0  # Maximum distance along a pick ray

# ============================================================================
# Debug Settings
# ============================================================================

# Raise DegenerateGeometryError for zero-length plane normals instead of
# producing non-finite values (slower, meant for test runs)
DEBUG_GEOMETRY_CHECKS = False

# Frustum culling debug
DEBUG_FRUSTUM_CULLING = False  # Log culling statistics (very spammy - only enable for debugging)
DEBUG_SHOW_CULLED_OBJECTS = False  # Record names of culled objects in the cull stats
