# MIT License (see LICENSE)
"""
Collision detection subsystem.

This subpackage provides:
    - Shapes: Support mappings and closest-point queries per shape variant.
    - Simplex: The tetrahedron refined by GJK.
    - GJK: Boolean overlap test between two convex shapes.

Typical usage:
    from suspension_sim.collision import overlaps

    if overlaps(collider, wheel_cylinder):
        # wheel is blocked
"""
from .shapes import closest_point, furthest_point, supported, world_position
from .simplex import Tetrahedron, closest_point_on_triangle
from .gjk import GJKSettings, gjk_intersect, overlaps, support

__all__ = [
    # Shapes
    "furthest_point",
    "world_position",
    "closest_point",
    "supported",
    # Simplex
    "Tetrahedron",
    "closest_point_on_triangle",
    # GJK
    "GJKSettings",
    "gjk_intersect",
    "overlaps",
    "support",
]
