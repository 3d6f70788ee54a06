# MIT License (see LICENSE)
"""
suspension_sim - Convex intersection testing and tracked-vehicle suspension articulation.

This package provides a 3D GJK overlap test over a closed set of primitive
shapes and a per-tick solver that rotates each suspension arm until its
wheel rests on the terrain without penetrating it.

Main entry points:
    - overlaps: Boolean overlap query between two shapes or colliders.
    - Box, Sphere, Cylinder, Unsupported: Shape definitions.
    - Collider: A shape as reported by the broad-phase.
    - Wheel, SuspensionArm: Vehicle suspension state.
    - SuspensionSolver: The per-tick articulation solver.

Submodules:
    - collision: Support mappings, simplex and GJK.
    - suspension: Arms, wheels and the articulation solver.
    - io: JSON rig loading/saving.

Example:
    from suspension_sim import Sphere, overlaps

    overlaps(Sphere((0, 0, 0), 1.0), Sphere((1.5, 0, 0), 1.0))  # True
"""
from .collision.gjk import GJKSettings, overlaps
from .errors import DegenerateGeometry, InvalidArgument, SuspensionSimError, UnsupportedShape
from .suspension.solver import SuspensionSolver
from .suspension.vehicle import SuspensionArm, Wheel
from .types import Box, Collider, Cylinder, Pose, Sphere, Unsupported

__all__ = [
    # Intersection
    "overlaps",
    "GJKSettings",
    # Shapes
    "Pose",
    "Box",
    "Sphere",
    "Cylinder",
    "Unsupported",
    "Collider",
    # Suspension
    "Wheel",
    "SuspensionArm",
    "SuspensionSolver",
    # Errors
    "SuspensionSimError",
    "InvalidArgument",
    "UnsupportedShape",
    "DegenerateGeometry",
]
