# MIT License (see LICENSE)
"""
Support mappings and closest-point queries for the shape variants.

The support point s(d) of a convex shape is the boundary point that
maximizes dot(s, d). GJK only ever talks to shapes through this function,
so adding a primitive means adding a variant in types.py and a case here.

closest_point() is the companion query used by the suspension solver to
prefilter colliders and by the distance probe.
"""
from __future__ import annotations

import numpy as np

from ..constants import RADIAL_EPSILON
from ..errors import UnsupportedShape
from ..types import Box, Sphere, Cylinder, Unsupported, Shape3D
from ..util import norm


def box_support(box: Box, direction: np.ndarray) -> np.ndarray:
    """
    Support function for an oriented box.

    The direction is moved into the box frame, each local axis picks the
    half-extent matching its sign, and the corner is moved back to world space.

    Args:
        box: The box.
        direction: World space unit direction.

    Returns:
        Support point (a vertex, or an edge/face center when a local
        component of the direction is exactly zero).
    """
    local_dir = box.pose.direction_to_local(direction)
    return box.pose.point_to_world(np.sign(local_dir) * box.half_extents)


def sphere_support(sphere: Sphere, direction: np.ndarray) -> np.ndarray:
    """Support function for a sphere: center + d * r."""
    return sphere.center + direction * sphere.radius


def cylinder_support(cylinder: Cylinder, direction: np.ndarray) -> np.ndarray:
    """
    Support function for a cylinder.

    Args:
        cylinder: The cylinder, base at its pose origin.
        direction: World space unit direction.

    Returns:
        A cap center when the direction is (nearly) parallel to the axis,
        otherwise a point on the rim of the cap selected by the axial sign.
    """
    local_dir = cylinder.pose.direction_to_local(direction)
    axial = float(local_dir[0])
    radial = np.array([0.0, local_dir[1], local_dir[2]], dtype=np.float64)
    radial_len = norm(radial)

    if radial_len <= RADIAL_EPSILON:
        if axial > 0:
            return cylinder.pose.point_to_world(np.array([cylinder.height, 0.0, 0.0]))
        return cylinder.pose.position.copy()

    local_point = radial / radial_len * cylinder.radius
    if axial > RADIAL_EPSILON:
        local_point[0] = cylinder.height
    return cylinder.pose.point_to_world(local_point)


def furthest_point(shape: Shape3D, direction: np.ndarray) -> np.ndarray:
    """
    Support mapping dispatcher.

    Args:
        shape: Any shape variant.
        direction: World space unit direction.

    Returns:
        World space point of `shape` furthest along `direction`.

    Raises:
        UnsupportedShape: If the shape has no support mapping.
    """
    if isinstance(shape, Box):
        return box_support(shape, direction)
    if isinstance(shape, Sphere):
        return sphere_support(shape, direction)
    if isinstance(shape, Cylinder):
        return cylinder_support(shape, direction)
    if isinstance(shape, Unsupported):
        raise UnsupportedShape(f"Unsupported shape type: {shape.name}")
    raise UnsupportedShape(f"Unsupported shape type: {type(shape).__name__}")


def world_position(shape: Shape3D) -> np.ndarray:
    """
    Reference point of a shape used to seed the GJK search.

    Box: center. Sphere: center. Cylinder: base cap center.
    """
    if isinstance(shape, (Box, Cylinder)):
        return shape.pose.position
    if isinstance(shape, Sphere):
        return shape.center
    name = shape.name if isinstance(shape, Unsupported) else type(shape).__name__
    raise UnsupportedShape(f"Unsupported shape type: {name}")


def supported(shape: Shape3D) -> bool:
    """True if the shape kind has a support mapping."""
    return isinstance(shape, (Box, Sphere, Cylinder))


def closest_point(shape: Shape3D, point) -> np.ndarray:
    """
    Point of the solid shape closest to `point`.

    Returns `point` itself when it lies inside the shape.

    Raises:
        UnsupportedShape: If the shape kind is not handled.
    """
    p = np.asarray(point, dtype=np.float64)

    if isinstance(shape, Sphere):
        offset = p - shape.center
        dist = norm(offset)
        if dist <= shape.radius:
            return p.copy()
        return shape.center + offset * (shape.radius / dist)

    if isinstance(shape, Box):
        local = shape.pose.point_to_local(p)
        clamped = np.clip(local, -shape.half_extents, shape.half_extents)
        return shape.pose.point_to_world(clamped)

    if isinstance(shape, Cylinder):
        local = shape.pose.point_to_local(p)
        axial = min(max(float(local[0]), 0.0), shape.height)
        radial = np.array([0.0, local[1], local[2]], dtype=np.float64)
        radial_len = norm(radial)
        if radial_len > shape.radius:
            radial *= shape.radius / radial_len
        radial[0] = axial
        return shape.pose.point_to_world(radial)

    name = shape.name if isinstance(shape, Unsupported) else type(shape).__name__
    raise UnsupportedShape(f"Unsupported shape type: {name}")
