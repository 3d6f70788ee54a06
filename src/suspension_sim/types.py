# MIT License (see LICENSE)
"""
Core type definitions for the intersection tester.

Defines the fundamental data structures:
- Pose: world transform (position + orthonormal rotation).
- Shape primitives (Box, Sphere, Cylinder) and the Unsupported placeholder.
- Collider: a shape as delivered by the broad-phase query.

Shapes are a closed set. Every variant except Unsupported carries its own
pose and dimensions; the support mapping dispatches on the variant in
collision.shapes.

Local frame convention (columns of Pose.rotation):
  x = forward, y = left, z = up
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .errors import InvalidArgument
from .util import f64, basis_from_forward, unit


# =============================================================================
# Pose
# =============================================================================

@dataclass(frozen=True)
class Pose:
    """
    Rigid world transform.

    Attributes:
        position: World position [x, y, z].
        rotation: 3x3 orthonormal matrix, columns are the local forward,
                  left and up axes expressed in world space.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=np.float64))

    def __post_init__(self) -> None:
        """Ensure position/rotation are stored as float64."""
        object.__setattr__(self, "position", f64(self.position))
        object.__setattr__(self, "rotation", f64(self.rotation))

    @classmethod
    def looking_at(cls, position, forward, up_hint=None) -> "Pose":
        """Pose at `position` whose forward axis is `forward`."""
        return cls(position=position, rotation=basis_from_forward(forward, up_hint))

    @property
    def forward(self) -> np.ndarray:
        return self.rotation[:, 0]

    @property
    def left(self) -> np.ndarray:
        return self.rotation[:, 1]

    @property
    def up(self) -> np.ndarray:
        return self.rotation[:, 2]

    def direction_to_local(self, direction: np.ndarray) -> np.ndarray:
        # R is orthonormal: R^-1 = R^T
        return self.rotation.T @ direction

    def direction_to_world(self, direction: np.ndarray) -> np.ndarray:
        return self.rotation @ direction

    def point_to_local(self, point: np.ndarray) -> np.ndarray:
        """Transform a point from world coordinates to local coordinates."""
        return self.rotation.T @ (f64(point) - self.position)

    def point_to_world(self, point: np.ndarray) -> np.ndarray:
        """Transform a point from local coordinates to world coordinates."""
        return self.rotation @ f64(point) + self.position


# =============================================================================
# Shape Definitions
# =============================================================================

@dataclass(frozen=True)
class Box:
    """
    Oriented box defined by half-extents.

    The box is centered at its pose position.

    Attributes:
        pose: World transform of the box center.
        half_extents: (hx, hy, hz) along the local forward, left, up axes.
    """
    pose: Pose
    half_extents: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "half_extents", f64(self.half_extents))
        if self.half_extents.shape != (3,) or np.any(self.half_extents < 0):
            raise InvalidArgument(f"Box half extents must be 3 non-negative values, got {self.half_extents}")


@dataclass(frozen=True)
class Sphere:
    """
    Sphere defined by center and radius.

    Attributes:
        center: World position of the center.
        radius: Distance from center to surface.
    """
    center: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", f64(self.center))
        if self.radius <= 0:
            raise InvalidArgument(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class Cylinder:
    """
    Solid cylinder with its base cap centered at the pose origin.

    The cylinder extends `height` along pose.forward.

    Attributes:
        pose: World transform of the base cap center.
        radius: Cap radius.
        height: Length along the forward axis.
    """
    pose: Pose
    radius: float
    height: float

    def __post_init__(self) -> None:
        if self.radius <= 0 or self.height <= 0:
            raise InvalidArgument(
                f"Cylinder radius and height must be positive, got ({self.radius}, {self.height})"
            )

    @classmethod
    def centered_at(cls, center, axis, radius: float, height: float) -> "Cylinder":
        """
        Cylinder whose midpoint is `center` and whose forward axis is `axis`.

        Used for the swept volume of a wheel: the base is moved back by
        half the height along the axis.
        """
        fwd = unit(f64(axis))
        base = f64(center) - fwd * (height / 2)
        return cls(pose=Pose.looking_at(base, fwd), radius=radius, height=height)


@dataclass(frozen=True)
class Unsupported:
    """
    Collider kind without a support mapping (capsule, hull, mesh, terrain...).

    Any query involving it raises UnsupportedShape.

    Attributes:
        name: Diagnostic identifier of the collider kind.
    """
    name: str


# Union type for shape dispatch
Shape3D = Box | Sphere | Cylinder | Unsupported


@dataclass(frozen=True)
class Collider:
    """
    Nearby collider as reported by the broad-phase query.

    Attributes:
        shape: Collision geometry with its world pose.
        name: Optional identifier used in log messages.
    """
    shape: Shape3D
    name: str = ""
