# MIT License (see LICENSE)
"""
Wheel and suspension arm state.

Arms are created once when the vehicle is set up (the hierarchy walk that
discovers wheels and arm bones lives outside this package) and live as
long as the vehicle. Only `SuspensionArm.angle` changes afterwards.

Arm kinematics:
    center(θ) = pivot + R(hinge, θ) · rest_offset

`hinge` is the wheel axis multiplied by the arm's side sign, so a
positive angle lifts the wheel toward the hull on both sides of the
vehicle as long as wheel axes point outboard.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from ..constants import ARM_MAX_DEGREES
from ..errors import InvalidArgument
from ..types import Cylinder
from ..util import f64, norm, rotation_about_axis, unit


@dataclass
class Wheel:
    """
    Road wheel attached to a suspension arm.

    Attributes:
        radius: Wheel radius in meters.
        axis: Unit rotation axis in world space, pointing outboard.
        center: World position of the wheel center at arm angle 0.
        spin: Rolling angle in degrees. Owned by the drivetrain; the
              suspension never writes it.
    """
    radius: float
    axis: np.ndarray
    center: np.ndarray
    spin: float = 0.0

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise InvalidArgument(f"Wheel radius must be positive, got {self.radius}")
        self.axis = unit(f64(self.axis))
        if norm(self.axis) == 0:
            raise InvalidArgument("Wheel axis must be a non-zero vector")
        self.center = f64(self.center)


@dataclass
class SuspensionArm:
    """
    Pivoting linkage between the hull and a wheel.

    Attributes:
        pivot: World position of the arm pivot.
        wheel: The attached wheel.
        rest_offset: Pivot-to-wheel-center vector at angle 0.
        arm_length: |rest_offset|, derived once at construction.
        side: +1 for arms on the vehicle's left, -1 on its right.
        hinge: Unit axis the arm rotates about (side * wheel.axis).
        angle: Current rotation in degrees, kept within [0, 90].
    """
    pivot: np.ndarray
    wheel: Wheel
    rest_offset: np.ndarray
    arm_length: float
    side: float
    hinge: np.ndarray
    _angle: float = field(default=0.0, repr=False)

    @classmethod
    def build(
        cls,
        pivot,
        wheel: Wheel,
        vehicle_origin=(0.0, 0.0, 0.0),
        vehicle_left=(0.0, 1.0, 0.0),
        angle: float = 0.0,
    ) -> "SuspensionArm":
        """
        Create an arm from setup-time poses.

        Args:
            pivot: World position of the arm pivot.
            wheel: Wheel whose `center` is its position at angle 0.
            vehicle_origin: World position of the vehicle.
            vehicle_left: The vehicle's lateral (left) axis in world space.
            angle: Initial arm angle in degrees.

        Raises:
            InvalidArgument: If the wheel is missing or sits on the pivot.
        """
        if wheel is None:
            raise InvalidArgument("Suspension arm has no wheel attached")
        pivot = f64(pivot)
        rest_offset = wheel.center - pivot
        arm_length = norm(rest_offset)
        if arm_length == 0:
            raise InvalidArgument("Wheel center coincides with the arm pivot")

        lateral = float(np.dot(pivot - f64(vehicle_origin), f64(vehicle_left)))
        side = 1.0 if lateral >= 0 else -1.0

        arm = cls(
            pivot=pivot,
            wheel=wheel,
            rest_offset=rest_offset,
            arm_length=arm_length,
            side=side,
            hinge=wheel.axis * side,
        )
        arm.angle = angle
        return arm

    @property
    def angle(self) -> float:
        return self._angle

    @angle.setter
    def angle(self, value: float) -> None:
        self._angle = min(max(float(value), 0.0), ARM_MAX_DEGREES)

    def wheel_center(self, angle: float | None = None) -> np.ndarray:
        """World position of the wheel center with the arm at `angle` (default: current)."""
        theta = np.radians(self._angle if angle is None else angle)
        return self.pivot + rotation_about_axis(self.hinge, theta) @ self.rest_offset

    def swept_cylinder(self, track_width: float, angle: float | None = None) -> Cylinder:
        """
        Volume swept by the wheel and its track at `angle`.

        A cylinder of the wheel's radius, `track_width` long, centered on
        the wheel center and aligned with the wheel axis.
        """
        return Cylinder.centered_at(
            self.wheel_center(angle), self.wheel.axis, self.wheel.radius, track_width
        )
