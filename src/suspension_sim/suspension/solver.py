# MIT License (see LICENSE)
"""
Suspension articulation solver.

Every tick, for every arm, find the rotation that brings the wheel as
close to unobstructed ground contact as possible without its swept volume
penetrating a nearby collider. The GJK overlap test is the only oracle.

Per arm (strategy "bisection", the reference behavior):
    1. No overlap at the current angle: relax toward 0 at
       return_speed * 90 °/s (torsion bar spring-back) and stop.
    2. Otherwise blocked = angle, clear = min(angle + 5, 90). Still
       overlapping at `clear`: bottom out at 90.
    3. Otherwise bisect [blocked, clear] a fixed number of times, keeping
       `blocked` overlapping and `clear` collision-free.
    4. The result is `blocked`, the highest angle confirmed to overlap. The
       wheel ends at most (5 / 2**3)° below the contact angle, so the next
       tick finds it in contact again and bisects upward from there. While
       contact holds the angle never decreases, and a resting wheel keeps
       the same angle tick after tick.

Strategy "probe" trades accuracy for cost: one distance query per
candidate collider and a closed-form angle, asin(depth / arm_length).
It is not guaranteed to agree with the bisection result.

Arms do not interact: each arm prefilters the shared broad-phase list into
a private scratch list and only writes its own angle, so the tick can fan
out across a thread pool and produce the same angles in any order.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence
import logging
import math

import numpy as np

from ..collision.gjk import GJKSettings, overlaps
from ..collision.shapes import closest_point
from ..constants import (
    ARM_MAX_DEGREES,
    ARM_STEP_DEGREES,
    BISECTION_STEPS,
    PROBE_MIN_DEPTH,
    TORSION_BAR_RETURN_SPEED,
)
from ..errors import UnsupportedShape
from ..profiler import Profiler
from ..types import Collider
from ..util import f64, norm, norm2, unit
from .vehicle import SuspensionArm

logger = logging.getLogger(__name__)

STRATEGIES = ("bisection", "probe")


def _approach(value: float, target: float, delta: float) -> float:
    """Move `value` toward `target` by at most `delta`, without overshooting."""
    if value > target:
        return max(value - delta, target)
    return min(value + delta, target)


@dataclass
class SuspensionSolver:
    """
    Per-tick suspension articulation.

    Attributes:
        track_width: Width of the track, i.e. length of a wheel's swept cylinder.
        track_thickness: Track thickness added to the wheel radius by the probe.
        return_speed: Torsion bar spring-back, in full arm travels per second.
        step_degrees: Largest upward travel tested in one tick.
        max_degrees: Full bottom-out angle.
        bisection_steps: Refinements of the contact angle per tick.
        strategy: "bisection" (reference) or "probe" (closed-form, cheaper).
        parallel: Solve arms on a thread pool.
        max_workers: Thread pool size (None lets the executor decide).
        down: The vehicle's down axis, used by the probe to ignore
              contacts above the wheel hub.
        gjk: Settings of the overlap oracle.
        profiler: Optional Profiler instance for timing statistics.

    The thread pool is created on the first parallel tick and reused until
    close() is called. The solver can also be used as a context manager.
    """
    track_width: float
    track_thickness: float = 0.0
    return_speed: float = TORSION_BAR_RETURN_SPEED
    step_degrees: float = ARM_STEP_DEGREES
    max_degrees: float = ARM_MAX_DEGREES
    bisection_steps: int = BISECTION_STEPS
    strategy: str = "bisection"
    parallel: bool = True
    max_workers: int | None = None
    down: np.ndarray | tuple[float, float, float] = (0.0, 0.0, -1.0)
    gjk: GJKSettings = field(default_factory=GJKSettings)
    profiler: Profiler | None = None
    _pool: ThreadPoolExecutor | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.down = unit(f64(self.down))

    # -------------------------------------------------------------------------
    # Collider prefilter
    # -------------------------------------------------------------------------

    def reach_sq(self, arm: SuspensionArm) -> float:
        """Squared radius around the pivot that the wheel can ever occupy."""
        reach = arm.arm_length + arm.wheel.radius
        return reach * reach + self.track_width * self.track_width / 4

    def prefilter(self, arm: SuspensionArm, colliders: Sequence[Collider]) -> list[Collider]:
        """
        Keep only colliders whose closest point to the pivot is within reach.

        Args:
            arm: The arm being solved.
            colliders: Broad-phase result, shared read-only between arms.

        Returns:
            A new list owned by the caller.
        """
        bound = self.reach_sq(arm)
        close: list[Collider] = []
        for collider in colliders:
            try:
                point = closest_point(collider.shape, arm.pivot)
            except UnsupportedShape as exc:
                logger.warning("Ignoring collider %r: %s", collider.name, exc)
                continue
            if norm2(point - arm.pivot) <= bound:
                close.append(collider)
        return close

    # -------------------------------------------------------------------------
    # Bisection (reference)
    # -------------------------------------------------------------------------

    def collides(self, arm: SuspensionArm, colliders: Sequence[Collider], angle: float) -> bool:
        """True if the wheel's swept cylinder at `angle` overlaps any collider."""
        cylinder = arm.swept_cylinder(self.track_width, angle)
        for collider in colliders:
            if overlaps(collider, cylinder, self.gjk):
                return True
        return False

    def _relax(self, arm: SuspensionArm, dt: float) -> float:
        arm.angle = _approach(arm.angle, 0.0, self.return_speed * self.max_degrees * dt)
        return arm.angle

    def solve_arm(self, arm: SuspensionArm, colliders: Sequence[Collider], dt: float) -> float:
        """
        Bisection solve of one arm.

        Args:
            arm: Arm to update in place.
            colliders: Prefiltered colliders for this arm.
            dt: Tick length in seconds.

        Returns:
            The new arm angle in degrees.
        """
        if not self.collides(arm, colliders, arm.angle):
            return self._relax(arm, dt)

        blocked = arm.angle
        clear = min(blocked + self.step_degrees, self.max_degrees)

        if self.collides(arm, colliders, clear):
            logger.debug("Arm at %s bottomed out", arm.pivot)
            arm.angle = self.max_degrees
            return arm.angle

        for _ in range(self.bisection_steps):
            mid = (blocked + clear) / 2
            if self.collides(arm, colliders, mid):
                blocked = mid
            else:
                clear = mid

        arm.angle = blocked
        return arm.angle

    # -------------------------------------------------------------------------
    # Distance probe (fast)
    # -------------------------------------------------------------------------

    def probe_depth(self, arm: SuspensionArm, colliders: Sequence[Collider]) -> float:
        """
        Deepest penetration of the wheel (plus track) into a collider below its hub.

        Returns 0 when nothing is in contact.
        """
        center = arm.wheel_center()
        contact_radius = arm.wheel.radius + self.track_thickness
        deepest = 0.0
        for collider in colliders:
            try:
                point = closest_point(collider.shape, center)
            except UnsupportedShape as exc:
                logger.warning("Ignoring collider %r: %s", collider.name, exc)
                continue
            offset = point - center
            if float(np.dot(offset, self.down)) < 0:
                continue
            depth = contact_radius - norm(offset)
            if depth > deepest:
                deepest = depth
        return deepest

    def solve_arm_probe(self, arm: SuspensionArm, colliders: Sequence[Collider], dt: float) -> float:
        """
        Closed-form solve of one arm from the probe's penetration depth.

        The angle grows by asin(depth / arm_length); the arm's side sign is
        applied through its hinge axis.
        """
        depth = self.probe_depth(arm, colliders)
        if depth <= 0:
            return self._relax(arm, dt)
        if PROBE_MIN_DEPTH < depth < arm.arm_length:
            arm.angle = min(arm.angle + math.degrees(math.asin(depth / arm.arm_length)), self.max_degrees)
        return arm.angle

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def _solve_one(self, arm: SuspensionArm, colliders: Sequence[Collider], dt: float) -> float:
        if self.profiler:
            with self.profiler.section("prefilter"):
                close = self.prefilter(arm, colliders)
        else:
            close = self.prefilter(arm, colliders)
        if self.strategy == "bisection":
            return self.solve_arm(arm, close, dt)
        return self.solve_arm_probe(arm, close, dt)

    def step(self, arms: Sequence[SuspensionArm], colliders: Sequence[Collider], dt: float) -> list[float]:
        """
        Advance every arm by one tick.

        Args:
            arms: Arms of one vehicle.
            colliders: Broad-phase result around the vehicle. Not mutated.
            dt: Tick length in seconds.

        Returns:
            New angles in degrees, in the order of `arms`.

        Raises:
            ValueError: If the strategy is unknown.
        """
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown suspension strategy: {self.strategy}")

        colliders = tuple(colliders)
        prof = self.profiler

        if prof:
            with prof.section("solve"):
                return self._run(arms, colliders, dt)
        return self._run(arms, colliders, dt)

    def _run(self, arms: Sequence[SuspensionArm], colliders: tuple[Collider, ...], dt: float) -> list[float]:
        if not self.parallel or len(arms) < 2:
            return [self._solve_one(arm, colliders, dt) for arm in arms]

        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="suspension")
        futures = [self._pool.submit(self._solve_one, arm, colliders, dt) for arm in arms]
        return [f.result() for f in futures]

    def close(self) -> None:
        """Shut down the worker pool. A later parallel tick starts a new one."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "SuspensionSolver":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
