# MIT License (see LICENSE)
"""
Suspension articulation.

This subpackage provides:
    - Wheel, SuspensionArm: Per-arm state created at vehicle setup.
    - SuspensionSolver: Per-tick angle search (bisection or distance probe).

Typical usage:
    from suspension_sim.suspension import SuspensionSolver

    solver = SuspensionSolver(track_width=0.5)
    angles = solver.step(arms, nearby_colliders, dt=1/60)
"""
from .vehicle import SuspensionArm, Wheel
from .solver import STRATEGIES, SuspensionSolver

__all__ = [
    "Wheel",
    "SuspensionArm",
    "SuspensionSolver",
    "STRATEGIES",
]
