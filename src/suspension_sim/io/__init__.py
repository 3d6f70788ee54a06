# MIT License (see LICENSE)
"""
Input/Output utilities for suspension rigs.

This subpackage provides:
    - JSON serialization: Save and load rigs (solver, arms, colliders).
    - Round-trip support: Serialized rigs can be loaded back identically.

Typical usage:
    from suspension_sim.io import load_rig, save_rig

    rig = load_rig("tank.json")
    rig.step(1 / 60)
    save_rig(rig, "tank_after.json")
"""
from .json_io import (
    Rig,
    load_rig,
    load_rig_raw,
    save_rig,
    rig_from_json,
    rig_to_json,
    collider_from_json,
    collider_to_json,
    arm_from_json,
    arm_to_json,
    solver_from_json,
    solver_to_json,
)

__all__ = [
    "Rig",
    # Loading
    "load_rig",
    "load_rig_raw",
    "rig_from_json",
    # Saving
    "save_rig",
    "rig_to_json",
    # Parts
    "collider_from_json",
    "collider_to_json",
    "arm_from_json",
    "arm_to_json",
    "solver_from_json",
    "solver_to_json",
]
