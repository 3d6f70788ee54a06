# MIT License (see LICENSE)
"""
JSON serialization and deserialization for suspension rigs.

A rig bundles what one vehicle's suspension needs: solver settings, the
arms with their wheels, and a static set of colliders (handy for tests,
examples and benchmarks; at runtime colliders come from the broad-phase).

JSON Schema Overview:
---------------------
{
  "solver": {                          # Optional, all fields optional
    "track_width": float,              # Default: 0.5
    "track_thickness": float,          # Default: 0.0
    "return_speed": float,             # Default: 3.0
    "step_degrees": float,             # Default: 5.0
    "max_degrees": float,              # Bottom-out angle, default: 90.0
    "bisection_steps": int,            # Default: 3
    "strategy": "bisection" | "probe",
    "parallel": bool,
    "max_workers": int | null,         # Thread pool size, default: null
    "down": [x, y, z],                 # Vehicle down axis, default: [0, 0, -1]
    "epsilon": float,                  # GJK tolerance, default: 1e-4
    "max_iterations": int              # GJK bound, default: 64
  },
  "vehicle": {
    "origin": [x, y, z],               # Default: [0, 0, 0]
    "left": [x, y, z]                  # Default: [0, 1, 0]
  },
  "arms": [
    {
      "pivot": [x, y, z],              # Required
      "angle": float,                  # Degrees, default: 0
      "wheel": {
        "radius": float,               # Required
        "axis": [x, y, z],             # Required, outboard
        "center": [x, y, z]            # Required, at arm angle 0
      }
    }
  ],
  "colliders": [
    {
      "name": string,                  # Optional
      "shape": {
        "type": "box" | "sphere" | "cylinder" | <unsupported kind>,
        "position": [x, y, z],         # box / cylinder (cylinder: base cap center)
        "forward": [x, y, z],          # Optional, default [1, 0, 0]
        "up": [x, y, z],               # Optional, default [0, 0, 1]
        "half_extents": [hx, hy, hz],  # If box
        "center": [x, y, z],           # If sphere
        "radius": float,               # If sphere / cylinder
        "height": float                # If cylinder
      }
    }
  ]
}

Collider kinds without a support mapping ("capsule", "hull", "mesh",
"plane", "terrain", "model", "map" or "unsupported") load as Unsupported
so that the solver can log and skip them.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import json

from ..collision.gjk import GJKSettings
from ..suspension.solver import SuspensionSolver
from ..suspension.vehicle import SuspensionArm, Wheel
from ..types import Box, Collider, Cylinder, Pose, Sphere, Unsupported

UNSUPPORTED_KINDS = ("capsule", "hull", "mesh", "plane", "terrain", "model", "map", "unsupported")


@dataclass
class Rig:
    """A solver, its arms and a static collider set, as loaded from JSON."""
    solver: SuspensionSolver
    arms: list[SuspensionArm] = field(default_factory=list)
    colliders: list[Collider] = field(default_factory=list)
    vehicle_origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vehicle_left: tuple[float, float, float] = (0.0, 1.0, 0.0)

    def step(self, dt: float) -> list[float]:
        """Advance every arm by one tick against the rig's colliders."""
        return self.solver.step(self.arms, self.colliders, dt)


def _to_list(v) -> list[float]:
    """Convert numpy arrays or tuples to plain lists for JSON."""
    return [float(x) for x in v]


def _vec3(value: Any, what: str) -> tuple[float, float, float]:
    if value is None or len(value) != 3:
        raise ValueError(f"{what} must be a list of 3 numbers, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


# =============================================================================
# Colliders
# =============================================================================

def _pose_from_json(d: dict[str, Any]) -> Pose:
    return Pose.looking_at(
        _vec3(d.get("position", [0.0, 0.0, 0.0]), "position"),
        _vec3(d.get("forward", [1.0, 0.0, 0.0]), "forward"),
        _vec3(d.get("up", [0.0, 0.0, 1.0]), "up"),
    )


def _pose_to_json(pose: Pose) -> dict[str, Any]:
    return {
        "position": _to_list(pose.position),
        "forward": _to_list(pose.forward),
        "up": _to_list(pose.up),
    }


def collider_from_json(d: dict[str, Any]) -> Collider:
    """
    Parse a single collider definition from a dictionary.

    Raises:
        ValueError: If the shape is missing, malformed or of an unknown kind.
    """
    if "shape" not in d:
        raise ValueError("Collider definition missing required 'shape' field.")

    shape_data = d["shape"]
    shape_type = shape_data.get("type")

    if shape_type == "box":
        shape = Box(pose=_pose_from_json(shape_data), half_extents=_vec3(shape_data.get("half_extents"), "half_extents"))
    elif shape_type == "sphere":
        shape = Sphere(center=_vec3(shape_data.get("center"), "center"), radius=float(shape_data["radius"]))
    elif shape_type == "cylinder":
        shape = Cylinder(
            pose=_pose_from_json(shape_data),
            radius=float(shape_data["radius"]),
            height=float(shape_data["height"]),
        )
    elif shape_type in UNSUPPORTED_KINDS:
        shape = Unsupported(name=str(shape_data.get("name", shape_type)))
    else:
        raise ValueError(f"Unknown shape type: '{shape_type}'")

    return Collider(shape=shape, name=str(d.get("name", "")))


def collider_to_json(collider: Collider) -> dict[str, Any]:
    """Serialize a Collider to a dictionary (round-trip compatible)."""
    shape = collider.shape
    if isinstance(shape, Box):
        shape_data = {"type": "box", **_pose_to_json(shape.pose), "half_extents": _to_list(shape.half_extents)}
    elif isinstance(shape, Sphere):
        shape_data = {"type": "sphere", "center": _to_list(shape.center), "radius": shape.radius}
    elif isinstance(shape, Cylinder):
        shape_data = {"type": "cylinder", **_pose_to_json(shape.pose), "radius": shape.radius, "height": shape.height}
    elif isinstance(shape, Unsupported):
        shape_data = {"type": "unsupported", "name": shape.name}
    else:
        raise TypeError(f"Cannot serialize unknown shape type: {type(shape)}")

    result: dict[str, Any] = {"shape": shape_data}
    if collider.name:
        result["name"] = collider.name
    return result


# =============================================================================
# Arms
# =============================================================================

def arm_from_json(d: dict[str, Any], vehicle_origin, vehicle_left) -> SuspensionArm:
    """Parse a single arm (with its wheel) from a dictionary."""
    if "wheel" not in d:
        raise ValueError("Arm definition missing required 'wheel' field.")
    w = d["wheel"]
    wheel = Wheel(
        radius=float(w["radius"]),
        axis=_vec3(w.get("axis"), "wheel axis"),
        center=_vec3(w.get("center"), "wheel center"),
    )
    return SuspensionArm.build(
        pivot=_vec3(d.get("pivot"), "pivot"),
        wheel=wheel,
        vehicle_origin=vehicle_origin,
        vehicle_left=vehicle_left,
        angle=float(d.get("angle", 0.0)),
    )


def arm_to_json(arm: SuspensionArm) -> dict[str, Any]:
    """Serialize an arm at its current angle. The wheel center is written at angle 0."""
    result: dict[str, Any] = {
        "pivot": _to_list(arm.pivot),
        "wheel": {
            "radius": arm.wheel.radius,
            "axis": _to_list(arm.wheel.axis),
            "center": _to_list(arm.pivot + arm.rest_offset),
        },
    }
    if arm.angle != 0.0:
        result["angle"] = arm.angle
    return result


# =============================================================================
# Solver
# =============================================================================

def solver_from_json(d: dict[str, Any]) -> SuspensionSolver:
    """Build a SuspensionSolver from the optional 'solver' section."""
    defaults = SuspensionSolver(track_width=0.5)
    max_workers = d.get("max_workers", defaults.max_workers)
    return SuspensionSolver(
        track_width=float(d.get("track_width", defaults.track_width)),
        track_thickness=float(d.get("track_thickness", defaults.track_thickness)),
        return_speed=float(d.get("return_speed", defaults.return_speed)),
        step_degrees=float(d.get("step_degrees", defaults.step_degrees)),
        max_degrees=float(d.get("max_degrees", defaults.max_degrees)),
        bisection_steps=int(d.get("bisection_steps", defaults.bisection_steps)),
        strategy=str(d.get("strategy", defaults.strategy)),
        parallel=bool(d.get("parallel", defaults.parallel)),
        max_workers=None if max_workers is None else int(max_workers),
        down=_vec3(d.get("down", [0.0, 0.0, -1.0]), "down"),
        gjk=GJKSettings(
            epsilon=float(d.get("epsilon", defaults.gjk.epsilon)),
            max_iterations=int(d.get("max_iterations", defaults.gjk.max_iterations)),
        ),
    )


def solver_to_json(solver: SuspensionSolver) -> dict[str, Any]:
    return {
        "track_width": solver.track_width,
        "track_thickness": solver.track_thickness,
        "return_speed": solver.return_speed,
        "step_degrees": solver.step_degrees,
        "max_degrees": solver.max_degrees,
        "bisection_steps": solver.bisection_steps,
        "strategy": solver.strategy,
        "parallel": solver.parallel,
        "max_workers": solver.max_workers,
        "down": _to_list(solver.down),
        "epsilon": solver.gjk.epsilon,
        "max_iterations": solver.gjk.max_iterations,
    }


# =============================================================================
# Rigs
# =============================================================================

def rig_from_json(data: dict[str, Any]) -> Rig:
    """Construct a Rig from already-parsed JSON data."""
    vehicle = data.get("vehicle", {})
    origin = _vec3(vehicle.get("origin", [0.0, 0.0, 0.0]), "vehicle origin")
    left = _vec3(vehicle.get("left", [0.0, 1.0, 0.0]), "vehicle left")

    return Rig(
        solver=solver_from_json(data.get("solver", {})),
        arms=[arm_from_json(a, origin, left) for a in data.get("arms", [])],
        colliders=[collider_from_json(c) for c in data.get("colliders", [])],
        vehicle_origin=origin,
        vehicle_left=left,
    )


def rig_to_json(rig: Rig) -> dict[str, Any]:
    return {
        "solver": solver_to_json(rig.solver),
        "vehicle": {"origin": list(rig.vehicle_origin), "left": list(rig.vehicle_left)},
        "arms": [arm_to_json(a) for a in rig.arms],
        "colliders": [collider_to_json(c) for c in rig.colliders],
    }


def load_rig_raw(path: str) -> dict[str, Any]:
    """Load raw JSON data from a rig file without object construction."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_rig(path: str) -> Rig:
    """
    Load and construct a Rig from a JSON file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If required fields are missing or malformed.
    """
    return rig_from_json(load_rig_raw(path))


def save_rig(rig: Rig, path: str) -> None:
    """Save a Rig to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(rig_to_json(rig), f, indent=2)
