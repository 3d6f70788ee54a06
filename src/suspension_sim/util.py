# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Provides low-level 3D vector operations used by the intersection tester
and the suspension solver, including normalization, cross products,
axis-angle rotations and array conversion helpers.
All functions operate on 3D vectors represented as numpy arrays of shape (3,).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for positions and directions.
    """
    return np.array(x, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 3D vector. Avoids sqrt for performance."""
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 3D vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit (normalized) vector in the same direction as v.

    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return np.zeros(3, dtype=np.float64)
    return v / n


def cross3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3D cross product a × b.

    Written out component-wise so that cross3(-a, -b) == cross3(a, b)
    holds bit for bit.
    """
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ], dtype=np.float64)


def any_perpendicular(v: np.ndarray) -> np.ndarray:
    """
    Unit vector perpendicular to v.

    Crosses v with the world axis it is least aligned with. The result is
    odd in v: any_perpendicular(-v) == -any_perpendicular(v).
    """
    axis = np.zeros(3, dtype=np.float64)
    axis[int(np.argmin(np.abs(v)))] = 1.0
    return unit(cross3(v, axis))


def rotation_about_axis(axis: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotation matrix for a right-handed rotation of `angle` radians about `axis`.

    Rodrigues' formula: R = I + sin(θ) K + (1 - cos(θ)) K²
    """
    k = unit(f64(axis))
    K = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ], dtype=np.float64)
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)


def basis_from_forward(forward: np.ndarray, up_hint: np.ndarray | None = None) -> np.ndarray:
    """
    Orthonormal rotation matrix whose first column is `forward`.

    Columns are (forward, left, up). `up_hint` defaults to world +z and is
    replaced by a perpendicular when it is parallel to `forward`.
    """
    fwd = unit(f64(forward))
    up = f64((0.0, 0.0, 1.0) if up_hint is None else up_hint)
    left = cross3(up, fwd)
    if norm2(left) < 1e-12:
        left = any_perpendicular(fwd)
    left = unit(left)
    up = cross3(fwd, left)
    return np.column_stack((fwd, left, up))
