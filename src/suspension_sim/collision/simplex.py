# MIT License (see LICENSE)
"""
Tetrahedral simplex used by the 3D GJK search.

A Tetrahedron always holds exactly four points in Minkowski space. GJK
refines it by replacing one vertex per step; each overlap query owns its
own instance and nothing else ever references it.

Face i is the triangle opposite vertex i:
  face 0 = (p1, p2, p3), face 1 = (p0, p2, p3),
  face 2 = (p0, p3, p1), face 3 = (p0, p2, p1)
"""
from __future__ import annotations

import math

import numpy as np

from ..util import cross3, f64, norm2

Vec3 = np.ndarray

# Vertex indices of the face opposite vertex i
_FACES: tuple[tuple[int, int, int], ...] = (
    (1, 2, 3),
    (0, 2, 3),
    (0, 3, 1),
    (0, 2, 1),
)


def closest_point_on_triangle(p: Vec3, a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    """
    Closest point to `p` on triangle (a, b, c).

    Classifies `p` against the Voronoi regions of the triangle's vertices,
    edges and face, in that order.
    Reference: Ericson, Real-Time Collision Detection, 5.1.5.
    """
    ab = b - a
    ac = c - a
    ap = p - a

    d1 = float(np.dot(ab, ap))
    d2 = float(np.dot(ac, ap))
    if d1 <= 0 and d2 <= 0:
        return a  # vertex region A

    bp = p - b
    d3 = float(np.dot(ab, bp))
    d4 = float(np.dot(ac, bp))
    if d3 >= 0 and d4 <= d3:
        return b  # vertex region B

    cp = p - c
    d5 = float(np.dot(ab, cp))
    d6 = float(np.dot(ac, cp))
    if d6 >= 0 and d5 <= d6:
        return c  # vertex region C

    vc = d1 * d4 - d3 * d2
    if vc <= 0 and d1 >= 0 and d3 <= 0:
        return a + ab * (d1 / (d1 - d3))  # edge AB

    vb = d5 * d2 - d1 * d6
    if vb <= 0 and d2 >= 0 and d6 <= 0:
        return a + ac * (d2 / (d2 - d6))  # edge AC

    va = d3 * d6 - d5 * d4
    if va <= 0 and (d4 - d3) >= 0 and (d5 - d6) >= 0:
        return b + (c - b) * ((d4 - d3) / ((d4 - d3) + (d5 - d6)))  # edge BC

    denom = va + vb + vc
    if denom == 0:
        # Zero-area triangle; every point is on the segment set already tested
        return a
    v = vb / denom
    w = vc / denom
    return a + ab * v + ac * w


def _same_side(a: Vec3, b: Vec3, c: Vec3, d: Vec3, tol: float = 0.0) -> bool:
    """
    True if the origin lies on the same side of plane (a, b, c) as d.

    The origin counts as inside when it is on the plane or at most `tol`
    beyond it. A flat tetrahedron (d on the plane) never contains it.
    """
    normal = cross3(b - a, c - a)
    length = math.sqrt(norm2(normal))
    dot_d = float(np.dot(normal, d - a))
    if length == 0.0 or dot_d == 0.0:
        return False
    # Signed distance of the origin from the plane, positive toward d
    dist_o = float(np.dot(normal, -a)) / length
    if dot_d < 0:
        dist_o = -dist_o
    return dist_o >= -tol


class Tetrahedron:
    """
    Four-point simplex in Minkowski space.

    Attributes:
        points: Array [4, 3] of vertices, in insertion order.
    """

    __slots__ = ("points",)

    def __init__(self, a: Vec3, b: Vec3, c: Vec3, d: Vec3) -> None:
        self.points = np.array([f64(a), f64(b), f64(c), f64(d)], dtype=np.float64)

    def __repr__(self) -> str:
        return f"Tetrahedron({self.points.tolist()})"

    def contains_origin(self, tol: float = 0.0) -> bool:
        """True if the closed tetrahedron, grown by `tol` per face, contains the origin."""
        p = self.points
        return (
            _same_side(p[0], p[1], p[2], p[3], tol)
            and _same_side(p[1], p[2], p[3], p[0], tol)
            and _same_side(p[2], p[3], p[0], p[1], tol)
            and _same_side(p[3], p[0], p[1], p[2], tol)
        )

    def closest_face(self) -> tuple[int, Vec3, float]:
        """
        Find the face nearest to the origin.

        All four faces are ranked by the squared distance from the origin
        to their closest point. Ties keep the first face. When the origin
        is outside the tetrahedron the winner holds the closest point of
        the whole solid, so the direction from that point to the origin
        separates the origin from the simplex.

        Returns:
            Tuple (index, closest, distance_sq) where index is the vertex
            opposite the face, closest the point of the face nearest to the
            origin and distance_sq its squared length.
        """
        p = self.points
        origin = np.zeros(3, dtype=np.float64)
        best_index = 0
        best_point = p[1]
        best_dist = math.inf

        for index, (i, j, k) in enumerate(_FACES):
            closest = closest_point_on_triangle(origin, p[i], p[j], p[k])
            dist = norm2(closest)
            if dist < best_dist:
                best_index, best_point, best_dist = index, closest, dist

        return best_index, best_point, best_dist

    def contains_vertex(self, vertex: Vec3, eps: float) -> bool:
        """True if `vertex` coincides with a simplex vertex (squared distance < eps²)."""
        diff = self.points - vertex
        return bool(np.any(np.einsum("ij,ij->i", diff, diff) < eps * eps))

    def replace(self, index: int, point: Vec3) -> None:
        """Replace vertex `index` with `point`."""
        self.points[index] = point
