# MIT License (see LICENSE)
"""
Gilbert-Johnson-Keerthi (GJK) algorithm for 3D convex intersection testing.

This module implements GJK to answer a single yes/no question: do two
convex shapes overlap? It works in Minkowski space and builds a
tetrahedral simplex that tries to enclose the origin.

Key concepts:
- Support function: Returns the farthest point on a shape in a given direction.
- Minkowski difference: The set A - B contains the origin iff A and B intersect.
- Simplex: 4 points that evolve toward containing the origin.

Every progress check uses the same tolerance (GJKSettings.epsilon). A pair
is reported separate when a search direction is found along which A - B
does not pass the origin by more than epsilon. It is reported overlapping
once the simplex, which always lies inside A - B, encloses the origin or
comes within epsilon of it. Aligned boxes touching along their center line
are rejected by the first support point; other pairs this close to contact
may go either way.

Every step queries A along the search direction d and B along -d. Swapping
the operands negates every Minkowski point and every direction, so outside
that tolerance band the answer does not depend on operand order.

Usage:
    hit = overlaps(Sphere((0, 0, 0), 1.0), collider)
"""
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np

from ..constants import GJK_EPSILON, GJK_MAX_ITERATIONS
from ..errors import DegenerateGeometry, InvalidArgument, UnsupportedShape
from ..types import Collider, Shape3D
from ..util import any_perpendicular, cross3, norm, norm2, unit
from .shapes import furthest_point, world_position
from .simplex import Tetrahedron

logger = logging.getLogger(__name__)

Vec3 = np.ndarray

_FALLBACK_DIRECTION = np.array([1.0, 0.0, 0.0], dtype=np.float64)


@dataclass(frozen=True)
class GJKSettings:
    """
    Tunable parameters of the intersection tester.

    Attributes:
        epsilon: Progress tolerance of every plane-side test. A support
                 point must pass the origin by more than this to count.
        max_iterations: Simplex refinement bound before giving up.
    """
    epsilon: float = GJK_EPSILON
    max_iterations: int = GJK_MAX_ITERATIONS


DEFAULT_SETTINGS = GJKSettings()


def support(a: Shape3D, b: Shape3D, d: Vec3) -> Vec3:
    """
    Compute a support point in Minkowski difference space.

    The Minkowski support is: supA(d) - supB(-d), which gives a point
    on the boundary of the Minkowski difference A - B.

    Args:
        a: Shape A.
        b: Shape B.
        d: Unit direction vector to search.

    Returns:
        Support point in Minkowski space as [x, y, z].
    """
    return furthest_point(a, d) - furthest_point(b, -d)


def _as_shape(operand: Shape3D | Collider | None, name: str) -> Shape3D:
    if operand is None:
        raise InvalidArgument(f"{name} must not be None")
    if isinstance(operand, Collider):
        if operand.shape is None:
            raise InvalidArgument(f"{name} collider has no shape")
        return operand.shape
    return operand


def overlaps(
    a: Shape3D | Collider,
    b: Shape3D | Collider,
    settings: GJKSettings | None = None,
) -> bool:
    """
    Test whether two convex shapes overlap.

    The order of the operands doesn't matter: overlaps(a, b) == overlaps(b, a).

    Args:
        a: First shape or collider.
        b: Second shape or collider.
        settings: Tolerance and iteration bound. Defaults to GJKSettings().

    Returns:
        True if the shapes intersect. Pairs within epsilon of touching may
        go either way.
        Unsupported shapes and unresolved (degenerate) queries report False.

    Raises:
        InvalidArgument: If an operand is missing.
    """
    shape_a = _as_shape(a, "a")
    shape_b = _as_shape(b, "b")
    settings = settings or DEFAULT_SETTINGS

    try:
        return gjk_intersect(shape_a, shape_b, settings.epsilon, settings.max_iterations)
    except UnsupportedShape as exc:
        logger.warning("Intersection test skipped: %s", exc)
        return False
    except DegenerateGeometry as exc:
        logger.error("Degenerate geometry in intersection test: %s", exc)
        return False


def gjk_intersect(
    a: Shape3D,
    b: Shape3D,
    eps: float = GJK_EPSILON,
    max_iters: int = GJK_MAX_ITERATIONS,
) -> bool:
    """
    Run the GJK search on two shapes.

    Args:
        a: Shape A.
        b: Shape B.
        eps: Progress tolerance for plane-side tests. Default 1e-4.
        max_iters: Maximum refinement iterations. Default 64.

    Returns:
        True once the simplex encloses the origin or comes within `eps`
        of it, False as soon as a search direction fails to make progress
        past it.

    Raises:
        UnsupportedShape: If either shape has no support mapping.
        DegenerateGeometry: If the iteration bound is exhausted or the
                            simplex distances are not finite.
    """
    d = unit(world_position(b) - world_position(a))
    if norm2(d) == 0:
        d = _FALLBACK_DIRECTION

    # First point, toward the other shape
    p0 = support(a, b, d)

    # Second point, from the first one toward the origin
    d = unit(-p0)
    p1 = support(a, b, d)
    if float(np.dot(d, p1)) <= eps:
        return False

    # Third point, perpendicular to the edge and toward the origin
    edge = p1 - p0
    edge_len = norm(edge)
    toward = cross3(edge, d)
    if norm(toward) <= eps * edge_len:
        # Origin (numerically) on the line through the edge
        d = any_perpendicular(edge)
    else:
        d = unit(cross3(toward, edge))
    p2 = support(a, b, d)
    if float(np.dot(d, p2)) <= eps:
        return False

    # Fourth point, along the triangle normal on the origin's side
    normal = cross3(edge, p2 - p0)
    if norm(normal) <= eps * edge_len:
        # P2 on the edge's line: any normal of the plane (edge, d) will do
        normal = cross3(edge, d)
    d = unit(normal)
    side = float(np.dot(d, p0))
    if side > eps:
        d = -d
    if abs(side) <= eps:
        # Origin (almost) in the triangle's plane: keep whichever side advances more
        p3 = support(a, b, d)
        p3_flip = support(a, b, -d)
        if float(np.dot(-d, p3_flip)) > float(np.dot(d, p3)):
            d, p3 = -d, p3_flip
    else:
        p3 = support(a, b, d)
    if float(np.dot(d, p3)) <= eps:
        return False

    simplex = Tetrahedron(p0, p1, p2, p3)
    if simplex.contains_origin():
        return True

    eps_sq = eps * eps
    for _ in range(max_iters):
        index, closest, dist = simplex.closest_face()
        if not np.isfinite(dist):
            raise DegenerateGeometry(f"simplex distance is not finite: {simplex!r}")
        if dist <= eps_sq:
            # The simplex lies inside A - B, so the origin is within eps of it
            return True

        # Search from the closest point toward the origin
        n = -closest / np.sqrt(dist)
        p_new = support(a, b, n)
        if float(np.dot(n, p_new)) <= eps or simplex.contains_vertex(p_new, eps):
            return False

        simplex.replace(index, p_new)
        if simplex.contains_origin():
            return True

    raise DegenerateGeometry(f"no conclusion after {max_iters} iterations")
