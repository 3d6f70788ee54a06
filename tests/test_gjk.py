import logging

import numpy as np
import pytest
from suspension_sim.collision.gjk import GJKSettings, gjk_intersect, overlaps
from suspension_sim.collision.shapes import closest_point
from suspension_sim.collision.simplex import Tetrahedron
from suspension_sim.errors import InvalidArgument, UnsupportedShape
from suspension_sim.types import Box, Collider, Cylinder, Pose, Sphere, Unsupported


def _unit_box(x: float) -> Box:
    return Box(Pose(position=(x, 0.0, 0.0)), half_extents=(0.5, 0.5, 0.5))


def test_overlapping_spheres():
    a = Sphere((0.0, 0.0, 0.0), 1.0)
    b = Sphere((1.5, 0.0, 0.0), 1.0)
    assert overlaps(a, b)
    assert overlaps(b, a)


def test_separated_spheres():
    a = Sphere((0.0, 0.0, 0.0), 1.0)
    b = Sphere((3.0, 0.0, 0.0), 1.0)
    assert not overlaps(a, b)
    assert not overlaps(b, a)


def test_touching_boxes_do_not_overlap():
    """Face-to-face contact with zero penetration is not an overlap."""
    assert not overlaps(_unit_box(0.0), _unit_box(1.0))
    assert not overlaps(_unit_box(1.0), _unit_box(0.0))


def test_slightly_penetrating_boxes_overlap():
    # 2e-4 of penetration, twice the default tolerance
    assert overlaps(_unit_box(0.0), _unit_box(1.0 - 2e-4))


def test_deep_overlap_box_in_box():
    """A small box well inside a large one."""
    big = Box(Pose(), half_extents=(1.0, 1.0, 1.0))
    small = Box(Pose(position=(0.1, 0.0, 0.0)), half_extents=(0.2, 0.2, 0.2))
    assert overlaps(big, small)


def test_concentric_spheres():
    """Coincident reference points fall back to a fixed seed direction."""
    assert overlaps(Sphere((0.0, 0.0, 0.0), 1.0), Sphere((0.0, 0.0, 0.0), 1.0))


def test_sphere_far_from_box_diagonal():
    box = Box(Pose(), half_extents=(1.0, 1.0, 1.0))
    sphere = Sphere((3.0, 3.0, 3.0), 0.5)
    assert not overlaps(box, sphere)
    assert not overlaps(sphere, box)


def test_wheel_cylinder_on_ground():
    """A horizontal wheel cylinder sunk 5 cm into a ground slab."""
    ground = Box(Pose(position=(0.0, 0.0, -0.5)), half_extents=(2.0, 2.0, 0.5))
    wheel = Cylinder.centered_at((0.0, 0.0, 0.25), (0.0, 1.0, 0.0), radius=0.3, height=0.4)
    assert overlaps(ground, wheel) == overlaps(wheel, ground)
    assert overlaps(ground, wheel)

    lifted = Cylinder.centered_at((0.0, 0.0, 0.5), (0.0, 1.0, 0.0), radius=0.3, height=0.4)
    assert not overlaps(ground, lifted)
    assert not overlaps(lifted, ground)


def test_collider_operands():
    """Colliders are unwrapped to their shapes."""
    a = Collider(Sphere((0.0, 0.0, 0.0), 1.0), name="rock")
    b = Sphere((1.5, 0.0, 0.0), 1.0)
    assert overlaps(a, b)
    assert overlaps(b, a)


def test_missing_operand_raises():
    with pytest.raises(InvalidArgument):
        overlaps(None, Sphere((0.0, 0.0, 0.0), 1.0))
    with pytest.raises(InvalidArgument):
        overlaps(Sphere((0.0, 0.0, 0.0), 1.0), None)


def test_unsupported_shape_reports_no_overlap(caplog):
    """Unsupported kinds never overlap and leave a warning behind."""
    sphere = Sphere((0.0, 0.0, 0.0), 1.0)
    with caplog.at_level(logging.WARNING):
        assert not overlaps(Unsupported("terrain"), sphere)
        assert not overlaps(sphere, Collider(Unsupported("mesh")))
    assert "terrain" in caplog.text
    assert "mesh" in caplog.text

    # The raw tester propagates the error
    with pytest.raises(UnsupportedShape):
        gjk_intersect(sphere, Unsupported("capsule"))


def test_epsilon_setting():
    """A coarse tolerance rejects overlaps that don't pass the origin by enough."""
    a = Sphere((0.0, 0.0, 0.0), 1.0)
    b = Sphere((1.5, 0.0, 0.0), 1.0)
    assert not overlaps(a, b, GJKSettings(epsilon=5.0))
    assert overlaps(a, b, GJKSettings())


def test_iteration_bound_logs_error(monkeypatch, caplog):
    monkeypatch.setattr(Tetrahedron, "contains_origin", lambda self, tol=0.0: False)
    a = Sphere((0.0, 0.0, 0.0), 1.0)
    b = Sphere((1.5, 0.0, 0.0), 1.0)
    with caplog.at_level(logging.ERROR):
        assert not overlaps(a, b, GJKSettings(max_iterations=0))
    assert "no conclusion" in caplog.text


def test_thin_box_grazing_cylinder_rim(caplog):
    """A plate skimming the top of a cylinder is resolved without hitting the iteration bound."""
    rim = Cylinder(Pose(), radius=0.5, height=1.0)

    def plate(bottom: float) -> Box:
        return Box(Pose(position=(0.5, 0.0, bottom + 1e-3)), half_extents=(0.6, 0.4, 1e-3))

    with caplog.at_level(logging.ERROR):
        assert not overlaps(plate(0.505), rim)
        assert not overlaps(rim, plate(0.505))
        assert overlaps(plate(0.495), rim)
        assert overlaps(rim, plate(0.495))
    assert "no conclusion" not in caplog.text


def test_overlapping_spheres_in_general_position():
    """Off-axis sphere pairs keep the origin on a simplex edge; they still overlap."""
    a = Sphere((1.53, 0.04, -0.62), 1.0)
    b = Sphere((1.98, -0.74, -1.27), 1.0)
    assert overlaps(a, b)
    assert overlaps(b, a)


# =============================================================================
# Randomized checks against exact answers
# =============================================================================

MARGIN = 1e-2


def _random_pose(rng, spread: float) -> Pose:
    return Pose.looking_at(rng.uniform(-spread, spread, 3), rng.normal(size=3), rng.normal(size=3))


def _random_shape(rng, kind: str):
    if kind == "box":
        return Box(_random_pose(rng, 0.5), half_extents=rng.uniform(0.1, 0.8, 3))
    if kind == "cylinder":
        return Cylinder(_random_pose(rng, 0.5), radius=float(rng.uniform(0.1, 0.6)), height=float(rng.uniform(0.2, 1.2)))
    return Sphere(rng.uniform(-0.5, 0.5, 3), radius=float(rng.uniform(0.1, 0.8)))


@pytest.mark.parametrize("kind", ["sphere", "box", "cylinder"])
def test_sphere_pairs_match_closest_point_distance(kind):
    """
    A sphere overlaps a shape iff the shape's closest point to its center is
    nearer than its radius. Pairs within MARGIN of touching are skipped.
    """
    rng = np.random.default_rng(2024)
    hits = misses = 0
    for _ in range(150):
        shape = _random_shape(rng, kind)
        sphere = Sphere(rng.uniform(-1.5, 1.5, 3), radius=float(rng.uniform(0.1, 0.8)))

        gap = float(np.linalg.norm(closest_point(shape, sphere.center) - sphere.center)) - sphere.radius
        if abs(gap) < MARGIN:
            continue
        expected = gap < 0

        assert overlaps(sphere, shape) == expected, (sphere, shape, gap)
        assert overlaps(shape, sphere) == expected, (sphere, shape, gap)
        hits += expected
        misses += not expected

    assert hits > 10 and misses > 10


def _box_gap(a: Box, b: Box) -> float:
    """
    Separating-axis value of two boxes: the largest projected gap over the
    15 candidate axes. Positive means separated by at least that much,
    negative is minus the penetration depth.
    """
    axes_a = [a.pose.rotation[:, i] for i in range(3)]
    axes_b = [b.pose.rotation[:, i] for i in range(3)]
    axes = axes_a + axes_b
    for u in axes_a:
        for v in axes_b:
            c = np.cross(u, v)
            n = np.linalg.norm(c)
            if n > 1e-6:
                axes.append(c / n)

    offset = b.pose.position - a.pose.position
    best = -np.inf
    for axis in axes:
        ra = sum(abs(float(np.dot(u, axis))) * h for u, h in zip(axes_a, a.half_extents))
        rb = sum(abs(float(np.dot(v, axis))) * h for v, h in zip(axes_b, b.half_extents))
        best = max(best, abs(float(np.dot(offset, axis))) - ra - rb)
    return best


def test_box_pairs_match_separating_axes():
    rng = np.random.default_rng(99)
    hits = misses = 0
    for _ in range(150):
        a = _random_shape(rng, "box")
        b = Box(_random_pose(rng, 1.5), half_extents=rng.uniform(0.1, 0.8, 3))

        gap = _box_gap(a, b)
        if abs(gap) < MARGIN:
            continue
        expected = gap < 0

        assert overlaps(a, b) == expected, (a, b, gap)
        assert overlaps(b, a) == expected, (a, b, gap)
        hits += expected
        misses += not expected

    assert hits > 10 and misses > 10
