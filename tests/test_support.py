import numpy as np
import pytest
from suspension_sim.types import Pose, Box, Sphere, Cylinder, Unsupported
from suspension_sim.collision.shapes import furthest_point, closest_point, supported, world_position
from suspension_sim.errors import UnsupportedShape, InvalidArgument


def _unit(*v):
    v = np.array(v, dtype=np.float64)
    return v / np.linalg.norm(v)


def test_box_support_axis_aligned():
    """Diagonal direction picks the matching corner."""
    box = Box(Pose(position=(1.0, 2.0, 3.0)), half_extents=(1.0, 2.0, 3.0))
    p = furthest_point(box, _unit(1, 1, 1))
    assert p == pytest.approx((2.0, 4.0, 6.0))

    p = furthest_point(box, _unit(-1, 1, -1))
    assert p == pytest.approx((0.0, 4.0, 0.0))


def test_box_support_rotated():
    """Box turned 90° about z: its local forward points along world +y."""
    box = Box(Pose.looking_at((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)), half_extents=(2.0, 1.0, 0.5))

    # World +x is the box's local -left, so the reach is hy = 1
    p = furthest_point(box, _unit(1.0, 0.1, 0.1))
    assert p == pytest.approx((1.0, 2.0, 0.5))


def test_sphere_support():
    s = Sphere(center=(1.0, 0.0, 0.0), radius=2.0)
    assert furthest_point(s, np.array([0.0, 1.0, 0.0])) == pytest.approx((1.0, 2.0, 0.0))


def test_cylinder_support_along_axis_hits_far_cap():
    """Querying along the cylinder's own forward axis returns the far cap center."""
    cyl = Cylinder(Pose(), radius=0.5, height=2.0)
    assert furthest_point(cyl, np.array([1.0, 0.0, 0.0])) == pytest.approx((2.0, 0.0, 0.0))
    assert furthest_point(cyl, np.array([-1.0, 0.0, 0.0])) == pytest.approx((0.0, 0.0, 0.0))


def test_cylinder_support_radial_hits_near_cap_rim():
    """A purely radial direction returns a point on the base cap's rim."""
    cyl = Cylinder(Pose(), radius=0.5, height=2.0)
    assert furthest_point(cyl, np.array([0.0, 0.0, 1.0])) == pytest.approx((0.0, 0.0, 0.5))
    assert furthest_point(cyl, np.array([0.0, -1.0, 0.0])) == pytest.approx((0.0, -0.5, 0.0))


def test_cylinder_support_oblique_hits_far_rim():
    cyl = Cylinder(Pose(), radius=0.5, height=2.0)
    assert furthest_point(cyl, _unit(1, 0, 1)) == pytest.approx((2.0, 0.0, 0.5))


def test_cylinder_centered_at():
    """The wheel cylinder is centered on its midpoint and aligned with its axis."""
    cyl = Cylinder.centered_at(center=(0.0, 0.0, 1.0), axis=(0.0, 1.0, 0.0), radius=0.3, height=0.4)

    assert world_position(cyl) == pytest.approx((0.0, -0.2, 1.0))
    assert furthest_point(cyl, np.array([0.0, 1.0, 0.0])) == pytest.approx((0.0, 0.2, 1.0))
    assert furthest_point(cyl, np.array([0.0, 0.0, -1.0])) == pytest.approx((0.0, -0.2, 0.7))


def test_support_maximizes_dot():
    """No sampled surface point beats the support point along the query direction."""
    rng = np.random.default_rng(7)
    box = Box(Pose.looking_at((0.3, -0.2, 0.1), (1.0, 1.0, 0.0)), half_extents=(0.5, 0.2, 0.7))
    corners = [
        box.pose.point_to_world(np.array([sx, sy, sz]) * box.half_extents)
        for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)
    ]
    for _ in range(20):
        d = rng.normal(size=3)
        d /= np.linalg.norm(d)
        best = max(float(np.dot(c, d)) for c in corners)
        assert float(np.dot(furthest_point(box, d), d)) == pytest.approx(best)


def test_unsupported_shape_raises():
    with pytest.raises(UnsupportedShape):
        furthest_point(Unsupported("capsule"), np.array([1.0, 0.0, 0.0]))
    with pytest.raises(UnsupportedShape):
        world_position(Unsupported("terrain"))
    with pytest.raises(UnsupportedShape):
        closest_point(Unsupported("mesh"), (0.0, 0.0, 0.0))

    assert not supported(Unsupported("hull"))
    assert supported(Sphere((0, 0, 0), 1.0))


def test_invalid_dimensions():
    with pytest.raises(InvalidArgument):
        Sphere((0, 0, 0), 0.0)
    with pytest.raises(InvalidArgument):
        Cylinder(Pose(), radius=1.0, height=-1.0)
    with pytest.raises(InvalidArgument):
        Box(Pose(), half_extents=(1.0, -1.0, 1.0))


def test_closest_point():
    box = Box(Pose(), half_extents=(1.0, 1.0, 1.0))
    assert closest_point(box, (3.0, 0.5, -2.0)) == pytest.approx((1.0, 0.5, -1.0))
    # Inside: the point itself
    assert closest_point(box, (0.2, 0.1, 0.0)) == pytest.approx((0.2, 0.1, 0.0))

    sphere = Sphere((0.0, 0.0, 0.0), 2.0)
    assert closest_point(sphere, (0.0, 4.0, 0.0)) == pytest.approx((0.0, 2.0, 0.0))

    cyl = Cylinder(Pose(), radius=0.5, height=2.0)
    assert closest_point(cyl, (3.0, 0.0, 2.0)) == pytest.approx((2.0, 0.0, 0.5))
    assert closest_point(cyl, (-1.0, 0.1, 0.0)) == pytest.approx((0.0, 0.1, 0.0))
