import numpy as np
import pytest
from suspension_sim.collision.simplex import Tetrahedron, closest_point_on_triangle


def test_contains_origin():
    """Regular tetrahedron centered on the origin."""
    t = Tetrahedron((1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1))
    assert t.contains_origin()

    shifted = Tetrahedron((4, 1, 1), (4, -1, -1), (2, 1, -1), (2, -1, 1))
    assert not shifted.contains_origin()


def test_contains_origin_on_face():
    """The origin lying on a face counts as contained."""
    t = Tetrahedron((1, 0, 0), (-1, 1, 0), (-1, -1, 0), (0, 0, 1))
    assert t.contains_origin()


def test_flat_tetrahedron_contains_nothing():
    t = Tetrahedron((1, 0, 0), (-1, 1, 0), (-1, -1, 0), (0, 0.5, 0))
    assert not t.contains_origin()


def test_closest_point_on_triangle_regions():
    a = np.array([-1.0, -1.0, 0.0])
    b = np.array([1.0, -1.0, 0.0])
    c = np.array([0.0, 1.0, 0.0])

    # Face region
    assert closest_point_on_triangle(np.array([0.0, 0.0, 1.0]), a, b, c) == pytest.approx((0.0, 0.0, 0.0))
    # Vertex region
    assert closest_point_on_triangle(np.array([5.0, -5.0, 0.0]), a, b, c) == pytest.approx(b)
    # Edge region (AB)
    assert closest_point_on_triangle(np.array([0.0, -3.0, 2.0]), a, b, c) == pytest.approx((0.0, -1.0, 0.0))


def test_closest_face():
    """Origin below the base of a tall tetrahedron: the base is the closest face."""
    t = Tetrahedron((1, 0, 1), (-1, 1, 1), (-1, -1, 1), (0, 0, 3))
    index, closest, dist_sq = t.closest_face()

    assert index == 3  # face opposite the apex
    assert closest == pytest.approx((0.0, 0.0, 1.0))
    assert dist_sq == pytest.approx(1.0)


def test_closest_face_on_edge():
    """When the nearest feature is an edge, the point returned lies on that edge."""
    t = Tetrahedron((1, 1, 0), (1, -1, 0), (2, 0, 1), (2, 0, -1))
    index, closest, dist_sq = t.closest_face()

    assert closest == pytest.approx((1.0, 0.0, 0.0))
    assert dist_sq == pytest.approx(1.0)
    assert index in (2, 3)


def test_contains_origin_noise_on_edge():
    """Rounding noise can put the origin just outside an edge; a tolerance absorbs it."""
    t = Tetrahedron((1, 0, 0), (-1, 0, -1e-15), (0, 1, -1), (0, -1, -1))
    assert not t.contains_origin()
    assert t.contains_origin(tol=1e-9)


def test_replace_and_contains_vertex():
    t = Tetrahedron((4, 1, 1), (4, -1, -1), (2, 1, -1), (2, -1, 1))
    assert t.contains_vertex(np.array([4.0, 1.0, 1.0 + 1e-6]), eps=1e-4)
    assert not t.contains_vertex(np.array([0.0, 0.0, 0.0]), eps=1e-4)

    t.replace(0, np.array([-2.0, 0.0, 0.0]))
    assert t.points.shape == (4, 3)
    assert t.points[0] == pytest.approx((-2.0, 0.0, 0.0))
