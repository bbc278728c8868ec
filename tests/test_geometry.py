import numpy as np
import pytest

from rendertoy.geometry import (
    Hit,
    Triangle,
    sdf_gradient,
    sdf_intersect,
    sdf_negate,
    sdf_round,
    sdf_smooth_union,
    sdf_subtract,
    sdf_translate,
    sdf_twist,
    sdf_union,
)


def sphere(p):
    return float(np.linalg.norm(p)) - 1.0


def offset_sphere(p):
    return float(np.linalg.norm(np.asarray(p) - np.array([1.5, 0.0, 0.0]))) - 1.0


@pytest.fixture
def tri():
    return Triangle(
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0),
        (1.0, 0.0),
        (0.0, 1.0),
        (0.0, 0.0, 1.0),
        (0.0, 0.0, 1.0),
        (0.0, 0.0, 1.0),
        material="mat",
    )


def test_intersect_hit(tri):
    hit = tri.intersect((0.2, 0.3, 1.0), (0.0, 0.0, -1.0))
    assert isinstance(hit, Hit)
    assert hit.t == pytest.approx(1.0)
    assert np.allclose(hit.coord, [0.2, 0.3, 0.0])
    assert np.allclose(hit.uv, [0.2, 0.3])
    assert np.allclose(hit.wo, [0.0, 0.0, 1.0])
    assert hit.primitive is tri
    assert hit.material == "mat"
    assert np.allclose(hit.geometry_normal, [0.0, 0.0, 1.0])


def test_intersect_miss_outside(tri):
    assert tri.intersect((0.8, 0.8, 1.0), (0.0, 0.0, -1.0)) is None
    assert tri.intersect((-0.1, 0.2, 1.0), (0.0, 0.0, -1.0)) is None


def test_intersect_parallel_ray_misses(tri):
    assert tri.intersect((0.2, 0.2, 1.0), (1.0, 0.0, 0.0)) is None


def test_intersect_behind_or_too_close(tri):
    assert tri.intersect((0.2, 0.2, -1.0), (0.0, 0.0, -1.0)) is None
    assert tri.intersect((0.2, 0.2, 0.0), (0.0, 0.0, -1.0)) is None


def test_geometry_normal_faces_ray():
    t = Triangle(
        (0, 0, 0), (1, 0, 0), (0, 1, 0),
        n0=(0, 0, -1), n1=(0, 0, -1), n2=(0, 0, -1),
    )
    hit = t.intersect((0.2, 0.2, 1.0), (0.0, 0.0, -1.0))
    assert np.allclose(hit.geometry_normal, [0.0, 0.0, 1.0])
    assert np.allclose(hit.shading_normal, [0.0, 0.0, -1.0])


def test_bounding_box_and_center():
    t = Triangle((1, -2, 3), (4, 5, -6), (-7, 8, 9))
    lo, hi = t.bounding_box()
    assert np.allclose(lo, [-7, -2, -6])
    assert np.allclose(hi, [4, 8, 9])
    assert np.allclose(t.center(), [-2 / 3, 11 / 3, 2.0])


def test_area_of_unit_right_triangle(tri):
    assert tri.area() == pytest.approx(0.5)


def test_area_invariant_under_translation(tri):
    shift = np.array([3.0, -1.0, 2.0])
    moved = Triangle(*(v + shift for v in tri.vertices))
    assert moved.area() == pytest.approx(tri.area())


def test_normal_at_interpolates():
    t = Triangle(
        (0, 0, 0), (1, 0, 0), (0, 1, 0),
        n0=(1, 0, 0), n1=(0, 1, 0), n2=(0, 0, 1),
    )
    assert np.allclose(t.normal_at((0.0, 0.0)), [1, 0, 0])
    assert np.allclose(t.normal_at((1.0, 0.0)), [0, 1, 0])
    assert np.allclose(t.normal_at((0.0, 1.0)), [0, 0, 1])


def test_pdf_scales_with_distance_squared(tri):
    near = tri.pdf((0.0, 0.0, -1.0), (0.2, 0.2))
    far = tri.pdf((0.0, 0.0, -2.0), (0.2, 0.2))
    assert near > 0
    assert far == pytest.approx(4.0 * near)


def test_pdf_zero_for_grazing_view(tri):
    assert tri.pdf((1.0, 0.0, 0.0), (0.2, 0.2)) == 0.0


def test_pdf_zero_without_normals():
    t = Triangle((0, 0, 0), (1, 0, 0), (0, 1, 0))
    assert t.pdf((0.0, 0.0, -1.0), (0.2, 0.2)) == 0.0


def test_sample_point_inside(tri):
    rng = np.random.default_rng(0)
    for _ in range(200):
        uv, coord, normal = tri.sample_point(rng)
        u, v = uv
        assert 0.0 <= u <= 1.0 and 0.0 <= v <= 1.0 and u + v <= 1.0 + 1e-12
        assert np.allclose(coord, [u, v, 0.0])
        assert np.allclose(normal, [0.0, 0.0, 1.0])


def test_union_and_intersect():
    p = np.array([0.5, 0.0, 0.0])
    assert sdf_union(sphere, offset_sphere)(p) == pytest.approx(min(sphere(p), offset_sphere(p)))
    assert sdf_intersect(sphere, offset_sphere)(p) == pytest.approx(
        max(sphere(p), offset_sphere(p))
    )


def test_negate_and_subtract():
    p = np.array([0.2, 0.1, 0.0])
    assert sdf_negate(sphere)(p) == pytest.approx(-sphere(p))
    assert sdf_subtract(sphere, offset_sphere)(p) == pytest.approx(
        max(sphere(p), -offset_sphere(p))
    )


def test_round_and_translate():
    p = np.array([2.0, 0.0, 0.0])
    assert sdf_round(sphere)(p) == pytest.approx(sphere(p) - 0.2)
    assert sdf_round(sphere, 0.5)(p) == pytest.approx(sphere(p) - 0.5)
    moved = sdf_translate(sphere, (1.5, 0.0, 0.0))
    for q in ([0.0, 0.0, 0.0], [1.5, 1.0, 0.0], [3.0, 0.2, -1.0]):
        assert moved(np.array(q)) == pytest.approx(offset_sphere(np.array(q)))


def test_smooth_union_bounds():
    blended = sdf_smooth_union(sphere, offset_sphere, 0.3)
    for x in np.linspace(-2.0, 3.0, 21):
        p = np.array([x, 0.4, 0.0])
        assert blended(p) <= min(sphere(p), offset_sphere(p)) + 1e-12


def test_smooth_union_far_apart_equals_min():
    far = sdf_translate(sphere, (10.0, 0.0, 0.0))
    blended = sdf_smooth_union(sphere, far)
    p = np.array([0.0, 0.0, 0.0])
    assert blended(p) == pytest.approx(sphere(p))


def test_twist_ignores_coordinate():
    twisted = sdf_twist(sphere, (1.0, 2.0, 0.5), 0.7)
    assert twisted(np.zeros(3)) == pytest.approx(twisted(np.array([5.0, -3.0, 2.0])))
    assert twisted(np.zeros(3)) == pytest.approx(sphere(np.array([1.0, 2.0, 0.5])))


def test_twist_with_zero_k_is_identity_at_p():
    p = np.array([0.3, -0.4, 1.2])
    assert sdf_twist(sphere, p, 0.0)(np.zeros(3)) == pytest.approx(sphere(p))


def test_gradient_of_sphere_points_outward():
    for direction in ([1, 0, 0], [0, -1, 0], [0, 0, 1]):
        d = np.array(direction, dtype=float)
        g = sdf_gradient(sphere, 2.0 * d)
        assert np.linalg.norm(g) == pytest.approx(1.0)
        assert np.allclose(g, d, atol=1e-3)


def test_gradient_of_constant_is_nan():
    g = sdf_gradient(lambda p: 1.0, np.zeros(3))
    assert np.isnan(np.asarray(g, dtype=float)).tolist() == [True, True, True]