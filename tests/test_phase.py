import math

import numpy as np
import pytest

from rendertoy.phase import (
    HenyeyGreensteinPhaseFunction,
    IsotropicPhaseFunction,
    PhaseFunction,
    henyey_greenstein,
)


@pytest.fixture
def rng():
    return np.random.default_rng(7)


def _integrate_over_sphere(g, steps=20000):
    cos = np.linspace(-1.0, 1.0, steps + 1)
    mid = 0.5 * (cos[1:] + cos[:-1])
    return 2.0 * math.pi * sum(henyey_greenstein(float(c), g) for c in mid) * (2.0 / steps)


def test_isotropic_value():
    phase = IsotropicPhaseFunction()
    assert phase.p([0, 0, 1], [1, 0, 0]) == pytest.approx(0.25 / math.pi)


def test_isotropic_sample(rng):
    phase = IsotropicPhaseFunction()
    wi, pdf = phase.sample_p([0, 0, 1], rng)
    assert np.linalg.norm(wi) == pytest.approx(1.0)
    assert pdf == pytest.approx(phase.p([0, 0, 1], wi))


def test_hg_zero_is_isotropic():
    for c in (-1.0, -0.3, 0.0, 0.7, 1.0):
        assert henyey_greenstein(c, 0.0) == pytest.approx(0.25 / math.pi)


@pytest.mark.parametrize("g", [-0.7, -0.2, 0.3, 0.8])
def test_hg_normalised(g):
    assert _integrate_over_sphere(g) == pytest.approx(1.0, rel=1e-3)


@pytest.mark.parametrize("g", [0.0, 0.5, -0.5, 0.9])
def test_hg_sample_pdf_matches_value(g, rng):
    phase = HenyeyGreensteinPhaseFunction(g)
    wo = np.array([0.3, -0.4, 0.866])
    wo /= np.linalg.norm(wo)
    for _ in range(50):
        wi, pdf = phase.sample_p(wo, rng)
        assert np.linalg.norm(wi) == pytest.approx(1.0)
        assert pdf == pytest.approx(phase.p(wo, wi), rel=1e-6)


def test_hg_forward_scattering_prefers_wo(rng):
    phase = HenyeyGreensteinPhaseFunction(0.9)
    wo = np.array([0.0, 0.0, 1.0])
    dots = [float(np.dot(phase.sample_p(wo, rng)[0], wo)) for _ in range(500)]
    assert np.mean(dots) > 0.5


def test_phase_function_is_abstract():
    with pytest.raises(TypeError):
        PhaseFunction()