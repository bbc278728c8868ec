"""Microfacet normal distributions used by glossy reflection and transmission."""

from __future__ import annotations

import abc
import math
from typing import Any, Sequence, Tuple

import numpy as np

from .vecmath import (
    _divide,
    abs_cos_theta,
    abs_dot,
    cos2_phi,
    cos2_theta,
    cos_phi,
    cos_theta,
    erf,
    erf_inv,
    same_hemisphere,
    sin2_phi,
    sin_phi,
    spherical_direction,
    tan2_theta,
    tan_theta,
)

_SQRT_PI_INV = 1.0 / math.sqrt(math.pi)


def roughness_to_alpha(roughness: float) -> float:
    """Map a perceptual roughness in ``[0, 1]`` to a Beckmann alpha."""
    x = math.log(max(roughness, 1e-3))
    return (
        1.62142
        + 0.819955 * x
        + 0.1734 * x * x
        + 0.0171201 * x * x * x
        + 0.000640711 * x * x * x * x
    )


def _beckmann_sample11(cos_theta_i: float, u1: float, u2: float) -> Tuple[float, float]:
    """Sample slopes of the unit-roughness Beckmann distribution seen from ``theta_i``."""
    if cos_theta_i > 0.9999:
        r = math.sqrt(-math.log(1.0 - u1))
        phi = 2.0 * math.pi * u2
        return r * math.cos(phi), r * math.sin(phi)

    sin_theta_i = math.sqrt(max(0.0, 1.0 - cos_theta_i * cos_theta_i))
    tan_theta_i = _divide(sin_theta_i, cos_theta_i)
    cot_theta_i = _divide(1.0, tan_theta_i)

    # Search interval, parameterised in the erf() domain.
    a = -1.0
    c = erf(cot_theta_i)
    sample_x = max(u1, 1e-6)

    theta_i = math.acos(cos_theta_i)
    fit = 1.0 + theta_i * (-0.876 + theta_i * (0.4265 - 0.0594 * theta_i))
    b = c - (1.0 + c) * math.pow(1.0 - sample_x, fit)

    normalization = _divide(
        1.0,
        1.0 + c + _SQRT_PI_INV * tan_theta_i * math.exp(-cot_theta_i * cot_theta_i),
    )

    for _ in range(9):
        # Written so that a NaN in b also falls back to bisection.
        if not (a <= b <= c):
            b = 0.5 * (a + c)
        inv_erf = erf_inv(b)
        value = (
            normalization
            * (1.0 + b + _SQRT_PI_INV * tan_theta_i * math.exp(-inv_erf * inv_erf))
            - sample_x
        )
        derivative = normalization * (1.0 - inv_erf * tan_theta_i)
        if abs(value) < 1e-5:
            break
        if value > 0:
            c = b
        else:
            a = b
        b -= _divide(value, derivative)

    slope_x = erf_inv(b)
    slope_y = erf_inv(2.0 * max(u2, 1e-6) - 1.0)
    return slope_x, slope_y


def beckmann_sample(
    wi: Sequence[float], alpha_x: float, alpha_y: float, u1: float, u2: float
) -> np.ndarray:
    """Sample a microfacet normal from the Beckmann visible-normal distribution."""
    wi = np.asarray(wi, dtype=float)
    stretched = np.array([alpha_x * wi[0], alpha_y * wi[1], wi[2]])
    stretched /= np.linalg.norm(stretched)

    slope_x, slope_y = _beckmann_sample11(cos_theta(stretched), u1, u2)

    cp, sp = cos_phi(stretched), sin_phi(stretched)
    slope_x, slope_y = cp * slope_x - sp * slope_y, sp * slope_x + cp * slope_y

    slope_x *= alpha_x
    slope_y *= alpha_y

    wh = np.array([-slope_x, -slope_y, 1.0])
    return wh / np.linalg.norm(wh)


class MicrofacetDistribution(abc.ABC):
    """Distribution of microfacet normals in the local shading frame."""

    def __init__(self, sample_visible_area: bool) -> None:
        self.sample_visible_area = sample_visible_area

    @abc.abstractmethod
    def d(self, wh: Any) -> float:
        """Differential area of microfacets with normal ``wh``."""

    @abc.abstractmethod
    def lambda_(self, w: Any) -> float:
        """Smith auxiliary function for direction ``w``."""

    def g1(self, w: Any) -> float:
        return 1.0 / (1.0 + self.lambda_(w))

    def g(self, wo: Any, wi: Any) -> float:
        return 1.0 / (1.0 + self.lambda_(wo) + self.lambda_(wi))

    @abc.abstractmethod
    def sample_wh(self, wo: Any, u: Sequence[float]) -> np.ndarray:
        """Sample a microfacet normal for outgoing direction ``wo``."""

    def pdf(self, wo: Any, wh: Any) -> float:
        """Density of :meth:`sample_wh` producing ``wh``."""
        if self.sample_visible_area:
            return _divide(
                self.d(wh) * self.g1(wo) * abs_dot(wo, wh), abs_cos_theta(wo)
            )
        return self.d(wh) * abs_cos_theta(wh)


class BeckmannDistribution(MicrofacetDistribution):
    """Anisotropic Beckmann-Spizzichino distribution."""

    def __init__(
        self, alphax: float, alphay: float, sample_visible_area: bool = True
    ) -> None:
        super().__init__(sample_visible_area)
        self.alphax = max(0.001, alphax)
        self.alphay = max(0.001, alphay)

    def d(self, wh: Any) -> float:
        t2 = tan2_theta(wh)
        if math.isinf(t2) or math.isnan(t2):
            return 0.0
        cos4 = cos2_theta(wh) ** 2
        ax, ay = self.alphax, self.alphay
        return math.exp(
            -t2 * (cos2_phi(wh) / (ax * ax) + sin2_phi(wh) / (ay * ay))
        ) / (math.pi * ax * ay * cos4)

    def lambda_(self, w: Any) -> float:
        abs_tan = abs(tan_theta(w))
        if math.isinf(abs_tan) or abs_tan == 0.0:
            return 0.0
        alpha = math.sqrt(
            cos2_phi(w) * self.alphax * self.alphax
            + sin2_phi(w) * self.alphay * self.alphay
        )
        a = 1.0 / (alpha * abs_tan)
        if a >= 1.6:
            return 0.0
        return (1.0 - 1.259 * a + 0.396 * a * a) / (3.535 * a + 2.181 * a * a)

    def sample_wh(self, wo: Any, u: Sequence[float]) -> np.ndarray:
        wo = np.asarray(wo, dtype=float)
        u0, u1 = float(u[0]), float(u[1])
        if not self.sample_visible_area:
            log_sample = math.log(1.0 - u0)
            ax, ay = self.alphax, self.alphay
            if ax == ay:
                t2 = -ax * ax * log_sample
                phi = u1 * 2.0 * math.pi
            else:
                phi = math.atan(
                    ay / ax * math.tan(2.0 * math.pi * u1 + 0.5 * math.pi)
                )
                if u1 > 0.5:
                    phi += math.pi
                sp, cp = math.sin(phi), math.cos(phi)
                t2 = -log_sample / (cp * cp / (ax * ax) + sp * sp / (ay * ay))
            ct = 1.0 / math.sqrt(1.0 + t2)
            st = math.sqrt(max(0.0, 1.0 - ct * ct))
            wh = spherical_direction(st, ct, phi)
            if not same_hemisphere(wo, wh):
                wh = -wh
            return wh

        flip = wo[2] < 0
        wh = beckmann_sample(-wo if flip else wo, self.alphax, self.alphay, u0, u1)
        return -wh if flip else wh