"""Phase functions describing how participating media scatter light."""

from __future__ import annotations

import abc
import math
from typing import Any, Optional, Tuple

import numpy as np

from .sampler import _uniform, uniform_sample_sphere
from .vecmath import coordinate_system, spherical_direction

_INV_FOUR_PI = 0.25 / math.pi


def henyey_greenstein(cos_theta: float, g: float) -> float:
    """Henyey-Greenstein phase function value for asymmetry ``g``."""
    denom = 1.0 + g * g + 2.0 * g * cos_theta
    return _INV_FOUR_PI * (1.0 - g * g) / (denom * math.sqrt(denom))


class PhaseFunction(abc.ABC):
    @abc.abstractmethod
    def p(self, wo: Any, wi: Any) -> float:
        """Phase function value for the pair of directions."""

    @abc.abstractmethod
    def sample_p(self, wo: Any, rng: Optional[Any] = None) -> Tuple[np.ndarray, float]:
        """Sample an incident direction; returns ``(wi, pdf)``."""


class IsotropicPhaseFunction(PhaseFunction):
    def p(self, wo: Any, wi: Any) -> float:
        return _INV_FOUR_PI

    def sample_p(self, wo: Any, rng: Optional[Any] = None) -> Tuple[np.ndarray, float]:
        return uniform_sample_sphere(rng), _INV_FOUR_PI


class HenyeyGreensteinPhaseFunction(PhaseFunction):
    def __init__(self, g: float) -> None:
        self.g = g

    def p(self, wo: Any, wi: Any) -> float:
        cos = float(np.dot(np.asarray(wo, dtype=float), np.asarray(wi, dtype=float)))
        return henyey_greenstein(cos, self.g)

    def sample_p(self, wo: Any, rng: Optional[Any] = None) -> Tuple[np.ndarray, float]:
        g = self.g
        u = _uniform(rng)
        if abs(g) < 1e-3:
            cos_theta = 1.0 - 2.0 * u
        else:
            sqr_term = (1.0 - g * g) / (1.0 + g - 2.0 * g * u)
            cos_theta = -(1.0 + g * g - sqr_term * sqr_term) / (2.0 * g)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
        phi = 2.0 * math.pi * _uniform(rng)
        wo = np.asarray(wo, dtype=float)
        v1, v2 = coordinate_system(wo)
        wi = spherical_direction(sin_theta, cos_theta, phi, v1, v2, wo)
        return wi, henyey_greenstein(cos_theta, g)