"""Participating media: transmittance and distance sampling along rays."""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from .phase import PhaseFunction
from .sampler import _uniform


@dataclass
class VolumeInteraction:
    """A scattering event inside a medium."""

    coord: np.ndarray
    wo: np.ndarray
    phase_func: PhaseFunction


class Medium(abc.ABC):
    @abc.abstractmethod
    def tr(self, t: float) -> np.ndarray:
        """Transmittance over a distance ``t``."""

    @abc.abstractmethod
    def sample(
        self, o: Any, d: Any, tmax: float, rng: Optional[Any] = None
    ) -> Tuple[np.ndarray, Optional[VolumeInteraction]]:
        """Sample a scattering distance along the ray ``o + t*d``.

        Returns the throughput weight and the interaction, or None when the
        ray passes the medium up to ``tmax`` without scattering.
        """


class HomogeneousMedium(Medium):
    def __init__(self, sigma_a: Any, sigma_s: Any, le: Any, phase_func: PhaseFunction) -> None:
        self.sigma_a = np.asarray(sigma_a, dtype=float)
        self.sigma_s = np.asarray(sigma_s, dtype=float)
        self.le = np.asarray(le, dtype=float)
        self.phase_func = phase_func

    @property
    def sigma_t(self) -> np.ndarray:
        return self.sigma_a + self.sigma_s

    def tr(self, t: float) -> np.ndarray:
        return np.exp(-self.sigma_t * t)

    def sample(
        self, o: Any, d: Any, tmax: float, rng: Optional[Any] = None
    ) -> Tuple[np.ndarray, Optional[VolumeInteraction]]:
        sigma_t = self.sigma_t
        density0 = float(sigma_t[0])
        u = _uniform(rng)
        dist = -math.log(1.0 - u) / density0 if density0 != 0 else math.inf
        t = min(dist, tmax)
        sampled = t < tmax

        interaction = None
        if sampled:
            o = np.asarray(o, dtype=float)
            d = np.asarray(d, dtype=float)
            interaction = VolumeInteraction(coord=o + t * d, wo=-d, phase_func=self.phase_func)

        transmittance = np.exp(-sigma_t * t)
        density = sigma_t * transmittance if sampled else transmittance
        pdf = float(np.sum(density)) / 3.0
        if pdf == 0.0:
            pdf = 1.0
        if sampled:
            return transmittance * self.sigma_s / pdf, interaction
        return transmittance / pdf, None