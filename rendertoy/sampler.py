"""Random sampling routines and discrete/continuous sampling distributions.

Functions that consume randomness take an ``rng`` argument: any object with a
``random()`` method returning a float in ``[0, 1)``, such as a
``numpy.random.Generator`` or a ``random.Random``. When it is omitted a
module-wide generator is used.
"""

from __future__ import annotations

import bisect
import itertools
import math
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Sequence

import numpy as np

from .vecmath import find_interval

ONE_MINUS_EPSILON = 1.0 - 2.0**-24
"""Largest single-precision float below one."""

_DEFAULT_RNG = np.random.default_rng()


def _uniform(rng: Optional[Any]) -> float:
    return float((_DEFAULT_RNG if rng is None else rng).random())


def uniform_sample_hemisphere(rng: Optional[Any] = None) -> np.ndarray:
    """Uniformly distributed direction on the +z hemisphere."""
    u0 = _uniform(rng)
    u1 = _uniform(rng)
    z = u0
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * math.pi * u1
    return np.array([r * math.cos(phi), r * math.sin(phi), z])


def uniform_hemisphere_pdf() -> float:
    return 1.0 / (2.0 * math.pi)


def concentric_sample_disk(rng: Optional[Any] = None) -> np.ndarray:
    """Point on the unit disk by Shirley's concentric mapping."""
    ox = 2.0 * _uniform(rng) - 1.0
    oy = 2.0 * _uniform(rng) - 1.0
    if ox == 0.0 and oy == 0.0:
        return np.zeros(2)
    if abs(ox) > abs(oy):
        r = ox
        theta = (math.pi / 4.0) * (oy / ox)
    else:
        r = oy
        theta = math.pi / 2.0 - (math.pi / 4.0) * (ox / oy)
    return r * np.array([math.cos(theta), math.sin(theta)])


def cosine_sample_hemisphere(rng: Optional[Any] = None) -> np.ndarray:
    """Cosine-weighted direction on the +z hemisphere."""
    dx, dy = concentric_sample_disk(rng)
    z = math.sqrt(max(0.0, 1.0 - dx * dx - dy * dy))
    return np.array([dx, dy, z])


def cosine_hemisphere_pdf(cos_theta: float) -> float:
    return cos_theta / math.pi


def power_heuristic(nf: int, f_pdf: float, ng: int, g_pdf: float) -> float:
    """Multiple importance sampling weight with exponent two."""
    f = nf * f_pdf
    g = ng * g_pdf
    return (f * f) / (f * f + g * g)


def uniform_sample_sphere(rng: Optional[Any] = None) -> np.ndarray:
    """Uniformly distributed direction on the unit sphere."""
    z = 1.0 - 2.0 * _uniform(rng)
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * math.pi * _uniform(rng)
    return np.array([r * math.cos(phi), r * math.sin(phi), z])


def sample_exponential(u: float, a: float) -> float:
    """Inverse CDF of the exponential distribution with rate ``a``."""
    return -math.log(1.0 - u) / a


def sample_discrete(weights: Sequence[float], rng: Optional[Any] = None) -> int:
    """Index drawn with probability proportional to its weight."""
    cdf = list(itertools.accumulate(float(w) for w in weights))
    if not cdf:
        raise ValueError("cannot sample from an empty set of weights")
    value = cdf[-1] * _uniform(rng)
    return min(bisect.bisect_left(cdf, value), len(cdf) - 1)


class ContinuousSample(NamedTuple):
    value: float
    pdf: float
    offset: int


class DiscreteSample(NamedTuple):
    index: int
    pdf: float
    u_remapped: float


class Distribution1D:
    """Piecewise-constant 1D distribution over ``[0, 1)``."""

    def __init__(self, func: Sequence[float]) -> None:
        self.func: List[float] = [float(f) for f in func]
        n = len(self.func)
        if n == 0:
            raise ValueError("distribution needs at least one value")
        cdf = [0.0]
        for f in self.func:
            cdf.append(cdf[-1] + f / n)
        self.func_int: float = cdf[-1]
        if self.func_int == 0:
            self.cdf = [i / n for i in range(n + 1)]
        else:
            self.cdf = [c / self.func_int for c in cdf]

    def __len__(self) -> int:
        return len(self.func)

    def _offset(self, u: float) -> int:
        return find_interval(len(self.cdf), lambda i: self.cdf[i] <= u)

    def sample_continuous(self, u: float) -> ContinuousSample:
        offset = self._offset(u)
        du = u - self.cdf[offset]
        width = self.cdf[offset + 1] - self.cdf[offset]
        if width > 0:
            du /= width
        pdf = self.func[offset] / self.func_int if self.func_int > 0 else 0.0
        return ContinuousSample((offset + du) / len(self), pdf, offset)

    def sample_discrete(self, u: float) -> DiscreteSample:
        offset = self._offset(u)
        pdf = (
            self.func[offset] / (self.func_int * len(self))
            if self.func_int > 0
            else 0.0
        )
        width = self.cdf[offset + 1] - self.cdf[offset]
        u_remapped = (u - self.cdf[offset]) / width if width > 0 else 0.0
        return DiscreteSample(offset, pdf, u_remapped)

    def discrete_pdf(self, index: int) -> float:
        return self.func[index] / (self.func_int * len(self))


class Distribution2D:
    """Piecewise-constant 2D distribution; ``func`` is indexed ``[v][u]``."""

    def __init__(self, func: Any) -> None:
        data = np.asarray(func, dtype=float)
        if data.ndim != 2 or data.size == 0:
            raise ValueError("distribution needs a non-empty 2D table")
        self._conditional = [Distribution1D(row) for row in data]
        self._marginal = Distribution1D([d.func_int for d in self._conditional])

    def sample_continuous(self, u: Sequence[float]) -> tuple:
        """Return ``(point, pdf)`` for the sample ``u`` in ``[0, 1)^2``."""
        d1, pdf1, v = self._marginal.sample_continuous(float(u[1]))
        d0, pdf0, _ = self._conditional[v].sample_continuous(float(u[0]))
        return np.array([d0, d1]), pdf0 * pdf1

    def pdf(self, p: Sequence[float]) -> float:
        nu = len(self._conditional[0])
        nv = len(self._marginal)
        iu = min(max(int(float(p[0]) * nu), 0), nu - 1)
        iv = min(max(int(float(p[1]) * nv), 0), nv - 1)
        return self._conditional[iv].func[iu] / self._marginal.func_int


class AliasSample(NamedTuple):
    index: int
    pmf: float
    u_remapped: float


@dataclass
class _Bin:
    p: float
    q: float = 0.0
    alias: int = -1


class AliasTable:
    """Walker alias table for constant-time discrete sampling."""

    def __init__(self, weights: Sequence[float]) -> None:
        values = [float(w) for w in weights]
        if not values:
            raise ValueError("alias table needs at least one weight")
        total = sum(values)
        if total == 0:
            raise ValueError("alias table weights must not sum to zero")
        self._bins = [_Bin(p=w / total) for w in values]
        n = len(self._bins)

        under: list = []
        over: list = []
        for index, b in enumerate(self._bins):
            p_hat = b.p * n
            (under if p_hat < 1 else over).append((p_hat, index))

        while under and over:
            un_p, un_i = under.pop()
            ov_p, ov_i = over.pop()
            self._bins[un_i].q = un_p
            self._bins[un_i].alias = ov_i
            excess = un_p + ov_p - 1.0
            (under if excess < 1.0 else over).append((excess, ov_i))

        for _, index in under + over:
            self._bins[index].q = 1.0
            self._bins[index].alias = -1

    def __len__(self) -> int:
        return len(self._bins)

    def pmf(self, index: int) -> float:
        return self._bins[index].p

    def sample(self, u: float) -> AliasSample:
        n = len(self._bins)
        offset = min(int(u * n), n - 1)
        up = min(u * n - offset, ONE_MINUS_EPSILON)
        b = self._bins[offset]
        if up < b.q:
            return AliasSample(offset, b.p, min(up / b.q, ONE_MINUS_EPSILON))
        alias = b.alias
        remapped = min((up - b.q) / (1.0 - b.q), ONE_MINUS_EPSILON)
        return AliasSample(alias, self._bins[alias].p, remapped)