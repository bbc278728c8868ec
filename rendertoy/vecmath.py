"""Shading-space vector helpers shared by the sampling and BSDF code.

Directions are 3-component vectors in a local frame where +z is the surface
normal. Every function accepts any 3-element sequence and returns plain
floats or ``numpy`` arrays.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

VectorLike = Union[Sequence[float], np.ndarray]

_X_AXIS = np.array([1.0, 0.0, 0.0])
_Y_AXIS = np.array([0.0, 1.0, 0.0])
_Z_AXIS = np.array([0.0, 0.0, 1.0])


def _vec(v: VectorLike) -> np.ndarray:
    return np.asarray(v, dtype=float)


def _divide(a: float, b: float) -> float:
    """Divide with IEEE semantics: x/0 gives a signed infinity, 0/0 gives NaN."""
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _clamp(x: float, lo: float, hi: float) -> float:
    return min(max(x, lo), hi)


def cos_theta(w: VectorLike) -> float:
    return float(w[2])


def cos2_theta(w: VectorLike) -> float:
    return float(w[2]) * float(w[2])


def abs_cos_theta(w: VectorLike) -> float:
    return abs(float(w[2]))


def sin2_theta(w: VectorLike) -> float:
    return max(0.0, 1.0 - cos2_theta(w))


def sin_theta(w: VectorLike) -> float:
    return math.sqrt(sin2_theta(w))


def tan_theta(w: VectorLike) -> float:
    return _divide(sin_theta(w), cos_theta(w))


def tan2_theta(w: VectorLike) -> float:
    return _divide(sin2_theta(w), cos2_theta(w))


def cos_phi(w: VectorLike) -> float:
    s = sin_theta(w)
    return 1.0 if s == 0 else _clamp(float(w[0]) / s, -1.0, 1.0)


def sin_phi(w: VectorLike) -> float:
    s = sin_theta(w)
    return 0.0 if s == 0 else _clamp(float(w[1]) / s, -1.0, 1.0)


def cos2_phi(w: VectorLike) -> float:
    return cos_phi(w) ** 2


def sin2_phi(w: VectorLike) -> float:
    return sin_phi(w) ** 2


def cos_d_phi(wa: VectorLike, wb: VectorLike) -> float:
    """Cosine of the azimuthal angle between two directions."""
    ax, ay = float(wa[0]), float(wa[1])
    bx, by = float(wb[0]), float(wb[1])
    denom = math.sqrt((ax * ax + ay * ay) * (bx * bx + by * by))
    return _clamp(_divide(ax * bx + ay * by, denom), -1.0, 1.0)


def abs_dot(a: VectorLike, b: VectorLike) -> float:
    return abs(float(np.dot(_vec(a), _vec(b))))


def erf(x: float) -> float:
    """Error function, Abramowitz & Stegun formula 7.1.26."""
    a1 = 0.254829592
    a2 = -0.284496736
    a3 = 1.421413741
    a4 = -1.453152027
    a5 = 1.061405429
    p = 0.3275911

    sign = -1.0 if x < 0 else 1.0
    x = abs(x)
    t = 1.0 / (1.0 + p * x)
    y = 1.0 - (((((a5 * t + a4) * t) + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y


_ERF_INV_CENTRAL = (
    2.81022636e-08,
    3.43273939e-07,
    -3.5233877e-06,
    -4.39150654e-06,
    0.00021858087,
    -0.00125372503,
    -0.00417768164,
    0.246640727,
    1.50140941,
)
_ERF_INV_TAIL = (
    -0.000200214257,
    0.000100950558,
    0.00134934322,
    -0.00367342844,
    0.00573950773,
    -0.0076224613,
    0.00943887047,
    1.00167406,
    2.83297682,
)


def erf_inv(x: float) -> float:
    """Inverse error function; the argument is clamped to (-0.99999, 0.99999)."""
    x = _clamp(x, -0.99999, 0.99999)
    w = -math.log((1.0 - x) * (1.0 + x))
    if w < 5:
        w -= 2.5
        coefficients = _ERF_INV_CENTRAL
    else:
        w = math.sqrt(w) - 3.0
        coefficients = _ERF_INV_TAIL
    p = coefficients[0]
    for c in coefficients[1:]:
        p = c + p * w
    return p * x


def spherical_direction(
    sin_theta: float,
    cos_theta: float,
    phi: float,
    x: Optional[VectorLike] = None,
    y: Optional[VectorLike] = None,
    z: Optional[VectorLike] = None,
) -> np.ndarray:
    """Direction from spherical angles, in the frame (x, y, z) or the standard one."""
    bx = _X_AXIS if x is None else _vec(x)
    by = _Y_AXIS if y is None else _vec(y)
    bz = _Z_AXIS if z is None else _vec(z)
    return (
        sin_theta * math.cos(phi) * bx
        + sin_theta * math.sin(phi) * by
        + cos_theta * bz
    )


def same_hemisphere(w: VectorLike, wp: VectorLike) -> bool:
    return float(w[2]) * float(wp[2]) > 0


def faceforward(v: VectorLike, v2: VectorLike) -> np.ndarray:
    """Flip ``v`` so that it lies in the hemisphere of ``v2``."""
    v = _vec(v)
    return -v if float(np.dot(v, _vec(v2))) < 0.0 else v


def reflect(wo: VectorLike, n: VectorLike) -> np.ndarray:
    wo = _vec(wo)
    n = _vec(n)
    return -wo + 2.0 * float(np.dot(wo, n)) * n


def refract(wi: VectorLike, n: VectorLike, eta: float) -> Optional[np.ndarray]:
    """Refracted direction by Snell's law, or None on total internal reflection."""
    wi = _vec(wi)
    n = _vec(n)
    cos_i = float(np.dot(n, wi))
    sin2_i = max(0.0, 1.0 - cos_i * cos_i)
    sin2_t = eta * eta * sin2_i
    if sin2_t >= 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin2_t)
    return eta * -wi + (eta * cos_i - cos_t) * n


def coordinate_system(v1: VectorLike) -> Tuple[np.ndarray, np.ndarray]:
    """Two vectors that complete ``v1`` to an orthogonal frame."""
    v1 = _vec(v1)
    x, y, z = (float(c) for c in v1)
    if abs(x) > abs(y):
        v2 = np.array([-z, 0.0, x]) / math.sqrt(x * x + z * z)
    else:
        v2 = np.array([0.0, z, -y]) / math.sqrt(y * y + z * z)
    return v2, np.cross(v1, v2)


def find_interval(size: int, pred: Callable[[int], bool]) -> int:
    """Last index where ``pred`` holds, clamped to ``[0, size - 2]``.

    ``pred`` must be true for a prefix of ``range(size)`` and false after it.
    """
    first, length = 0, size
    while length > 0:
        half = length >> 1
        middle = first + half
        if pred(middle):
            first = middle + 1
            length -= half + 1
        else:
            length = half
    return int(_clamp(first - 1, 0, size - 2))


def spherical_theta(v: VectorLike) -> float:
    """Polar angle measured from the +y axis."""
    return math.acos(_clamp(float(v[1]), -1.0, 1.0))


def spherical_phi(v: VectorLike) -> float:
    """Azimuth in the x-z plane, in ``[0, 2*pi)``."""
    p = math.atan2(float(v[2]), float(v[0]))
    return p + 2.0 * math.pi if p < 0 else p