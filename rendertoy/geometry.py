"""Triangle primitives and signed-distance-function combinators."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np

from .sampler import _uniform

SDFFunction = Callable[[np.ndarray], float]

_DET_EPSILON = 1e-6
_T_MIN = 1e-3
_PROJECTED_AREA_EPSILON = 1e-4
_GRADIENT_STEP = 0.001


def _vec3(v: Any) -> np.ndarray:
    return np.asarray(v, dtype=float).reshape(3)


def _vec2(v: Any) -> np.ndarray:
    return np.asarray(v, dtype=float).reshape(2)


def _normalize(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        return np.full(v.shape, math.nan)
    return v / length


@dataclass
class Hit:
    """Everything known about a ray hitting a primitive."""

    t: float
    coord: np.ndarray
    uv: np.ndarray
    geometry_normal: np.ndarray
    shading_normal: np.ndarray
    wo: np.ndarray
    primitive: Any = None
    material: Any = None


@dataclass
class Triangle:
    """A triangle with per-vertex texture coordinates and normals."""

    p0: Any
    p1: Any
    p2: Any
    t0: Any = (0.0, 0.0)
    t1: Any = (0.0, 0.0)
    t2: Any = (0.0, 0.0)
    n0: Any = (0.0, 0.0, 0.0)
    n1: Any = (0.0, 0.0, 0.0)
    n2: Any = (0.0, 0.0, 0.0)
    material: Any = None
    surface_light: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.vertices = (_vec3(self.p0), _vec3(self.p1), _vec3(self.p2))
        self.uvs = (_vec2(self.t0), _vec2(self.t1), _vec2(self.t2))
        self.normals = (_vec3(self.n0), _vec3(self.n1), _vec3(self.n2))

    def _interpolate(self, values: Sequence[np.ndarray], u: float, v: float) -> np.ndarray:
        return u * values[1] + v * values[2] + (1.0 - u - v) * values[0]

    def intersect(self, origin: Any, direction: Any) -> Optional[Hit]:
        """Möller-Trumbore ray test; the hit, or None when the ray misses."""
        origin = _vec3(origin)
        direction = _vec3(direction)
        v0, v1, v2 = self.vertices
        e1 = v1 - v0
        e2 = v2 - v0
        pvec = np.cross(direction, e2)
        det = float(np.dot(e1, pvec))
        if abs(det) < _DET_EPSILON:
            return None
        inv_det = 1.0 / det
        tvec = origin - v0
        u = float(np.dot(tvec, pvec)) * inv_det
        if u < 0.0 or u > 1.0:
            return None
        qvec = np.cross(tvec, e1)
        v = float(np.dot(direction, qvec)) * inv_det
        if v < 0.0 or u + v > 1.0:
            return None
        t = float(np.dot(e2, qvec)) * inv_det
        if t < _T_MIN:
            return None

        normal = self._interpolate(self.normals, u, v)
        geometry_normal = -normal if float(np.dot(normal, direction)) > 0.0 else normal
        return Hit(
            t=t,
            coord=origin + t * direction,
            uv=self._interpolate(self.uvs, u, v),
            geometry_normal=geometry_normal,
            shading_normal=normal.copy(),
            wo=-direction,
            primitive=self,
            material=self.material,
        )

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Component-wise ``(min, max)`` corners of the triangle."""
        stacked = np.stack(self.vertices)
        return stacked.min(axis=0), stacked.max(axis=0)

    def area(self) -> float:
        v0, v1, v2 = self.vertices
        return float(np.linalg.norm(np.cross(v1 - v0, v2 - v0))) / 2.0

    def center(self) -> np.ndarray:
        v0, v1, v2 = self.vertices
        return (v0 + v1 + v2) / 3.0

    def normal_at(self, uv: Any) -> np.ndarray:
        """Interpolated vertex normal at barycentric coordinates ``uv``."""
        u, v = (float(c) for c in uv)
        return self._interpolate(self.normals, u, v)

    def pdf(self, observation_to_primitive: Any, uv: Any) -> float:
        """Solid-angle density of sampling the point ``uv`` from the observer."""
        d = _vec3(observation_to_primitive)
        projected = abs(float(np.dot(self.normal_at(uv), _normalize(d)))) * self.area()
        if not abs(projected) >= _PROJECTED_AREA_EPSILON:
            return 0.0
        return float(np.dot(d, d)) / projected

    def sample_point(self, rng: Optional[Any] = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Uniform point on the surface as ``(uv, coord, normal)``."""
        u = _uniform(rng)
        v = _uniform(rng)
        if u + v > 1.0:
            u, v = 1.0 - u, 1.0 - v
        coord = self._interpolate(self.vertices, u, v)
        normal = self._interpolate(self.normals, u, v)
        return np.array([u, v]), coord, normal


def sdf_union(a: SDFFunction, b: SDFFunction) -> SDFFunction:
    return lambda p: min(a(p), b(p))


def sdf_smooth_union(a: SDFFunction, b: SDFFunction, k: float = 0.2) -> SDFFunction:
    """Union blended over a band of width ``k``."""

    def combined(p: Any) -> float:
        d2 = b(p)
        d1 = a(p)
        h = min(max(0.5 + 0.5 * (d2 - d1) / k, 0.0), 1.0)
        return d2 + (d1 - d2) * h - k * h * (1.0 - h)

    return combined


def sdf_intersect(a: SDFFunction, b: SDFFunction) -> SDFFunction:
    return lambda p: max(a(p), b(p))


def sdf_round(a: SDFFunction, rad: float = 0.2) -> SDFFunction:
    return lambda p: a(p) - rad


def sdf_translate(a: SDFFunction, p: Any) -> SDFFunction:
    offset = _vec3(p)
    return lambda coord: a(_vec3(coord) - offset)


def sdf_negate(a: SDFFunction) -> SDFFunction:
    return lambda p: -a(p)


def sdf_subtract(a: SDFFunction, b: SDFFunction) -> SDFFunction:
    """Carve ``b`` out of ``a``."""
    return sdf_intersect(a, sdf_negate(b))


def sdf_twist(a: SDFFunction, p: Any, k: float) -> SDFFunction:
    """Twist of ``a`` around the y axis, evaluated at the fixed point ``p``.

    The returned function ignores the coordinate it is called with.
    """
    px, py, pz = (float(c) for c in _vec3(p))
    c = math.cos(k * py)
    s = math.sin(k * py)
    q = np.array([c * px + s * pz, -s * px + c * pz, py])
    return lambda coord: a(q.copy())


def sdf_gradient(sdf: SDFFunction, point: Any) -> np.ndarray:
    """Normalised forward-difference gradient of ``sdf`` at ``point``."""
    point = _vec3(point)
    base = sdf(point)
    grad = np.array(
        [(sdf(point + step) - base) / _GRADIENT_STEP for step in np.eye(3) * _GRADIENT_STEP]
    )
    return _normalize(grad)