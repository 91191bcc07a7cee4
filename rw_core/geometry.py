"""2D vector primitive and reflection helpers.

Example:
    >>> from rw_core.geometry import Vec2, reflect_across_unit_normal
    >>> reflect_across_unit_normal(Vec2(1.0, -2.0), Vec2(0.0, 1.0))
    Vec2(x=1.0, y=2.0)
    >>> Vec2(1e-14, -1e-14).normalized()
    Vec2(x=0.0, y=0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

Vector = NDArray[np.float64]

EPS_POS = 1e-12  # post-hit nudge and endpoint tolerance
EPS_DIR = 1e-12  # near-parallel / zero-motion threshold


@dataclass(frozen=True)
class Vec2:
    """Double-precision 2D value type.

    Compound assignments (``+=``, ``-=``, ``*=``) rebind to a new value.
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, values: Sequence[float]) -> "Vec2":
        return cls(float(values[0]), float(values[1]))

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> "Vec2":
        return Vec2(self.x * s, self.y * s)

    def __rmul__(self, s: float) -> "Vec2":
        return Vec2(self.x * s, self.y * s)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self, eps: float = 1e-12) -> "Vec2":
        """Unit vector, or the zero vector when ``norm() <= eps``."""

        n = self.norm()
        if n <= eps:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / n, self.y / n)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_array(self) -> Vector:
        return np.array([self.x, self.y], dtype=np.float64)


def as_vec2(value: Vec2 | Sequence[float] | Vector) -> Vec2:
    if isinstance(value, Vec2):
        return value
    arr = np.asarray(value, dtype=float)
    if arr.shape != (2,):
        raise ValueError(f"Expected a 2-vector, got shape {arr.shape}")
    return Vec2(float(arr[0]), float(arr[1]))


def cross2(a: Vec2, b: Vec2) -> float:
    return a.x * b.y - a.y * b.x


def reflect_across_unit_normal(v: Vec2, n_hat: Vec2) -> Vec2:
    """Specular reflection v' = v - 2 (v·n) n. ``n_hat`` must be unit length."""

    k = v.dot(n_hat)
    return v - (2.0 * k) * n_hat


def mirror_point_across_line(point: Vec2, line_point: Vec2, n_hat: Vec2) -> Vec2:
    """Reflect a point across the infinite line through ``line_point`` with unit normal ``n_hat``."""

    signed_dist = (point - line_point).dot(n_hat)
    return point - (2.0 * signed_dist) * n_hat
