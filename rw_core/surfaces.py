"""Finite wall segments used as reflecting boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from rw_core.geometry import EPS_DIR, EPS_POS, Vec2, as_vec2, cross2


class GeometryError(ValueError):
    """Invalid boundary geometry passed to a builder."""


@dataclass(frozen=True)
class WallSegment:
    """Segment p0 -> p1 with unit normal n_hat.

    The normal is normalized on construction. ``wall_id`` only takes part in
    tie-breaking between simultaneous hits.
    """

    p0: Vec2
    p1: Vec2
    n_hat: Vec2
    wall_id: int = -1

    def __post_init__(self) -> None:
        p0 = as_vec2(self.p0)
        p1 = as_vec2(self.p1)
        n = as_vec2(self.n_hat)
        if not (p0.is_finite() and p1.is_finite() and n.is_finite()):
            raise GeometryError("WallSegment: non-finite coordinates")
        if (p1 - p0).norm() <= EPS_DIR:
            raise GeometryError(f"WallSegment: degenerate segment ({p0} ~= {p1})")
        norm = n.norm()
        if norm <= EPS_DIR:
            raise GeometryError(f"WallSegment: normal {n} is near zero")
        # unit normals (e.g. reloaded from disk) are kept bit-for-bit
        n_hat = n if abs(norm - 1.0) <= 2.0**-52 else n.normalized(EPS_DIR)
        object.__setattr__(self, "p0", p0)
        object.__setattr__(self, "p1", p1)
        object.__setattr__(self, "n_hat", n_hat)
        object.__setattr__(self, "wall_id", int(self.wall_id))

    @classmethod
    def from_segment_auto_normal(
        cls,
        a: Vec2 | Sequence[float],
        b: Vec2 | Sequence[float],
        inward: bool = False,
        wall_id: int = -1,
    ) -> "WallSegment":
        """Use the left-hand perpendicular of the tangent as normal, flipped when ``inward``."""

        a = as_vec2(a)
        b = as_vec2(b)
        t_hat = (b - a).normalized(EPS_DIR)
        if t_hat.x == 0.0 and t_hat.y == 0.0:
            raise GeometryError(f"from_segment_auto_normal: degenerate segment ({a} ~= {b})")
        n = Vec2(-t_hat.y, t_hat.x)
        if inward:
            n = -n
        return cls(a, b, n, wall_id)

    def tangent(self) -> Vec2:
        return self.p1 - self.p0

    def length(self) -> float:
        return self.tangent().norm()

    def signed_distance(self, point: Vec2 | Sequence[float]) -> float:
        """Distance from the supporting line, positive on the normal side."""

        return (as_vec2(point) - self.p0).dot(self.n_hat)

    def intersect(self, origin: Vec2, displacement: Vec2) -> Optional[tuple[float, float]]:
        """Return (t, u) for origin + t*displacement hitting p0 + u*(p1-p0), or None.

        Accepts t in (EPS_POS, 1 + EPS_POS] and u in [-EPS_POS, 1 + EPS_POS];
        near-parallel pairs (|cross| <= EPS_DIR) never hit. A contact at
        |t| <= EPS_POS counts only when the displacement heads into the wall.
        """

        s = self.tangent()
        denom = cross2(displacement, s)
        if abs(denom) <= EPS_DIR:
            return None
        am = self.p0 + 0.5 * s - origin
        t = cross2(am, s) / denom
        if t > 1.0 + EPS_POS:
            return None
        if t <= EPS_POS and not (t >= -EPS_POS and displacement.dot(self.n_hat) < 0.0):
            return None
        u = 0.5 + cross2(am, displacement) / denom
        if u < -EPS_POS or u > 1.0 + EPS_POS:
            return None
        return t, u
