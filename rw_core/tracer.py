"""Advance a point through a displacement with specular reflections.

The remaining displacement is repeatedly cut at the earliest wall hit,
nudged off the wall and mirrored across its normal, until it is used up,
becomes negligible or the reflection cap is reached.

The first advance freezes the world (builds its wall table). Call
``world.freeze()`` before sharing a world between threads.

Example:
    >>> from rw_core.geometry import Vec2
    >>> from rw_core.world import ReflectingWorld
    >>> from rw_core.tracer import advance_with_reflections
    >>> floor = ReflectingWorld().add_segment((-10.0, 0.0), (10.0, 0.0), (0.0, 1.0))
    >>> end = advance_with_reflections(Vec2(0.0, 1.0), Vec2(0.0, -2.0), floor)
    >>> abs(end.y - 1.0) < 1e-9
    True
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from rw_core.geometry import EPS_DIR, EPS_POS, Vec2, as_vec2, reflect_across_unit_normal
from rw_core.rays import Ray
from rw_core.world import ReflectingWorld, WallTable

MAX_REFLECTIONS = 64  # per-advance cap; corner ping-pong stops here
TIE_EPS = 1e-15  # hits closer than this in t are simultaneous


def _earliest_hit(p: Vec2, v: Vec2, table: WallTable) -> Optional[Tuple[float, int]]:
    """Return (t, wall_index) of the earliest valid hit along p + t v, or None.

    Simultaneous hits (within TIE_EPS of the smallest t) go to the lowest
    wall id, then the lowest insertion index.
    """

    if table.count == 0:
        return None
    sx = table.seg[:, 0]
    sy = table.seg[:, 1]
    amx = table.mid[:, 0] - p.x
    amy = table.mid[:, 1] - p.y
    denom = v.x * sy - v.y * sx
    with np.errstate(divide="ignore", invalid="ignore"):
        t = (amx * sy - amy * sx) / denom
        u = 0.5 + (amx * v.y - amy * v.x) / denom
    # Contacts at t ~ 0 only count when heading into the wall (second wall of a corner).
    incoming = (v.x * table.n_hat[:, 0] + v.y * table.n_hat[:, 1]) < 0.0
    valid = (
        (np.abs(denom) > EPS_DIR)
        & ((t > EPS_POS) | ((t >= -EPS_POS) & incoming))
        & (t <= 1.0 + EPS_POS)
        & (u >= -EPS_POS)
        & (u <= 1.0 + EPS_POS)
    )
    hits = np.flatnonzero(valid)
    if hits.size == 0:
        return None
    t_hits = t[hits]
    bucket = hits[t_hits <= t_hits.min() + TIE_EPS]
    if bucket.size == 1:
        k = int(bucket[0])
    else:
        order = np.lexsort((bucket, table.ids[bucket]))
        k = int(bucket[order[0]])
    return float(t[k]), k


def _advance(p: Vec2, v: Vec2, world: ReflectingWorld, ray: Optional[Ray] = None) -> Vec2:
    if v.norm() <= EPS_DIR:
        return p

    table = world.table()
    bounces = 0
    while bounces < MAX_REFLECTIONS:
        hit = _earliest_hit(p, v, table)
        if hit is None:
            p = p + v
            v = Vec2(0.0, 0.0)
            if ray is not None:
                ray.path_points.append(p)
            break

        t, k = hit
        n_hat = Vec2(float(table.n_hat[k, 0]), float(table.n_hat[k, 1]))
        p = p + t * v
        p = p + EPS_POS * n_hat
        v = reflect_across_unit_normal((1.0 - t) * v, n_hat)
        bounces += 1
        if ray is not None:
            ray.path_points.append(p)
            ray.wall_ids.append(int(table.ids[k]))
            ray.wall_indices.append(k)

        if v.norm() <= EPS_DIR:
            break

    if ray is not None:
        # Cap reached with displacement left over: it is dropped.
        ray.truncated = v.norm() > EPS_DIR
    return p


def advance_with_reflections(
    position: Vec2 | Sequence[float],
    displacement: Vec2 | Sequence[float],
    world: ReflectingWorld,
) -> Vec2:
    """Final position after applying ``displacement`` from ``position`` inside ``world``.

    Never raises for degenerate geometry: grazing or parallel motion is
    treated as unobstructed and bounce sequences stop after MAX_REFLECTIONS.
    Freezes ``world`` on first use.
    """

    return _advance(as_vec2(position), as_vec2(displacement), world)


def trace_reflections(
    position: Vec2 | Sequence[float],
    displacement: Vec2 | Sequence[float],
    world: ReflectingWorld,
) -> Ray:
    """Same as ``advance_with_reflections`` but records contact points and hit walls."""

    p = as_vec2(position)
    d = as_vec2(displacement)
    ray = Ray(origin=p, displacement=d, path_points=[p])
    _advance(p, d, world, ray)
    return ray
