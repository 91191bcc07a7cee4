"""Trajectory statistics: MSD, occupancy histograms and containment checks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from rw_core.world import ReflectingWorld


def mean_squared_displacement(history: np.ndarray, origin: Optional[np.ndarray] = None) -> np.ndarray:
    """Ensemble MSD per stored frame for history of shape (N,F,2).

    Displacements are measured from ``origin`` (shape (2,) or (N,2)), or from frame 0.
    """

    h = np.asarray(history, dtype=float)
    if h.shape[1] == 0:
        return np.zeros(0)
    ref = h[:, :1, :] if origin is None else np.asarray(origin, dtype=float).reshape(-1, 1, 2)
    return np.mean(np.sum((h - ref) ** 2, axis=2), axis=0)


def theoretical_msd(times: np.ndarray, D: float) -> np.ndarray:
    """Free 2D diffusion: <r^2> = 4 D t."""

    return 4.0 * float(D) * np.asarray(times, dtype=float)


def occupancy_histogram(
    positions: np.ndarray,
    bounds: Tuple[float, float, float, float],
    nbins: int,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Density-normalised 2D histogram over (xmin, xmax, ymin, ymax)."""

    xmin, xmax, ymin, ymax = bounds
    p = np.asarray(positions, dtype=float).reshape(-1, 2)
    h, xedges, yedges = np.histogram2d(p[:, 0], p[:, 1], bins=int(nbins), range=[[xmin, xmax], [ymin, ymax]], density=len(p) > 0)
    return h, xedges, yedges


def outside_fraction(world: ReflectingWorld, positions: np.ndarray, tol: float = 1e-9) -> float:
    """Fraction of positions behind any wall's supporting line.

    Only meaningful for convex domains whose walls all face inward.
    """

    p = np.asarray(positions, dtype=float).reshape(-1, 2)
    if len(p) == 0 or len(world) == 0:
        return 0.0
    p0 = np.array([(w.p0.x, w.p0.y) for w in world])
    n = np.array([(w.n_hat.x, w.n_hat.y) for w in world])
    signed = np.einsum("pwk,wk->pw", p[:, None, :] - p0[None, :, :], n)
    return float(np.mean(np.any(signed < -tol, axis=1)))


def position_summary(positions: np.ndarray) -> Dict[str, float]:
    p = np.asarray(positions, dtype=float).reshape(-1, 2)
    if len(p) == 0:
        return {"count": 0}
    return {
        "mean_x": float(np.mean(p[:, 0])),
        "mean_y": float(np.mean(p[:, 1])),
        "std_x": float(np.std(p[:, 0], ddof=1) if len(p) > 1 else 0.0),
        "std_y": float(np.std(p[:, 1], ddof=1) if len(p) > 1 else 0.0),
        "count": int(len(p)),
    }


def frame_times(n_frames: int, dt: float, store_every: int) -> np.ndarray:
    return np.arange(n_frames, dtype=float) * float(dt) * int(store_every)


def save_stats_json(path: str, stats: Mapping[str, Any]) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2)
