"""Automated trajectory plotting helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import warnings

import matplotlib.pyplot as plt
import numpy as np

from rw_core.world import ReflectingWorld


def _save(fig: plt.Figure, outdir: str, name: str) -> str:
    Path(outdir).mkdir(parents=True, exist_ok=True)
    png = Path(outdir) / f"{name}.png"
    pdf = Path(outdir) / f"{name}.pdf"
    fig.savefig(png, dpi=150, bbox_inches="tight")
    try:
        fig.savefig(pdf, bbox_inches="tight")
    except PermissionError:
        warnings.warn(
            f"Could not write '{pdf}' (permission denied). Saved PNG only.",
            RuntimeWarning,
            stacklevel=2,
        )
    plt.close(fig)
    return str(png)


def _draw_walls(ax: plt.Axes, world: ReflectingWorld, normal_len: float) -> None:
    for w in world:
        ax.plot([w.p0.x, w.p1.x], [w.p0.y, w.p1.y], "k-", lw=1.5)
        mid_x = 0.5 * (w.p0.x + w.p1.x)
        mid_y = 0.5 * (w.p0.y + w.p1.y)
        ax.arrow(mid_x, mid_y, normal_len * w.n_hat.x, normal_len * w.n_hat.y, color="tab:red", width=0.0, head_width=0.3 * normal_len)


def p0_world_overlay(
    world: ReflectingWorld,
    history: np.ndarray,
    outdir: str,
    max_tracks: int = 20,
    view: Optional[tuple[float, float, float, float]] = None,
) -> str:
    """Walls with normals plus up to ``max_tracks`` stored trajectories."""

    fig, ax = plt.subplots()
    h = np.asarray(history, dtype=float)
    for track in h[:max_tracks]:
        ax.plot(track[:, 0], track[:, 1], lw=0.6, alpha=0.8)
    if view is None and h.size:
        xmin, ymin = np.min(h.reshape(-1, 2), axis=0)
        xmax, ymax = np.max(h.reshape(-1, 2), axis=0)
        pad = 0.1 * max(xmax - xmin, ymax - ymin, 1e-9)
        view = (xmin - pad, xmax + pad, ymin - pad, ymax + pad)
    normal_len = 0.05 * (view[1] - view[0]) if view is not None else 0.1
    _draw_walls(ax, world, normal_len)
    if view is not None:
        ax.set_xlim(view[0], view[1])
        ax.set_ylim(view[2], view[3])
    ax.set_aspect("equal")
    ax.set_title("P0 walls/trajectory overlay")
    return _save(fig, outdir, "P0")


def p1_final_positions(positions: np.ndarray, outdir: str) -> str:
    fig, ax = plt.subplots()
    p = np.asarray(positions, dtype=float).reshape(-1, 2)
    ax.scatter(p[:, 0], p[:, 1], s=4, alpha=0.6)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title("P1 final positions")
    return _save(fig, outdir, "P1")


def p2_occupancy(h: np.ndarray, xedges: np.ndarray, yedges: np.ndarray, outdir: str) -> str:
    fig, ax = plt.subplots()
    mesh = ax.pcolormesh(xedges, yedges, h.T, cmap="viridis")
    fig.colorbar(mesh, ax=ax, label="density")
    ax.set_aspect("equal")
    ax.set_title("P2 occupancy")
    return _save(fig, outdir, "P2")


def p3_msd(times: np.ndarray, msd: np.ndarray, outdir: str, D: Optional[float] = None) -> str:
    fig, ax = plt.subplots()
    ax.plot(times, msd, "o-", ms=3, label="simulated")
    if D is not None:
        ax.plot(times, 4.0 * D * np.asarray(times), "--", label="4Dt")
    ax.set_xlabel("t")
    ax.set_ylabel("MSD")
    ax.legend()
    ax.set_title("P3 mean squared displacement")
    return _save(fig, outdir, "P3")
