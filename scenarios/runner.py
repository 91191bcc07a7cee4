"""Scenario sweep runner + auto plot + validation report."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from analysis.trajectory_stats import (
    frame_times,
    mean_squared_displacement,
    occupancy_histogram,
    outside_fraction,
    position_summary,
    theoretical_msd,
)
from plots import trajectories
from rw_io.hdf5_io import CaseData, save_sim_hdf5
from scenarios.common import default_case
from scenarios.params import read_params_file

SCENARIO_MODULES = {
    "S0": "scenarios.S0_free_space",
    "S1": "scenarios.S1_unit_box",
    "S2": "scenarios.S2_quarter_plane",
    "S3": "scenarios.S3_eighth_plane",
}

GEOMETRIES = {
    "free": ["S0"],
    "box": ["S1"],
    "quarter": ["S2"],
    "eighth": ["S3"],
    "both": ["S2", "S3"],
    "all": list(SCENARIO_MODULES),
}


def resolve_geometry(name: str) -> List[str]:
    if name in GEOMETRIES:
        return list(GEOMETRIES[name])
    if name in SCENARIO_MODULES:
        return [name]
    raise ValueError(f"Unknown geometry '{name}', expected one of {sorted(GEOMETRIES)}")


def _cases_from_file(sid: str, params_file: str) -> List[Dict[str, Any]]:
    return [default_case(f"{sid.lower()}_p{i:03d}", **row) for i, row in enumerate(read_params_file(params_file))]


def _hist_bounds(mod: Any, positions: np.ndarray) -> tuple[float, float, float, float]:
    bounds = getattr(mod, "HIST_BOUNDS", None)
    if bounds is not None:
        return bounds
    lo = np.min(positions, axis=0)
    hi = np.max(positions, axis=0)
    span = np.maximum(hi - lo, 1e-9)
    return (float(lo[0]), float(lo[0] + span[0]), float(lo[1]), float(lo[1] + span[1]))


def run_all(
    out_h5: str = "artifacts/rw_sweep.h5",
    out_plot_dir: str = "artifacts/plots",
    geometries: Optional[Sequence[str]] = None,
    params_file: Optional[str] = None,
) -> str:
    scenario_ids = list(geometries) if geometries else list(SCENARIO_MODULES)
    payload: Dict[str, Dict[str, CaseData]] = {}
    report_lines: List[str] = [
        "# Reflecting Walk Report",
        "",
        "- containment metric: fraction of final positions behind any wall (tol 1e-9)",
        "- free-space metric: final-frame MSD vs `4 D t`",
        "",
    ]
    failures: List[str] = []

    for sid in scenario_ids:
        mod = import_module(SCENARIO_MODULES[sid])
        payload[sid] = {}
        report_lines.append(f"## {sid}")
        params_list = _cases_from_file(sid, params_file) if params_file else mod.build_sweep_params()
        for p in params_list:
            world, sim = mod.run_case(p)
            case_id = p["case_id"]
            payload[sid][case_id] = CaseData.from_simulation(p, sim)

            positions = sim.positions_array()
            history = sim.history_array()
            case_dir = str(Path(out_plot_dir) / sid / case_id)
            summary = position_summary(positions)
            report_lines.append(f"- case `{case_id}`: particles={summary['count']}, walls={len(world)}, steps={sim.steps_taken}")
            if summary["count"] == 0:
                continue

            report_lines.append(
                f"  - final mean=({summary['mean_x']:.4f}, {summary['mean_y']:.4f}), "
                f"std=({summary['std_x']:.4f}, {summary['std_y']:.4f})"
            )

            dt = sim.config.brownian.dt
            times = frame_times(history.shape[1], dt, sim.config.store_every)
            msd = mean_squared_displacement(history)
            h, xedges, yedges = occupancy_histogram(positions, _hist_bounds(mod, positions), int(p["nbins"]))

            trajectories.p0_world_overlay(world, history, case_dir, view=getattr(mod, "HIST_BOUNDS", None))
            trajectories.p1_final_positions(positions, case_dir)
            trajectories.p2_occupancy(h, xedges, yedges, case_dir)
            trajectories.p3_msd(times, msd, case_dir, D=float(p["D"]) if not mod.BOUNDED else None)
            report_lines.append(f"  - plots: [P0]({case_dir}/P0.png), [P1]({case_dir}/P1.png), [P2]({case_dir}/P2.png), [P3]({case_dir}/P3.png)")

            if mod.BOUNDED:
                frac = outside_fraction(world, positions)
                report_lines.append(f"  - outside fraction: {frac:.6f}")
                if frac > 0.0:
                    failures.append(f"{sid}:{case_id} {frac:.6f} of particles ended outside the domain")
            elif len(msd) > 1:
                expected = float(theoretical_msd(times[-1:], float(p["D"]))[0])
                rel_err = abs(msd[-1] - expected) / expected
                report_lines.append(f"  - MSD(t={times[-1]:.4g}) = {msd[-1]:.4g}, expected {expected:.4g} (rel err {rel_err:.3f})")
                # MSD of n samples has relative std ~ 1/sqrt(n) in 2D.
                if rel_err > 5.0 / np.sqrt(summary["count"]):
                    failures.append(f"{sid}:{case_id} free-space MSD off by {rel_err:.3f}")

        report_lines.append("")

    Path(out_h5).parent.mkdir(parents=True, exist_ok=True)
    save_sim_hdf5(out_h5, payload)

    report_lines.append("## Failure Checks")
    if failures:
        for msg in failures:
            report_lines.append(f"- FAIL: {msg}")
    else:
        report_lines.append("- PASS: No automatic failure checks triggered.")

    report_path = Path(out_plot_dir).parent / "report.md"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text("\n".join(report_lines), encoding="utf-8")
    return str(report_path)


if __name__ == "__main__":
    print(run_all())
