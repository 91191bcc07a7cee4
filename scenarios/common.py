"""Common scenario helpers."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from rw_core.simulation import Simulation, SimulationConfig
from rw_core.steps import BrownianParams
from rw_core.world import ReflectingWorld


def default_case(case_id: str, **overrides: Any) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "case_id": case_id,
        "tf": 0.1,
        "D": 1.0,
        "x0": 0.5,
        "y0": 0.5,
        "nsteps": 100,
        "nreals": 200,
        "nbins": 50,
        "seed": 5489,
        "store_every": 10,
    }
    params.update(overrides)
    return params


def make_config(params: Mapping[str, Any]) -> SimulationConfig:
    nsteps = int(params["nsteps"])
    if nsteps < 1:
        raise ValueError(f"nsteps must be >= 1, got {nsteps}")
    dt = float(params["tf"]) / nsteps
    return SimulationConfig(
        n_particles=int(params["nreals"]),
        n_steps=nsteps,
        record_history=True,
        store_every=int(params.get("store_every", 1)),
        base_seed=int(params.get("seed", 5489)),
        deterministic=True,
        brownian=BrownianParams(dt=dt, D=float(params["D"])),
    )


def run_simulation(world: ReflectingWorld, params: Mapping[str, Any]) -> Simulation:
    sim = Simulation(world, make_config(params))
    start = (float(params["x0"]), float(params["y0"]))
    sim.set_positions([start] * sim.config.n_particles)
    sim.run()
    return sim
