"""HDF5 schema for reflecting-walk simulation outputs.

The schema stores multiple scenarios and multiple sweep cases per scenario,
each with the wall geometry it was run against.

Structure:
    /
      meta                       (attrs: created_at, eps_pos, eps_dir, max_reflections)
      scenarios/{scenario_id}/cases/{case_id}/
          params_json            (scalar utf-8 JSON)
          world/
              p0                 (W,2)
              p1                 (W,2)
              n_hat              (W,2)
              wall_ids           (W,) int64
          positions              (N,2)
          history                (N,F,2), F = 0 when history was not recorded

Example:
    >>> import numpy as np
    >>> from rw_core.world import ReflectingWorld
    >>> world = ReflectingWorld().add_inward_box(0.0, 1.0, 0.0, 1.0)
    >>> case = CaseData(params={"nreals": 1}, world=world, positions=np.array([[0.5, 0.5]]))
    >>> save_sim_hdf5("/tmp/rw_example.h5", {"S1": {"case0": case}})
    >>> loaded, meta = load_sim_hdf5("/tmp/rw_example.h5")
    >>> len(loaded["S1"]["case0"].world), meta.max_reflections
    (4, 64)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
from typing import Any, Dict, Mapping, Tuple

import h5py
import numpy as np

from rw_core.geometry import EPS_DIR, EPS_POS, Vec2
from rw_core.simulation import Simulation, SimulationConfig
from rw_core.steps import BrownianParams
from rw_core.surfaces import WallSegment
from rw_core.tracer import MAX_REFLECTIONS, advance_with_reflections
from rw_core.world import ReflectingWorld


@dataclass
class CaseData:
    params: Dict[str, Any]
    world: ReflectingWorld
    positions: np.ndarray
    history: np.ndarray = field(default_factory=lambda: np.zeros((0, 0, 2)))

    @classmethod
    def from_simulation(cls, params: Dict[str, Any], sim: Simulation) -> "CaseData":
        return cls(params=dict(params), world=sim.world, positions=sim.positions_array(), history=sim.history_array())


@dataclass
class Hdf5Meta:
    created_at: str
    eps_pos: float
    eps_dir: float
    max_reflections: int


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Unsupported JSON type: {type(obj)}")


def world_to_arrays(world: ReflectingWorld) -> Dict[str, np.ndarray]:
    walls = list(world)
    return {
        "p0": np.array([(w.p0.x, w.p0.y) for w in walls], dtype=np.float64).reshape(-1, 2),
        "p1": np.array([(w.p1.x, w.p1.y) for w in walls], dtype=np.float64).reshape(-1, 2),
        "n_hat": np.array([(w.n_hat.x, w.n_hat.y) for w in walls], dtype=np.float64).reshape(-1, 2),
        "wall_ids": np.array([w.wall_id for w in walls], dtype=np.int64),
    }


def world_from_arrays(p0: np.ndarray, p1: np.ndarray, n_hat: np.ndarray, wall_ids: np.ndarray) -> ReflectingWorld:
    """Rebuild a world in stored order. Stored normals are already unit length."""

    walls = [
        WallSegment(Vec2.of(a), Vec2.of(b), Vec2.of(n), int(i))
        for a, b, n, i in zip(p0, p1, n_hat, wall_ids)
    ]
    return ReflectingWorld.from_walls(walls)


def save_sim_hdf5(filepath: str, scenarios: Mapping[str, Mapping[str, CaseData]]) -> None:
    """Save simulation outputs to HDF5 using a fixed schema contract."""

    with h5py.File(filepath, "w") as h5:
        meta = h5.create_group("meta")
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["eps_pos"] = EPS_POS
        meta.attrs["eps_dir"] = EPS_DIR
        meta.attrs["max_reflections"] = MAX_REFLECTIONS

        g_scenarios = h5.create_group("scenarios")
        for scenario_id, cases in scenarios.items():
            g_cases = g_scenarios.create_group(str(scenario_id)).create_group("cases")
            for case_id, case in cases.items():
                g_case = g_cases.create_group(str(case_id))
                g_case.create_dataset("params_json", data=json.dumps(case.params, default=_json_default))

                g_world = g_case.create_group("world")
                for name, arr in world_to_arrays(case.world).items():
                    g_world.create_dataset(name, data=arr)

                positions = np.asarray(case.positions, dtype=np.float64).reshape(-1, 2)
                history = np.asarray(case.history, dtype=np.float64)
                if history.size == 0:
                    history = np.zeros((positions.shape[0], 0, 2), dtype=np.float64)
                g_case.create_dataset("positions", data=positions)
                g_case.create_dataset("history", data=history)


def load_sim_hdf5(filepath: str) -> Tuple[Dict[str, Dict[str, CaseData]], Hdf5Meta]:
    """Load simulation HDF5 and rebuild worlds and cases."""

    scenarios: Dict[str, Dict[str, CaseData]] = {}
    with h5py.File(filepath, "r") as h5:
        attrs = h5["meta"].attrs
        meta = Hdf5Meta(
            created_at=str(attrs.get("created_at", "")),
            eps_pos=float(attrs.get("eps_pos", EPS_POS)),
            eps_dir=float(attrs.get("eps_dir", EPS_DIR)),
            max_reflections=int(attrs.get("max_reflections", MAX_REFLECTIONS)),
        )

        for scenario_id, g_scenario in h5["scenarios"].items():
            scenarios[scenario_id] = {}
            for case_id, g_case in g_scenario["cases"].items():
                raw = g_case["params_json"][()]
                params = json.loads(raw.decode() if isinstance(raw, bytes) else raw)
                g_world = g_case["world"]
                world = world_from_arrays(
                    np.asarray(g_world["p0"][()], dtype=np.float64),
                    np.asarray(g_world["p1"][()], dtype=np.float64),
                    np.asarray(g_world["n_hat"][()], dtype=np.float64),
                    np.asarray(g_world["wall_ids"][()], dtype=np.int64),
                )
                scenarios[scenario_id][case_id] = CaseData(
                    params=params,
                    world=world,
                    positions=np.asarray(g_case["positions"][()], dtype=np.float64),
                    history=np.asarray(g_case["history"][()], dtype=np.float64),
                )

    return scenarios, meta


def self_test_roundtrip(filepath: str) -> bool:
    """Write->read self-test: stored results and re-advancing must be bit-identical."""

    world = ReflectingWorld().add_inward_box(0.0, 1.0, 0.0, 1.0, base_id=0)
    cfg = SimulationConfig(n_particles=4, n_steps=20, store_every=5, base_seed=7, brownian=BrownianParams(dt=0.05, D=1.0))
    sim = Simulation(world, cfg)
    sim.set_positions([(0.5, 0.5)] * 4)
    sim.run()

    save_sim_hdf5(filepath, {"selftest": {"case0": CaseData.from_simulation({"seed": 7}, sim)}})
    scenarios, _ = load_sim_hdf5(filepath)
    case = scenarios["selftest"]["case0"]

    same_pos = np.array_equal(case.positions, sim.positions_array())
    same_hist = np.array_equal(case.history, sim.history_array())
    probe = (Vec2(0.5, 0.5), Vec2(3.7, -2.9))
    same_world = advance_with_reflections(*probe, case.world) == advance_with_reflections(*probe, world)
    return bool(same_pos and same_hist and same_world)
