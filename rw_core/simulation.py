"""Multi-particle driver: draw a displacement per particle per step, then reflect it.

Example:
    >>> from rw_core.simulation import Simulation, SimulationConfig, StepType
    >>> from rw_core.world import ReflectingWorld
    >>> from rw_core.geometry import Vec2
    >>> sim = Simulation(ReflectingWorld(), SimulationConfig(n_particles=1, n_steps=3, record_history=False))
    >>> sim.set_step_type_all(StepType.SPECIFIED)
    >>> sim.set_specified_callback(lambda i, k, pos, rng: Vec2(1.0, 0.0))
    >>> sim.run()
    >>> sim.positions[0]
    Vec2(x=3.0, y=0.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from rw_core.geometry import Vec2, as_vec2
from rw_core.steps import BrownianParams, SpecifiedStepParams, brownian_step, make_rng, specified_step
from rw_core.tracer import advance_with_reflections
from rw_core.world import ReflectingWorld

SpecifiedCallback = Callable[[int, int, Vec2, np.random.Generator], Vec2]


class StepType(Enum):
    BROWNIAN = "brownian"
    SPECIFIED = "specified"


@dataclass
class SimulationConfig:
    n_particles: int = 1
    n_steps: int = 0
    record_history: bool = True
    store_every: int = 1  # keep 1 of every k frames
    base_seed: int = 5489
    deterministic: bool = True  # particle i seeded with base_seed + i
    brownian: BrownianParams = field(default_factory=BrownianParams)

    def __post_init__(self) -> None:
        if self.n_particles < 0:
            raise ValueError(f"n_particles must be >= 0, got {self.n_particles}")
        if self.n_steps < 0:
            raise ValueError(f"n_steps must be >= 0, got {self.n_steps}")
        if self.store_every < 1:
            raise ValueError(f"store_every must be >= 1, got {self.store_every}")


class Simulation:
    def __init__(self, world: ReflectingWorld, config: SimulationConfig) -> None:
        self._world = world.freeze()
        self._cfg = config
        n = config.n_particles
        self._pos: List[Vec2] = [Vec2(0.0, 0.0)] * n
        self._step_type: List[StepType] = [StepType.BROWNIAN] * n
        self._brownian: List[BrownianParams] = [config.brownian] * n
        self._spec_params: List[SpecifiedStepParams] = [SpecifiedStepParams()] * n
        self._specified_cb: Optional[SpecifiedCallback] = None
        if config.deterministic:
            self._rngs = [make_rng(config.base_seed + i) for i in range(n)]
        else:
            self._rngs = [make_rng() for _ in range(n)]
        self._hist: List[List[Vec2]] = []
        self._steps_taken = 0
        self._reset_history()

    def _reset_history(self) -> None:
        self._hist = [[p] for p in self._pos] if self._cfg.record_history else []

    def _check_index(self, i: int, what: str) -> None:
        if not 0 <= i < len(self._pos):
            raise IndexError(f"{what}: particle index {i} out of range [0, {len(self._pos)})")

    def set_step_type_all(self, step_type: StepType) -> None:
        self._step_type = [step_type] * len(self._pos)

    def set_step_type(self, i: int, step_type: StepType) -> None:
        self._check_index(i, "set_step_type")
        self._step_type[i] = step_type

    def set_brownian_params(self, i: int, params: BrownianParams) -> None:
        self._check_index(i, "set_brownian_params")
        self._brownian[i] = params

    def set_specified_params(self, i: int, params: SpecifiedStepParams) -> None:
        self._check_index(i, "set_specified_params")
        self._spec_params[i] = params

    def set_specified_params_all(self, params: SpecifiedStepParams) -> None:
        self._spec_params = [params] * len(self._pos)

    def set_specified_callback(self, cb: Optional[SpecifiedCallback]) -> None:
        self._specified_cb = cb

    def set_positions(self, positions: Sequence[Vec2 | Sequence[float]]) -> None:
        """Replace all positions and restart history at frame 0."""

        if len(positions) != len(self._pos):
            raise ValueError(f"set_positions: got {len(positions)} positions for {len(self._pos)} particles")
        self._pos = [as_vec2(p) for p in positions]
        self._reset_history()

    def set_position(self, i: int, position: Vec2 | Sequence[float]) -> None:
        """Set one start position; only valid before stepping."""

        self._check_index(i, "set_position")
        if self._steps_taken > 0:
            raise RuntimeError("set_position: called after stepping; use set_positions() instead")
        p = as_vec2(position)
        self._pos[i] = p
        if self._cfg.record_history:
            self._hist[i] = [p]

    def _displacement(self, i: int, k: int) -> Vec2:
        if self._step_type[i] is StepType.BROWNIAN:
            return brownian_step(self._brownian[i], self._rngs[i])
        if self._specified_cb is not None:
            return as_vec2(self._specified_cb(i, k, self._pos[i], self._rngs[i]))
        return specified_step(self._spec_params[i], k, self._pos[i], self._rngs[i])

    def run(self) -> None:
        """Advance every particle ``config.n_steps`` times. Repeated calls continue."""

        n = len(self._pos)
        if n == 0 or self._cfg.n_steps == 0:
            return
        record = self._cfg.record_history
        stride = self._cfg.store_every
        for _ in range(self._cfg.n_steps):
            k = self._steps_taken
            for i in range(n):
                d = self._displacement(i, k)
                self._pos[i] = advance_with_reflections(self._pos[i], d, self._world)
            self._steps_taken += 1
            if record and self._steps_taken % stride == 0:
                for i in range(n):
                    self._hist[i].append(self._pos[i])

    @property
    def positions(self) -> List[Vec2]:
        """Copy of the current positions."""

        return list(self._pos)

    @property
    def history(self) -> List[List[Vec2]]:
        """Copy of the stored frames, one list per particle."""

        return [list(h) for h in self._hist]

    @property
    def config(self) -> SimulationConfig:
        return self._cfg

    @property
    def world(self) -> ReflectingWorld:
        return self._world

    @property
    def steps_taken(self) -> int:
        return self._steps_taken

    def positions_array(self) -> NDArray[np.float64]:
        return np.array([(p.x, p.y) for p in self._pos], dtype=np.float64).reshape(-1, 2)

    def history_array(self) -> NDArray[np.float64]:
        """History as (N, F, 2); F is 0 when history is disabled."""

        if not self._hist:
            return np.zeros((len(self._pos), 0, 2), dtype=np.float64)
        return np.array([[(p.x, p.y) for p in h] for h in self._hist], dtype=np.float64).reshape(len(self._hist), -1, 2)
