"""Displacement sources consumed by the tracer.

Example:
    >>> from rw_core.steps import BrownianParams, brownian_step, make_rng
    >>> d = brownian_step(BrownianParams(dt=0.5, D=0.0, mu_x=1.0), make_rng(1))
    >>> (d.x, d.y)
    (0.5, 0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from rw_core.geometry import Vec2


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded generator, or OS entropy when ``seed`` is None."""

    return np.random.default_rng(seed)


@dataclass(frozen=True)
class BrownianParams:
    dt: float = 1.0
    D: float = 1.0
    mu_x: float = 0.0
    mu_y: float = 0.0

    def __post_init__(self) -> None:
        if not self.dt > 0.0:
            raise ValueError(f"BrownianParams.dt must be > 0, got {self.dt}")
        if not self.D >= 0.0:
            raise ValueError(f"BrownianParams.D must be >= 0, got {self.D}")


def brownian_step(p: BrownianParams, rng: np.random.Generator) -> Vec2:
    """Euler-Maruyama increment: mu*dt + sqrt(2 D dt) * N(0, 1) per axis (x drawn first)."""

    sigma = math.sqrt(2.0 * p.D * p.dt)
    dx = p.mu_x * p.dt + sigma * float(rng.standard_normal())
    dy = p.mu_y * p.dt + sigma * float(rng.standard_normal())
    return Vec2(dx, dy)


@dataclass(frozen=True)
class SpecifiedStepParams:
    dt: float = 1.0
    D: float = 1.0
    diff_scale: float = 1.0  # <= 0 lets the step policy choose
    k: int = 1


def specified_step(
    p: SpecifiedStepParams,
    step_index: int,
    position: Vec2,
    rng: np.random.Generator,
) -> Vec2:
    """Position-dependent step model.

    No built-in policy ships with the package; register a callback on
    ``Simulation.set_specified_callback`` instead.
    """

    raise NotImplementedError(
        "specified_step has no built-in policy; supply a callback "
        "(particle_index, step_index, position, rng) -> Vec2"
    )
