from __future__ import annotations

from rw_core.world import ReflectingWorld
from scenarios.common import default_case, run_simulation

BOUNDED = False


def build_world():
    return ReflectingWorld()


def build_sweep_params():
    return [
        default_case("s0_d1", D=1.0, x0=0.0, y0=0.0),
        default_case("s0_d5", D=5.0, x0=0.0, y0=0.0),
    ]


def run_case(params):
    world = build_world()
    return world, run_simulation(world, params)
