"""Unit box [0,1]^2 with inward normals."""

from __future__ import annotations

from rw_core.world import ReflectingWorld
from scenarios.common import default_case, run_simulation

BOUNDED = True
HIST_BOUNDS = (0.0, 1.0, 0.0, 1.0)


def build_world(size: float = 1.0):
    return ReflectingWorld().add_inward_box(0.0, size, 0.0, size, base_id=100)


def build_sweep_params():
    return [
        default_case("s1_short", tf=0.05, D=1.0),
        default_case("s1_long", tf=1.0, D=5.0, x0=0.1, y0=0.9),
    ]


def run_case(params):
    world = build_world(float(params.get("size", 1.0)))
    return world, run_simulation(world, params)
