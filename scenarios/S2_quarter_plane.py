"""Quarter plane x >= 0, y >= 0 built from two long strips."""

from __future__ import annotations

from rw_core.world import ReflectingWorld
from scenarios.common import default_case, run_simulation

BOUNDED = True


def build_world(span: float = 1e6):
    return (
        ReflectingWorld()
        .add_half_plane_strip((0.0, 1.0), 0.0, span=span, wall_id=200)
        .add_half_plane_strip((1.0, 0.0), 0.0, span=span, wall_id=201)
    )


def build_sweep_params():
    return [
        default_case("s2_near_corner", x0=0.1, y0=0.1),
        default_case("s2_far", D=5.0, x0=0.5, y0=0.5),
    ]


def run_case(params):
    world = build_world(float(params.get("span", 1e6)))
    return world, run_simulation(world, params)
