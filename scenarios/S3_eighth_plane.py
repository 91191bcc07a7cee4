"""Eighth plane 0 <= y <= x: the x-axis and the diagonal y = x."""

from __future__ import annotations

import numpy as np

from rw_core.world import ReflectingWorld
from scenarios.common import default_case, run_simulation

BOUNDED = True


def build_world(span: float = 1e6):
    diag = (1.0 / np.sqrt(2.0), -1.0 / np.sqrt(2.0))
    return (
        ReflectingWorld()
        .add_half_plane_strip((0.0, 1.0), 0.0, span=span, wall_id=200)
        .add_half_plane_strip(diag, 0.0, span=span, wall_id=201)
    )


def build_sweep_params():
    return [
        default_case("s3_near_apex", x0=0.2, y0=0.1),
        default_case("s3_far", D=5.0, x0=1.0, y0=0.5),
    ]


def run_case(params):
    world = build_world(float(params.get("span", 1e6)))
    return world, run_simulation(world, params)
